from __future__ import annotations

from flask import current_app
from marshmallow import Schema, fields, post_load, validate

from .analysis import compute_stats, dr_clusters
from .filters import Filters
from .letters import Mode

MODE_CHOICES = [m.value for m in Mode]


def _default_mode() -> str:
    return current_app.config.get("DEFAULT_MODE", Mode.ALEPH_ZERO.value)


class ModeField(fields.String):
    """Mode name on the wire, `Mode` in Python."""

    def __init__(self, **kwargs):
        super().__init__(validate=validate.OneOf(MODE_CHOICES), **kwargs)

    def _serialize(self, value, attr, obj, **kwargs):
        if isinstance(value, Mode):
            value = value.value
        return super()._serialize(value, attr, obj, **kwargs)


class FiltersSchema(Schema):
    U = fields.Boolean(load_default=True)
    T = fields.Boolean(load_default=True)
    H = fields.Boolean(load_default=True)
    Prime = fields.Boolean(load_default=False)

    @post_load
    def make_filters(self, data, **kwargs):
        return Filters(**data)


class ModeQueryArgsSchema(Schema):
    mode = ModeField(load_default=_default_mode)


class LetterSchema(Schema):
    letter = fields.String(required=True)
    final = fields.Boolean(required=True)
    units = fields.Integer(required=True)
    tens = fields.Integer(required=True)
    hundreds = fields.Integer(required=True)


class LetterTableSchema(Schema):
    mode = ModeField(required=True)
    letters = fields.List(fields.Nested(LetterSchema), required=True)


class InputQueryArgsSchema(Schema):
    raw = fields.String(required=True)


class InputResponseSchema(Schema):
    text = fields.String(required=True)


class WordResultSchema(Schema):
    word = fields.String(required=True)
    units = fields.Integer(required=True)
    tens = fields.Integer(required=True)
    hundreds = fields.Integer(required=True)
    dr = fields.Integer(required=True)
    is_prime_u = fields.Boolean(data_key="isPrimeU")
    is_prime_t = fields.Boolean(data_key="isPrimeT")
    is_prime_h = fields.Boolean(data_key="isPrimeH")
    max_layer = fields.String(data_key="maxLayer")


class BandTotalsSchema(Schema):
    units = fields.Integer()
    tens = fields.Integer()
    hundreds = fields.Integer()


class PrimeFlagsSchema(Schema):
    U = fields.Boolean()
    T = fields.Boolean()
    H = fields.Boolean()


class LineResultSchema(Schema):
    line_text = fields.String(data_key="lineText")
    words = fields.List(fields.Nested(WordResultSchema))
    totals = fields.Nested(BandTotalsSchema)
    totals_dr = fields.Integer(data_key="totalsDR")
    is_prime_totals = fields.Nested(PrimeFlagsSchema, data_key="isPrimeTotals")
    line_max_layer = fields.String(data_key="lineMaxLayer")


class GrandTotalsSchema(BandTotalsSchema):
    dr = fields.Integer()
    is_prime = fields.Nested(PrimeFlagsSchema, data_key="isPrime")


class PrimeSummaryEntrySchema(Schema):
    line = fields.Integer()
    value = fields.Integer()
    layers = fields.List(fields.String())


class StatsSchema(Schema):
    total_lines = fields.Integer(data_key="totalLines")
    total_words = fields.Integer(data_key="totalWords")
    unique_words = fields.Integer(data_key="uniqueWords")
    prime_line_totals = fields.Integer(data_key="primeLineTotals")
    dr_distribution = fields.List(fields.Integer(), data_key="drDistribution")


class AnalysisResultSchema(Schema):
    """
    AnalysisResult on the wire.

    `wordDataMap` is not sent (it is `allWords` keyed by word); `stats` and
    `drClusters` are derived from the result when dumping.
    """

    lines = fields.List(fields.Nested(LineResultSchema))
    grand_totals = fields.Nested(GrandTotalsSchema, data_key="grandTotals")
    prime_summary = fields.List(fields.Nested(PrimeSummaryEntrySchema), data_key="primeSummary")
    all_words = fields.List(fields.Nested(WordResultSchema), data_key="allWords")
    dr_distribution = fields.List(fields.Integer(), data_key="drDistribution")
    total_word_count = fields.Integer(data_key="totalWordCount")
    word_counts = fields.Dict(keys=fields.String(), values=fields.Integer(), data_key="wordCounts")
    stats = fields.Method("dump_stats")
    dr_clusters = fields.Method("dump_dr_clusters", data_key="drClusters")

    def dump_stats(self, obj):
        return StatsSchema().dump(compute_stats(obj))

    def dump_dr_clusters(self, obj):
        words = WordResultSchema(many=True)
        return {str(dr): words.dump(group) for dr, group in dr_clusters(obj).items()}


class AnalyzeRequestSchema(Schema):
    request_id = fields.Integer(load_default=None, allow_none=True, data_key="requestId")
    text = fields.String(required=True)
    mode = ModeField(load_default=_default_mode)


class AnalyzeResponseSchema(Schema):
    request_id = fields.Integer(allow_none=True, data_key="requestId")
    results = fields.Nested(AnalysisResultSchema, allow_none=True)
    error = fields.String(allow_none=True)


class WordValuesRequestSchema(Schema):
    word = fields.String(required=True)
    mode = ModeField(load_default=_default_mode)
    filters = fields.Nested(FiltersSchema, load_default=Filters)


class WordValueSchema(Schema):
    value = fields.Integer()
    is_prime = fields.Boolean(data_key="isPrime")
    layer = fields.String()


class LetterDetailSchema(Schema):
    char = fields.String()
    value = fields.Integer()


class WordValuesResponseSchema(Schema):
    word = fields.Nested(WordResultSchema)
    values = fields.List(fields.Nested(WordValueSchema))
    letters = fields.List(fields.Nested(LetterDetailSchema))
    available_layers = fields.List(fields.String(), data_key="availableLayers")
    visible = fields.Boolean()


class LayoutRequestSchema(Schema):
    text = fields.String(required=True)
    mode = ModeField(load_default=_default_mode)
    filters = fields.Nested(FiltersSchema, load_default=Filters)
    width = fields.Float(load_default=800.0, validate=validate.Range(min=1))
    height = fields.Float(load_default=600.0, validate=validate.Range(min=1))
    max_ticks = fields.Integer(load_default=None, allow_none=True, data_key="maxTicks", validate=validate.Range(min=0))
    seed = fields.Integer(load_default=0)


class GraphNodeSchema(Schema):
    id = fields.String()
    type = fields.String()
    x = fields.Float()
    y = fields.Float()
    label = fields.Method("dump_label")

    def dump_label(self, obj):
        return obj.payload.get("label")


class GraphLinkSchema(Schema):
    source = fields.String()
    target = fields.String()
    layer = fields.String()


class LayoutResponseSchema(Schema):
    nodes = fields.List(fields.Nested(GraphNodeSchema))
    links = fields.List(fields.Nested(GraphLinkSchema))
    ticks = fields.Integer()
    alpha = fields.Float()
    converged = fields.Boolean()
