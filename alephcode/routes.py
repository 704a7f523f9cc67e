from __future__ import annotations

import logging

from flask import abort, current_app
from flask.views import MethodView

from .extensions import get_worker
from .filters import available_layers, get_word_values, is_word_visible
from .graph import build_graph
from .layout import ForceLayoutEngine, LayoutConfig
from .letters import HEB_FINALS, build_letter_table
from .schemas import (
    AnalyzeRequestSchema,
    AnalyzeResponseSchema,
    InputQueryArgsSchema,
    InputResponseSchema,
    LayoutRequestSchema,
    LayoutResponseSchema,
    LetterTableSchema,
    ModeQueryArgsSchema,
    WordValuesRequestSchema,
    WordValuesResponseSchema,
)
from .text import force_hebrew_input

from flask_smorest import Blueprint

logger = logging.getLogger(__name__)

blp = Blueprint("alephcode", __name__, url_prefix="/", description="Gematria analysis endpoints")


@blp.route("/letters")
class LetterTable(MethodView):
    @blp.arguments(ModeQueryArgsSchema, location="query")
    @blp.response(200, LetterTableSchema)
    def get(self, args):
        """
        Letter values (units, tens, hundreds) under the requested mode.
        """
        table = build_letter_table(args["mode"])
        letters = [
            {"letter": ch, "final": ch in HEB_FINALS, "units": rec.units, "tens": rec.tens, "hundreds": rec.hundreds}
            for ch, rec in table.items()
        ]
        return {"mode": args["mode"], "letters": letters}


@blp.route("/input")
class HebrewInput(MethodView):
    @blp.arguments(InputQueryArgsSchema, location="query")
    @blp.response(200, InputResponseSchema)
    def get(self, args):
        """
        Map Latin keyboard input to Hebrew letters and collapse punctuation.
        """
        return {"text": force_hebrew_input(args["raw"])}


@blp.route("/analyze")
class Analyze(MethodView):
    """
    Full analysis of a text: per-line breakdown, grand totals, prime line
    totals, word frequencies and the digital-root distribution.

    Mirrors the worker message contract:
      {requestId, text, mode} -> {requestId, results} | {requestId, error}
    """

    @blp.arguments(AnalyzeRequestSchema)
    @blp.response(200, AnalyzeResponseSchema)
    def post(self, payload):
        message = {"requestId": payload["request_id"], "text": payload["text"], "mode": payload["mode"]}
        response = get_worker().request(message, timeout=current_app.config["ANALYSIS_TIMEOUT"])
        if "error" in response:
            logger.error(f"Analysis request {payload['request_id']} failed: {response['error']}")
        return {
            "request_id": response.get("requestId"),
            "results": response.get("results"),
            "error": response.get("error"),
        }


@blp.route("/words/values")
class WordValues(MethodView):
    @blp.arguments(WordValuesRequestSchema)
    @blp.response(200, WordValuesResponseSchema)
    def post(self, payload):
        """
        Values of a single word, its distinct band values and per-letter breakdown.
        """
        computer = get_worker().pipeline.computer
        wd = computer.compute(payload["word"], payload["mode"])
        if wd is None:
            abort(404, description="Word has no Hebrew letters")

        return {
            "word": wd,
            "values": get_word_values(wd),
            "letters": computer.letter_details(wd.word, payload["mode"]),
            "available_layers": list(available_layers(wd)),
            "visible": is_word_visible(wd, payload["filters"]),
        }


@blp.route("/layout")
class Layout(MethodView):
    @blp.arguments(LayoutRequestSchema)
    @blp.response(200, LayoutResponseSchema)
    def post(self, payload):
        """
        Force-directed positions for the word/value network of a text.
        """
        result = get_worker().pipeline.compute_core_results(payload["text"], payload["mode"])
        graph = build_graph(
            result, payload["filters"], width=payload["width"], height=payload["height"], seed=payload["seed"]
        )
        engine = ForceLayoutEngine(graph, LayoutConfig(width=payload["width"], height=payload["height"]))

        max_ticks = payload["max_ticks"]
        if max_ticks is None:
            max_ticks = current_app.config["LAYOUT_MAX_TICKS"]
        ticks = engine.run(max_ticks)

        return {
            "nodes": engine.nodes,
            "links": engine.links,
            "ticks": ticks,
            "alpha": engine.alpha,
            "converged": not engine.running,
        }
