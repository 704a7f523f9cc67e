from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field

from .filters import Filters, get_word_values, is_value_visible
from .gematria import Layer, WordComputer, WordResult, digital_root
from .letters import Mode
from .primes import PrimeOracle
from .text import split_lines, split_tokens

logger = logging.getLogger(__name__)

# Display names of the bands, as shown next to prime line totals.
LAYER_NAMES: dict[Layer, str] = {"U": "אחדות", "T": "עשרות", "H": "מאות"}


@dataclass(frozen=True)
class BandTotals:
    units: int = 0
    tens: int = 0
    hundreds: int = 0


@dataclass(frozen=True)
class PrimeFlags:
    U: bool = False
    T: bool = False
    H: bool = False


@dataclass(frozen=True)
class LineResult:
    line_text: str
    words: list[WordResult]
    totals: BandTotals
    totals_dr: int
    is_prime_totals: PrimeFlags
    line_max_layer: Layer


@dataclass(frozen=True)
class GrandTotals:
    units: int
    tens: int
    hundreds: int
    dr: int
    is_prime: PrimeFlags


@dataclass(frozen=True)
class PrimeSummaryEntry:
    line: int
    value: int
    layers: list[Layer]


@dataclass(frozen=True)
class AnalysisResult:
    lines: list[LineResult]
    grand_totals: GrandTotals
    prime_summary: list[PrimeSummaryEntry]
    all_words: list[WordResult]
    word_data_map: dict[str, WordResult]
    dr_distribution: list[int]
    total_word_count: int
    word_counts: Counter = field(default_factory=Counter)


@dataclass(frozen=True)
class Stats:
    total_lines: int
    total_words: int
    unique_words: int
    prime_line_totals: int
    dr_distribution: list[int]


class AnalysisPipeline:
    """
    Whole-text analysis: lines, totals, prime summary, word frequencies and
    the digital-root histogram.

    Every call recomputes from scratch; the word cache of the injected
    WordComputer absorbs the cost of words seen before.
    """

    def __init__(self, oracle: PrimeOracle | None = None, computer: WordComputer | None = None):
        self.oracle = oracle or (computer.oracle if computer else PrimeOracle())
        self.computer = computer or WordComputer(self.oracle)

    def _line_primes(self, totals: BandTotals) -> PrimeFlags:
        is_prime = self.oracle.is_prime
        return PrimeFlags(
            U=is_prime(totals.units),
            T=totals.tens != totals.units and is_prime(totals.tens),
            H=totals.hundreds != totals.tens and is_prime(totals.hundreds),
        )

    def compute_core_results(self, text: str, mode: Mode | str) -> AnalysisResult:
        mode = Mode.parse(mode)
        self.computer.clear_letter_details()

        lines: list[LineResult] = []
        prime_summary: list[PrimeSummaryEntry] = []
        word_map: dict[str, WordResult] = {}
        word_counts: Counter = Counter()
        dr_distribution = [0] * 10
        grand_u = grand_t = grand_h = 0
        total_word_count = 0

        for line_no, line_text in enumerate(split_lines(text or ""), start=1):
            words: list[WordResult] = []
            line_u = line_t = line_h = 0
            line_max_layer: Layer = "U"

            for raw in split_tokens(line_text):
                wd = self.computer.compute(raw, mode)
                if wd is None:
                    continue

                total_word_count += 1
                words.append(wd)
                line_u += wd.units
                line_t += wd.tens
                line_h += wd.hundreds

                if wd.max_layer == "H":
                    line_max_layer = "H"
                elif wd.max_layer == "T" and line_max_layer != "H":
                    line_max_layer = "T"

                word_map.setdefault(wd.word, wd)
                dr_distribution[wd.dr] += 1
                word_counts[wd.word] += 1

            grand_u += line_u
            grand_t += line_t
            grand_h += line_h

            totals = BandTotals(line_u, line_t, line_h)
            self.oracle.grow_to(max(line_u, line_t, line_h))
            flags = self._line_primes(totals)

            # One entry per distinct prime value; equal bands share an entry.
            line_primes: dict[int, list[Layer]] = {}
            for layer, value, flag in (("U", line_u, flags.U), ("T", line_t, flags.T), ("H", line_h, flags.H)):
                if flag:
                    line_primes.setdefault(value, []).append(layer)
            prime_summary.extend(
                PrimeSummaryEntry(line=line_no, value=value, layers=layers) for value, layers in line_primes.items()
            )

            lines.append(
                LineResult(
                    line_text=line_text,
                    words=words,
                    totals=totals,
                    totals_dr=digital_root(line_u),
                    is_prime_totals=flags,
                    line_max_layer=line_max_layer,
                )
            )

        self.oracle.grow_to(max(grand_u, grand_t, grand_h))
        is_prime = self.oracle.is_prime
        grand_totals = GrandTotals(
            units=grand_u,
            tens=grand_t,
            hundreds=grand_h,
            dr=digital_root(grand_u),
            is_prime=PrimeFlags(U=is_prime(grand_u), T=is_prime(grand_t), H=is_prime(grand_h)),
        )

        logger.debug(f"Analyzed {len(lines)} lines, {total_word_count} words ({mode.value})")
        return AnalysisResult(
            lines=lines,
            grand_totals=grand_totals,
            prime_summary=prime_summary,
            all_words=list(word_map.values()),
            word_data_map=word_map,
            dr_distribution=dr_distribution,
            total_word_count=total_word_count,
            word_counts=word_counts,
        )

    __call__ = compute_core_results


def compute_core_results(text: str, mode: Mode | str, pipeline: AnalysisPipeline | None = None) -> AnalysisResult:
    """One-off analysis; pass a long-lived `pipeline` to reuse its sieve and word cache."""
    return (pipeline or AnalysisPipeline()).compute_core_results(text, mode)


def compute_stats(result: AnalysisResult) -> Stats:
    return Stats(
        total_lines=len(result.lines),
        total_words=result.total_word_count,
        unique_words=len(result.all_words),
        prime_line_totals=len({p.line for p in result.prime_summary}),
        dr_distribution=list(result.dr_distribution),
    )


def value_to_words(result: AnalysisResult) -> dict[int, list[WordResult]]:
    """Every distinct band value -> the unique words carrying it."""
    out: dict[int, list[WordResult]] = {}
    for wd in result.all_words:
        values = [wd.units]
        if wd.tens != wd.units:
            values.append(wd.tens)
        if wd.hundreds != wd.tens and wd.hundreds != wd.units:
            values.append(wd.hundreds)
        for value in values:
            out.setdefault(value, []).append(wd)
    return out


def connection_values(result: AnalysisResult, filters: Filters) -> set[int]:
    """Values visible under `filters` that link two or more unique words."""
    counts: Counter = Counter()
    for wd in result.all_words:
        seen: set[int] = set()
        for v in get_word_values(wd):
            if not is_value_visible(v.layer, v.is_prime, filters) or v.value in seen:
                continue
            seen.add(v.value)
            counts[v.value] += 1
    return {value for value, count in counts.items() if count > 1}


def dr_clusters(result: AnalysisResult, search_term: str = "") -> dict[int, list[WordResult]]:
    """Unique words grouped by digital root 1..9, each group ordered by units value."""
    clusters: dict[int, list[WordResult]] = {dr: [] for dr in range(1, 10)}
    for wd in result.all_words:
        if wd.dr > 0 and search_term in wd.word:
            clusters[wd.dr].append(wd)
    for words in clusters.values():
        words.sort(key=lambda w: w.units)
    return clusters
