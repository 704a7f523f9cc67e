from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .cache import LRUCache
from .letters import Mode, build_letter_table
from .primes import PrimeOracle
from .text import clean_token

Layer = Literal["U", "T", "H"]

MAX_WORD_CACHE_SIZE = 50_000
MAX_LETTER_DETAILS_CACHE_SIZE = 100_000


def digital_root(n: int) -> int:
    """
    Digital root of a non-negative integer: 0 for 0, otherwise 1..9
    (multiples of 9 map to 9).
    """
    return 0 if n == 0 else 1 + (n - 1) % 9


def layer_for_max_units(max_units: int) -> Layer:
    if max_units > 19:
        return "H"
    if max_units > 10:
        return "T"
    return "U"


@dataclass(frozen=True)
class WordResult:
    word: str
    units: int
    tens: int
    hundreds: int
    dr: int
    is_prime_u: bool
    is_prime_t: bool
    is_prime_h: bool
    max_layer: Layer


@dataclass(frozen=True)
class LetterDetail:
    char: str
    value: int


class WordComputer:
    """
    Memoized per-word computation.

    Results are cached by (mode, cleaned letters), so two raw tokens that
    clean to the same letters share one WordResult, and switching modes never
    serves a stale value.
    """

    def __init__(
        self,
        oracle: PrimeOracle,
        cache_size: int = MAX_WORD_CACHE_SIZE,
        letter_details_cache_size: int = MAX_LETTER_DETAILS_CACHE_SIZE,
    ):
        self.oracle = oracle
        self.cache_limit = cache_size
        self.letter_details_limit = letter_details_cache_size
        self._cache: LRUCache[tuple[Mode, str], WordResult | None] = LRUCache(cache_size, name="word-cache")
        self._details: LRUCache[tuple[Mode, str], tuple[LetterDetail, ...]] = LRUCache(
            letter_details_cache_size, name="letter-details-cache"
        )

    def compute(self, raw_word: str, mode: Mode | str) -> WordResult | None:
        """
        Values of one raw token under `mode`, or None when it has no Hebrew letters.
        """
        cleaned = clean_token(raw_word)
        if not cleaned:
            return None

        mode = Mode.parse(mode)
        key = (mode, cleaned)
        if key in self._cache:
            return self._cache.get(key)

        result = self._compute_cleaned(cleaned, mode)
        self._cache.put(key, result)
        return result

    __call__ = compute

    def _compute_cleaned(self, cleaned: str, mode: Mode) -> WordResult | None:
        table = build_letter_table(mode)
        units = tens = hundreds = 0
        max_units = -1
        letters: list[str] = []

        for ch in cleaned:
            rec = table.get(ch)
            if rec is None:
                continue
            letters.append(ch)
            units += rec.units
            tens += rec.tens
            hundreds += rec.hundreds
            max_units = max(max_units, rec.units)

        if not letters:
            return None

        is_prime = self.oracle.is_prime
        return WordResult(
            word="".join(letters),
            units=units,
            tens=tens,
            hundreds=hundreds,
            dr=digital_root(units),
            is_prime_u=is_prime(units),
            # A band equal to the one below it is reported once, on the lower band.
            is_prime_t=tens != units and is_prime(tens),
            is_prime_h=hundreds != tens and is_prime(hundreds),
            max_layer=layer_for_max_units(max_units),
        )

    def letter_details(self, word: str, mode: Mode | str) -> tuple[LetterDetail, ...]:
        """Per-letter units values of `word`, e.g. for a "1+2+3" breakdown."""
        mode = Mode.parse(mode)
        key = (mode, word)
        hit = self._details.get(key)
        if hit is not None:
            return hit

        table = build_letter_table(mode)
        details = tuple(LetterDetail(ch, table[ch].units) for ch in word if ch in table)
        self._details.put(key, details)
        return details

    def clear_letter_details(self) -> None:
        self._details.clear()

    def clear(self) -> None:
        self._cache.clear()
        self._details.clear()

    @property
    def cache_size(self) -> int:
        return len(self._cache)
