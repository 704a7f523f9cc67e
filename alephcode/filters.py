from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from .gematria import Layer, WordResult

LAYER_PRIORITY: tuple[Layer, ...] = ("H", "T", "U")

LAYERS_U: tuple[Layer, ...] = ("U",)
LAYERS_UT: tuple[Layer, ...] = ("U", "T")
LAYERS_UTH: tuple[Layer, ...] = ("U", "T", "H")


@dataclass(frozen=True)
class Filters:
    """Which bands are shown, and whether only prime values are shown."""

    U: bool = True
    T: bool = True
    H: bool = True
    Prime: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, bool] | None) -> "Filters":
        if not data:
            return cls()
        return cls(**{k: bool(v) for k, v in data.items() if k in ("U", "T", "H", "Prime")})

    def toggle(self, key: str) -> "Filters":
        if key not in ("U", "T", "H", "Prime"):
            raise KeyError(f"Unknown filter {key!r}")
        values = {"U": self.U, "T": self.T, "H": self.H, "Prime": self.Prime}
        values[key] = not values[key]
        return Filters(**values)

    def layer_on(self, layer: Layer) -> bool:
        return bool(getattr(self, layer))


@dataclass(frozen=True)
class WordValue:
    value: int
    is_prime: bool
    layer: Layer


def get_word_values(word: WordResult) -> list[WordValue]:
    """
    The distinct band values of a word, highest band first.

    A band whose value equals the band below it is folded into that band.
    """
    out: list[WordValue] = []
    if word.hundreds != word.tens:
        out.append(WordValue(word.hundreds, word.is_prime_h, "H"))
    if word.tens != word.units:
        out.append(WordValue(word.tens, word.is_prime_t, "T"))
    out.append(WordValue(word.units, word.is_prime_u, "U"))
    return out


def is_value_visible(layer: Layer, is_prime: bool, filters: Filters) -> bool:
    if not filters.layer_on(layer):
        return False
    if filters.Prime and not is_prime:
        return False
    return True


def is_word_visible(word: WordResult, filters: Filters) -> bool:
    return any(is_value_visible(v.layer, v.is_prime, filters) for v in get_word_values(word))


def layers_matching(hovered: WordResult | None, current: WordResult | None) -> list[Layer]:
    """Bands of `current` whose value appears anywhere in `hovered`."""
    if hovered is None or current is None:
        return []
    hovered_values = {hovered.units, hovered.tens, hovered.hundreds}
    matches: list[Layer] = []
    if current.units in hovered_values:
        matches.append("U")
    if current.tens in hovered_values:
        matches.append("T")
    if current.hundreds in hovered_values:
        matches.append("H")
    return matches


def strongest_layer(layers: Sequence[Layer]) -> Layer | None:
    return next((layer for layer in LAYER_PRIORITY if layer in layers), None)


def available_layers(word: WordResult) -> tuple[Layer, ...]:
    if word.tens == word.units:
        return LAYERS_U
    if word.hundreds == word.tens:
        return LAYERS_UT
    return LAYERS_UTH


def top_connection_layer(source: WordResult | None, target: WordResult | None) -> Layer | None:
    """Highest band of `source` whose value is shared with any band of `target`."""
    if not layers_matching(source, target):
        return None
    return strongest_layer(layers_matching(target, source))
