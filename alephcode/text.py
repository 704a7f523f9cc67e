from __future__ import annotations

import re
import unicodedata

# Hyphen, en dash, em dash and the Hebrew maqaf all separate words.
HYPHEN_RE = re.compile(r"[\u05BE\u2013\u2014\-]")
HEB_LETTER_RE = re.compile(r"[\u05D0-\u05EA]")
# Cantillation and niqqud, leaving out the maqaf (U+05BE).
HEB_MARKS_RE = re.compile(r"[\u0591-\u05BD\u05BF-\u05C7]")
_INPUT_PUNCT_TO_SPACE_RE = re.compile(r"[^\u05D0-\u05EA\n ]+")
_INPUT_MULTI_SPACE_RE = re.compile(r" {2,}")
_LEADING_SPACE_RE = re.compile(r"\n +")

# Latin key -> Hebrew letter on the standard Israeli keyboard layout.
EN_TO_HE_MAP: dict[str, str] = {
    "q": "/",
    "w": "'",
    "e": "ק",
    "r": "ר",
    "t": "א",
    "y": "ט",
    "u": "ו",
    "i": "ן",
    "o": "ם",
    "p": "פ",
    "[": "]",
    "]": "[",
    "a": "ש",
    "s": "ד",
    "d": "ג",
    "f": "כ",
    "g": "ע",
    "h": "י",
    "j": "ח",
    "k": "ל",
    "l": "ך",
    "z": "ז",
    "x": "ס",
    "c": "ב",
    "v": "ה",
    "b": "נ",
    "n": "מ",
    "m": "צ",
}


def strip_marks(raw: str) -> str:
    return HEB_MARKS_RE.sub("", unicodedata.normalize("NFKD", raw))


def clean_token(raw: str) -> str:
    """
    Reduce a raw token to its Hebrew letters only.

    - Unicode-normalizes (NFKD) so presentation forms split into letter + mark
    - Removes niqqud and cantillation
    - Drops everything that is not a Hebrew letter (final forms included)
    """
    if not raw:
        return ""
    return "".join(HEB_LETTER_RE.findall(strip_marks(str(raw))))


def force_hebrew_input(raw: str) -> str:
    """
    Turn text typed on a Latin keyboard into Hebrew.

    Every Latin key is replaced by the Hebrew letter on the same key, then any
    run of non-letters (punctuation, hyphens, maqaf, digits) becomes a single
    space. Line breaks are kept; spaces at the start of a line are dropped.

    Example:
      force_hebrew_input("abc,def---ghi") == "שנב גקכ עין"
    """
    if not raw:
        return ""
    mapped = "".join(EN_TO_HE_MAP.get(ch.lower(), ch) for ch in strip_marks(str(raw)))
    out = mapped.replace("\r", "")
    out = _INPUT_PUNCT_TO_SPACE_RE.sub(" ", out)
    out = _INPUT_MULTI_SPACE_RE.sub(" ", out)
    return _LEADING_SPACE_RE.sub("\n", out)


def split_lines(text: str) -> list[str]:
    """Non-blank lines of `text`, as typed."""
    return [line for line in text.split("\n") if line.strip()]


def split_tokens(line: str) -> list[str]:
    """Raw word tokens of one line; hyphen-like characters separate words."""
    return HYPHEN_RE.sub(" ", line).split()
