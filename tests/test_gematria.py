import pytest

from alephcode.gematria import LetterDetail, WordComputer, digital_root
from alephcode.primes import PrimeOracle
from alephcode.text import force_hebrew_input


@pytest.mark.parametrize("n, expected", [(0, 0), (9, 9), (18, 9), (10, 1), (1, 1), (376, 7)])
def test_digital_root(n, expected):
    assert digital_root(n) == expected


def test_digital_root_range():
    assert all(0 <= digital_root(n) <= 9 for n in range(0, 5000))


def test_word_values_aleph_one(computer):
    wd = computer.compute("אבג", "aleph-one")
    assert (wd.word, wd.units, wd.tens, wd.hundreds, wd.dr) == ("אבג", 6, 6, 6, 6)


def test_word_values_depend_on_mode(computer):
    assert computer.compute("אבג", "aleph-zero").units == 3
    assert computer.compute("אבג", "aleph-one").units == 6


def test_tokens_without_letters_yield_none(computer):
    assert computer.compute("", "aleph-one") is None
    assert computer.compute("123", "aleph-one") is None
    assert computer.compute("?!", "aleph-zero") is None


def test_aleph_alone_under_aleph_zero_is_a_word(computer):
    wd = computer.compute("א", "aleph-zero")
    assert wd is not None
    assert wd.units == 0
    assert wd.dr == 0


def test_same_cleaned_letters_share_one_result(computer):
    plain = computer.compute("בראשית", "aleph-one")
    pointed = computer.compute("בְּרֵאשִׁית", "aleph-one")
    assert pointed is plain


def test_keyboard_input_matches_hebrew(computer):
    typed = computer.compute(force_hebrew_input("cr"), "aleph-one")
    hebrew = computer.compute("בר", "aleph-one")
    assert (typed.word, typed.units, typed.tens, typed.hundreds, typed.dr) == (
        hebrew.word,
        hebrew.units,
        hebrew.tens,
        hebrew.hundreds,
        hebrew.dr,
    )


def test_tens_prime_suppressed_when_equal_to_units(computer):
    wd = computer.compute("ג", "aleph-one")
    assert wd.units == wd.tens == 3
    assert wd.is_prime_u is True
    assert wd.is_prime_t is False
    assert wd.is_prime_h is False


def test_hundreds_prime_suppressed_when_equal_to_tens(computer):
    wd = computer.compute("אל", "aleph-one")
    assert (wd.units, wd.tens, wd.hundreds) == (13, 31, 31)
    assert wd.is_prime_u is True
    assert wd.is_prime_t is True
    assert wd.is_prime_h is False


def test_suppression_holds_across_words(computer):
    for token in ["אב", "גד", "הוז", "חטי", "כלמ", "נסע", "פצק", "רשת", "שלום", "ירושלים"]:
        for mode in ("aleph-zero", "aleph-one"):
            wd = computer.compute(token, mode)
            if wd.tens == wd.units:
                assert wd.is_prime_t is False
            if wd.hundreds == wd.tens:
                assert wd.is_prime_h is False


@pytest.mark.parametrize("word, layer", [("י", "U"), ("כ", "T"), ("ת", "H"), ("אבת", "H")])
def test_max_layer(computer, word, layer):
    assert computer.compute(word, "aleph-one").max_layer == layer


def test_cache_is_bounded():
    computer = WordComputer(PrimeOracle(), cache_size=2)
    for word in ("אב", "גד", "הו"):
        computer.compute(word, "aleph-one")
    assert computer.cache_size == 2


def test_letter_details(computer):
    assert computer.letter_details("אבג", "aleph-one") == (
        LetterDetail("א", 1),
        LetterDetail("ב", 2),
        LetterDetail("ג", 3),
    )
    assert computer.letter_details("אבג", "aleph-zero")[0].value == 0
