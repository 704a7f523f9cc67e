from alephcode.text import clean_token, force_hebrew_input, split_lines, split_tokens


def test_clean_token_strips_niqqud_and_cantillation():
    assert clean_token("בְּרֵאשִׁ֖ית") == "בראשית"


def test_clean_token_drops_non_letters():
    assert clean_token("(שָׁלוֹם!)") == "שלום"
    assert clean_token("abc123") == ""
    assert clean_token("") == ""


def test_clean_token_keeps_final_forms():
    assert clean_token("הָאָרֶץ") == "הארץ"


def test_clean_token_splits_presentation_forms():
    # U+FB2E is alef with patah as one code point.
    assert clean_token("אַ") == "א"


def test_force_hebrew_input_maps_keyboard_and_collapses_punctuation():
    assert force_hebrew_input("abc,def---ghi") == "שנב גקכ עין"


def test_force_hebrew_input_is_case_insensitive():
    assert force_hebrew_input("ABC") == force_hebrew_input("abc")


def test_force_hebrew_input_keeps_hebrew_and_newlines():
    assert force_hebrew_input("שלום\n  עולם") == "שלום\nעולם"


def test_force_hebrew_input_treats_maqaf_as_space():
    assert force_hebrew_input("כל־העם") == "כל העם"


def test_split_lines_skips_blank_lines():
    assert split_lines("א\n\n   \nב") == ["א", "ב"]
    assert split_lines("   ") == []


def test_split_tokens_breaks_on_hyphens_and_maqaf():
    assert split_tokens("כל־העם  בית-לחם – עיר") == ["כל", "העם", "בית", "לחם", "עיר"]
