import pytest

from pestmeta.escapes import unescape


def test_unescape_all():
    assert unescape(r"a\nb\x55c\u{111}d") == "a\nb\x55c\u0111d"


def test_unescape_empty_escape():
    with pytest.raises(ValueError):
        unescape("\\")


def test_unescape_wrong_escape():
    with pytest.raises(ValueError):
        unescape(r"\w")


def test_unescape_backslash():
    assert unescape("\\\\") == "\\"


def test_unescape_return():
    assert unescape("\\r") == "\r"


def test_unescape_tab():
    assert unescape("\\t") == "\t"


def test_unescape_null():
    assert unescape("\\0") == "\0"


def test_unescape_single_quote():
    assert unescape("\\'") == "'"


def test_unescape_double_quote():
    assert unescape('\\"hi"') == '"hi"'


def test_unescape_wrong_byte():
    with pytest.raises(ValueError):
        unescape(r"\xfg")


def test_unescape_short_byte():
    with pytest.raises(ValueError):
        unescape(r"\xf")


def test_unescape_no_open_brace_unicode():
    with pytest.raises(ValueError):
        unescape(r"\u11")


def test_unescape_no_close_brace_unicode():
    with pytest.raises(ValueError):
        unescape(r"\u{11")


def test_unescape_short_unicode():
    with pytest.raises(ValueError):
        unescape(r"\u{1}")


def test_unescape_long_unicode():
    with pytest.raises(ValueError):
        unescape(r"\u{1111111}")


def test_unescape_code_point_out_of_range():
    with pytest.raises(ValueError):
        unescape(r"\u{123abC}")


def test_unescape_surrogate_rejected():
    with pytest.raises(ValueError):
        unescape(r"\u{D800}")


def test_unescape_unicode_two_digits():
    assert unescape(r"\u{12}") == "\x12"


def test_unescape_byte_uppercase_hex():
    assert unescape(r"\x0F") == "\x0f"


def test_unescape_plain_text_unchanged():
    assert unescape("aaaaa") == "aaaaa"


def test_unescape_empty_string():
    assert unescape("") == ""


def test_unescape_quoted_literal_keeps_quotes():
    assert unescape(r'"a\tb"') == '"a\tb"'


@pytest.mark.parametrize(
    ("literal", "expected"),
    [
        (r"'\n'", "'\n'"),
        (r"'\x1a'", "'\x1a'"),
        (r"'\u{10FFFF}'", "'\U0010ffff'"),
    ],
)
def test_unescape_character_literals(literal, expected):
    assert unescape(literal) == expected