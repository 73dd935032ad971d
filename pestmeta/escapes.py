"""Decoding of escape sequences in grammar string and character literals."""

from __future__ import annotations

import re

_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "r": "\r",
    "n": "\n",
    "t": "\t",
    "0": "\0",
    "'": "'",
}

_HEX_NUMBER = re.compile(r"\+?[0-9A-Fa-f]+")

_MAX_CODE_POINT = 0x10FFFF
_SURROGATES = range(0xD800, 0xE000)


def _utf8_length(text: str) -> int:
    return len(text.encode("utf-8", "surrogatepass"))


def _parse_hex(digits: str, literal: str) -> int:
    if not _HEX_NUMBER.fullmatch(digits):
        raise ValueError(f"invalid hexadecimal escape {digits!r} in {literal!r}")
    return int(digits, 16)


def unescape(string: str) -> str:
    """Replace the escape sequences in ``string`` with the characters they stand for.

    Supported escapes are ``\\"``, ``\\\\``, ``\\r``, ``\\n``, ``\\t``, ``\\0``,
    ``\\'``, ``\\xHH`` (two hex digits) and ``\\u{H..}`` (two to six hex digits
    naming a valid code point). Raises ValueError on any malformed escape.
    """
    parts: list[str] = []
    pos = 0
    length = len(string)

    while True:
        backslash = string.find("\\", pos)
        if backslash < 0:
            parts.append(string[pos:])
            return "".join(parts)

        parts.append(string[pos:backslash])
        pos = backslash + 1
        if pos >= length:
            raise ValueError(f"unterminated escape in {string!r}")

        kind = string[pos]
        pos += 1

        if kind in _SIMPLE_ESCAPES:
            parts.append(_SIMPLE_ESCAPES[kind])
        elif kind == "x":
            digits = string[pos:pos + 2]
            if len(digits) != 2 or _utf8_length(digits) != 2:
                raise ValueError(f"byte escape needs two hex digits in {string!r}")
            pos += 2
            parts.append(chr(_parse_hex(digits, string)))
        elif kind == "u":
            if pos >= length or string[pos] != "{":
                raise ValueError(f"unicode escape must start with '{{' in {string!r}")
            pos += 1
            close = string.find("}", pos)
            body = string[pos:] if close < 0 else string[pos:close]
            if not 2 <= _utf8_length(body) <= 6:
                raise ValueError(
                    f"unicode escape needs two to six hex digits in {string!r}"
                )
            if close < 0:
                raise ValueError(f"unterminated unicode escape in {string!r}")
            pos = close + 1
            value = _parse_hex(body, string)
            if value > _MAX_CODE_POINT or value in _SURROGATES:
                raise ValueError(f"invalid code point U+{value:X} in {string!r}")
            parts.append(chr(value))
        else:
            raise ValueError(f"unknown escape '\\{kind}' in {string!r}")