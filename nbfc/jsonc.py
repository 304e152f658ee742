"""A lenient JSON reader with comments, and the indented JSON writer used on disk and on the wire."""

from __future__ import annotations

import enum
import re
from typing import Any

__all__ = ["JsonErrorKind", "JsonError", "parse", "dumps", "escape_string"]


class JsonErrorKind(enum.Enum):
    """The kinds of parse failure, valued by their messages."""

    INVALID_UNICODE_ESCAPE = "Invalid unicode escape"
    INVALID_UNICODE_SURROGATE = "Invalid unicode surrogate"
    INVALID_CODEPOINT = "Invalid codepoint"
    MISSING_DOUBLE_QUOTE = "Missing double quote"
    ENDLESS_COMMENT = "Endless comment"
    UNEXPECTED_CHARS = "Unexpected charaters"
    UNEXPECTED_EOT = "Unexpected end of text"
    INVALID_NUMBER = "Invalid number"


class JsonError(ValueError):
    """Raised when text cannot be parsed; carries the kind and the offset."""

    def __init__(self, kind: JsonErrorKind, position: int) -> None:
        super().__init__(f"{kind.value} (at offset {position})")
        self.kind = kind
        self.position = position


_NOTHING = object()

_SIMPLE_ESCAPES = {"b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t"}
_HEX_DIGITS = "0123456789abcdefABCDEF"
_DIGITS = "0123456789"

_HEX_INT = re.compile(r"-?0[xX][0-9a-fA-F]+")
_OCT_INT = re.compile(r"-?0[0-7]*")
_DEC_INT = re.compile(r"-?[0-9]+")
_HEX_FLOAT = re.compile(
    r"-?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?"
)
_DEC_FLOAT = re.compile(r"-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _hex_value(c: str) -> int | None:
    if c and c in _HEX_DIGITS:
        return int(c, 16)
    return None


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.size = len(text)

    def at(self, pos: int) -> str:
        return self.text[pos] if 0 <= pos < self.size else ""

    # -- comments -----------------------------------------------------------

    def skip_comment(self, start: int, after_slash: int) -> int:
        c = self.at(after_slash)
        if c == "/":
            newline = self.text.find("\n", after_slash + 1)
            if newline < 0:
                raise JsonError(JsonErrorKind.ENDLESS_COMMENT, start)
            return newline + 1
        if c == "*":
            return self.skip_block_comment(after_slash + 1, start)
        raise JsonError(JsonErrorKind.UNEXPECTED_CHARS, start)

    def skip_block_comment(self, pos: int, start: int) -> int:
        if pos >= self.size:
            raise JsonError(JsonErrorKind.ENDLESS_COMMENT, start)
        i = pos
        while True:
            i = self.text.find("/", i + 1)
            if i < 0:
                raise JsonError(JsonErrorKind.ENDLESS_COMMENT, start)
            if self.text[i - 1] == "*":
                return i + 1

    # -- values -------------------------------------------------------------

    def value(self, pos: int) -> tuple[Any, int]:
        while True:
            c = self.at(pos)
            if c == "":
                raise JsonError(JsonErrorKind.UNEXPECTED_EOT, pos)
            if c in " \t\n\r,":
                pos += 1
            elif c == "{":
                return self.obj(pos + 1)
            elif c == "[":
                return self.array(pos + 1)
            elif c == "]":
                return _NOTHING, pos
            elif c == '"':
                return self.string(pos + 1)
            elif c == "-" or c in _DIGITS:
                return self.number(pos)
            elif c == "t":
                return self.literal(pos, "true", True)
            elif c == "f":
                return self.literal(pos, "false", False)
            elif c == "n":
                return self.literal(pos, "null", None)
            elif c == "/":
                pos = self.skip_comment(pos, pos + 1)
            else:
                raise JsonError(JsonErrorKind.UNEXPECTED_CHARS, pos)

    def literal(self, pos: int, word: str, result: Any) -> tuple[Any, int]:
        if self.text.startswith(word, pos):
            return result, pos + len(word)
        raise JsonError(JsonErrorKind.UNEXPECTED_CHARS, pos)

    def obj(self, pos: int) -> tuple[dict, int]:
        result: dict[str, Any] = {}
        while True:
            key, pos = self.key(pos)
            if key is None:
                return result, pos + 1
            value, pos = self.value(pos)
            if value is not _NOTHING and key not in result:
                result[key] = value

    def key(self, pos: int) -> tuple[str | None, int]:
        while True:
            c = self.at(pos)
            if c == "":
                raise JsonError(JsonErrorKind.UNEXPECTED_CHARS, pos)
            pos += 1
            if c == '"':
                key, pos = self.string(pos)
                while self.at(pos) and ord(self.at(pos)) <= 32:
                    pos += 1
                if self.at(pos) == ":":
                    return key, pos + 1
                raise JsonError(JsonErrorKind.UNEXPECTED_CHARS, pos)
            if ord(c) <= 32 or c == ",":
                continue
            if c == "}":
                return None, pos - 1
            if c == "/":
                pos = self.skip_comment(pos - 1, pos)
                continue
            raise JsonError(JsonErrorKind.UNEXPECTED_CHARS, pos - 1)

    def array(self, pos: int) -> tuple[list, int]:
        items: list[Any] = []
        while True:
            value, pos = self.value(pos)
            if value is not _NOTHING:
                items.append(value)
            if self.at(pos) == "]":
                return items, pos + 1

    def hex4(self, pos: int) -> int | None:
        codepoint = 0
        for offset in range(4):
            digit = _hex_value(self.at(pos + offset))
            if digit is None:
                return None
            codepoint = codepoint << 4 | digit
        return codepoint

    def string(self, pos: int) -> tuple[str, int]:
        start = pos
        out: list[str] = []
        while True:
            c = self.at(pos)
            if c == "":
                raise JsonError(JsonErrorKind.MISSING_DOUBLE_QUOTE, start)
            pos += 1
            if c == '"':
                return "".join(out), pos
            if c != "\\":
                out.append(c)
                continue
            escape = self.at(pos)
            if escape in ("\\", "/", '"'):
                out.append(escape)
                pos += 1
            elif escape in _SIMPLE_ESCAPES:
                out.append(_SIMPLE_ESCAPES[escape])
                pos += 1
            elif escape == "u":
                escape_start = pos - 1
                codepoint = self.hex4(pos + 1)
                if codepoint is None:
                    raise JsonError(JsonErrorKind.INVALID_UNICODE_ESCAPE, escape_start)
                if codepoint & 0xFC00 == 0xD800:
                    pos += 6
                    low = None
                    if self.at(pos - 1) == "\\" and self.at(pos) == "u":
                        low = self.hex4(pos + 1)
                    if low is None or low & 0xFC00 != 0xDC00:
                        raise JsonError(JsonErrorKind.INVALID_UNICODE_SURROGATE, escape_start)
                    codepoint = 0x10000 + ((codepoint - 0xD800) << 10) + (low - 0xDC00)
                if 0xD800 <= codepoint < 0xE000 or codepoint >= 0x110000:
                    raise JsonError(JsonErrorKind.INVALID_CODEPOINT, escape_start)
                out.append(chr(codepoint))
                pos += 5
            else:
                # Unknown escapes keep their backslash; the next character follows as is.
                out.append(c)

    def number(self, pos: int) -> tuple[int | float, int]:
        digits_start = pos + 1 if self.at(pos) == "-" else pos
        match = _HEX_INT.match(self.text, pos)
        if match:
            value = int(match.group().replace("0x", "").replace("0X", ""), 16)
        elif self.at(digits_start) == "0":
            match = _OCT_INT.match(self.text, pos)
            value = int(match.group(), 8) if match else 0
        else:
            match = _DEC_INT.match(self.text, pos)
            value = int(match.group()) if match else 0
        if not match:
            raise JsonError(JsonErrorKind.INVALID_NUMBER, pos)
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise JsonError(JsonErrorKind.INVALID_NUMBER, pos)
        end = match.end()
        if self.at(end) not in (".", "e", "E") or self.at(end) == "":
            return value, end
        return self.floating(pos)

    def floating(self, pos: int) -> tuple[float, int]:
        match = _HEX_FLOAT.match(self.text, pos)
        if match:
            result = float.fromhex(match.group())
            mantissa = ""
        else:
            match = _DEC_FLOAT.match(self.text, pos)
            if not match:
                raise JsonError(JsonErrorKind.INVALID_NUMBER, pos)
            literal = match.group()
            result = float(literal)
            mantissa = re.split("[eE]", literal)[0]
        if result in (float("inf"), float("-inf")):
            raise JsonError(JsonErrorKind.INVALID_NUMBER, pos)
        if result == 0.0 and any(ch in "123456789" for ch in mantissa):
            raise JsonError(JsonErrorKind.INVALID_NUMBER, pos)
        return result, match.end()


def parse(text: str | bytes) -> Any:
    """Parse one JSON value; comments are allowed, commas are optional, trailing text is ignored."""
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("utf-8")
    text = text.split("\0", 1)[0]
    value, pos = _Parser(text).value(0)
    if value is _NOTHING:
        raise JsonError(JsonErrorKind.UNEXPECTED_CHARS, pos)
    return value


def escape_string(text: str) -> str:
    """Escape '"', backslash and control characters as \\uXXXX."""
    return "".join(
        f"\\u{ord(c):04X}" if c in '"\\' or ord(c) < 0x20 else c for c in text
    )


def _emit(value: Any, key: str | None, indent: int, out: list[str]) -> None:
    pad = "\n" + " " * indent
    out.append(pad)
    if key is not None:
        out.append(f'"{key}": ')
    if isinstance(value, dict):
        out.append("{")
        _emit_children(value.items(), indent + 3, out)
        out.append(pad + "}")
    elif isinstance(value, (list, tuple)):
        out.append("[")
        _emit_children(((None, item) for item in value), indent + 3, out)
        out.append(pad + "]")
    elif isinstance(value, str):
        out.append('"' + escape_string(value) + '"')
    elif isinstance(value, bool):
        out.append("true" if value else "false")
    elif isinstance(value, int):
        out.append(str(value))
    elif isinstance(value, float):
        out.append(f"{value:f}")
    elif value is None:
        out.append("null")
    else:
        raise TypeError(f"cannot serialise {type(value).__name__}")


def _emit_children(pairs, indent: int, out: list[str]) -> None:
    for index, (key, value) in enumerate(pairs):
        if index:
            out.append(",")
        _emit(value, key, indent, out)


def dumps(value: Any) -> str:
    """Serialise a value as indented JSON, each element on its own line."""
    out: list[str] = []
    _emit(value, None, 0, out)
    return "".join(out)