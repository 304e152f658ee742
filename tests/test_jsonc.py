import json

import pytest

from nbfc.jsonc import JsonError, JsonErrorKind, dumps, escape_string, parse


@pytest.mark.parametrize(
    "text",
    [
        '{"a": 1, "b": [1, 2, 3], "c": {"d": null}}',
        '[true, false, null, -5, 0]',
        '"hello"',
        '{"x": 1.5, "y": -2.25e2}',
        '"tab\\tnew\\nline\\/slash\\"quote\\\\back"',
        '"\\u00e9\\u4e2d"',
        '"\\ud83d\\ude00"',
    ],
)
def test_standard_json_matches_stdlib(text):
    assert parse(text) == json.loads(text)


def test_comments_are_skipped():
    text = '// leading\n{ /* block */ "a": /* x */ 1, // tail\n "b": 2 }'
    assert parse(text) == {"a": 1, "b": 2}


def test_commas_are_optional():
    assert parse("[1 2 3]") == [1, 2, 3]
    assert parse('{"a": 1 "b": 2}') == {"a": 1, "b": 2}


def test_integer_prefixes():
    assert parse("0x1F") == 0x1F
    assert parse("017") == 0o17
    assert parse("-0x10") == -0x10


def test_duplicate_key_keeps_first():
    assert parse('{"a": 1, "a": 2}') == {"a": 1}


def test_trailing_text_ignored():
    assert parse("1 xyz") == 1


def test_unknown_escape_keeps_backslash():
    assert parse(r'"\q"') == "\\q"


def test_bytes_input():
    assert parse(b'{"k": "v"}') == {"k": "v"}


@pytest.mark.parametrize(
    "text, kind",
    [
        ("", JsonErrorKind.UNEXPECTED_EOT),
        ('"abc', JsonErrorKind.MISSING_DOUBLE_QUOTE),
        ("/* never closed", JsonErrorKind.ENDLESS_COMMENT),
        ("// no newline", JsonErrorKind.ENDLESS_COMMENT),
        ('{"a" 1}', JsonErrorKind.UNEXPECTED_CHARS),
        ("tru", JsonErrorKind.UNEXPECTED_CHARS),
        ("]", JsonErrorKind.UNEXPECTED_CHARS),
        ('"\\uZZZZ"', JsonErrorKind.INVALID_UNICODE_ESCAPE),
        ('"\\ud800x"', JsonErrorKind.INVALID_UNICODE_SURROGATE),
        ('"\\udc00"', JsonErrorKind.INVALID_CODEPOINT),
        ("99999999999999999999", JsonErrorKind.INVALID_NUMBER),
        ("1e999", JsonErrorKind.INVALID_NUMBER),
        ("-", JsonErrorKind.INVALID_NUMBER),
        ("[1, 2", JsonErrorKind.UNEXPECTED_EOT),
    ],
)
def test_errors(text, kind):
    with pytest.raises(JsonError) as info:
        parse(text)
    assert info.value.kind is kind


def test_error_position_points_at_bad_char():
    text = "[1, @]"
    with pytest.raises(JsonError) as info:
        parse(text)
    assert info.value.position == text.index("@")


def test_error_message_text():
    with pytest.raises(JsonError, match="Missing double quote"):
        parse('"open')


def test_dumps_layout():
    assert dumps({"a": 1}) == '\n{\n   "a": 1\n}'


def test_dumps_float_uses_six_decimals():
    assert dumps(1.5) == "\n1.500000"


def test_escape_string_quote():
    assert escape_string('a"b') == "a\\u0022b"


def test_escape_string_leaves_plain_text():
    assert escape_string("plain text") == "plain text"


def test_round_trip_structures():
    value = {
        "Name": "fan",
        "List": [1, -2, True, False, None, "s"],
        "Nested": {"Empty": [], "Obj": {}},
    }
    assert parse(dumps(value)) == value


def test_round_trip_control_characters():
    value = 'a\nb"c\\d\te'
    assert parse(dumps(value)) == value


def test_round_trip_float():
    assert parse(dumps({"t": 2.25})) == {"t": 2.25}


def test_dumps_rejects_unknown_type():
    with pytest.raises(TypeError):
        dumps({"a": object()})