import pytest

from rokka_sdk.http.utils.decoding import (
    character_to_byte_offset,
    extract_context_window,
    find_value_end,
)


@pytest.mark.parametrize(
    "document, location, expected_end",
    [
        ('{"a": 1}', (), 8),
        ('{"a": 1, "b": "xyz"}', ("b",), 19),
        ('{"a": 1, "b": "xyz"}', ("a",), 7),
        (' { "a" : [ 1 , 22 , 3 ] } ', ("a", 1), 17),
        ('{"items": [{"a": 1}, {"size": "x"}]}', ("items", 1, "size"), 33),
        ('{"a": {"b": 1}}', ("a", "missing"), 14),
        ('{"a": [1]}', ("a", 5), 9),
        ('{"a": {}}', ("a", "b"), 8),
        ('{"a": "text"}', ("a", "str"), 12),
        ('[{"a": 1}, 2]', (0, "a"), 8),
        ('{"a": 1, "b": 2, "a": "last"}', ("a",), 28),
    ],
)
def test_find_value_end(document: str, location: tuple, expected_end: int) -> None:
    # when
    result = find_value_end(document=document, location=location)

    # then
    assert result == expected_end


def test_find_value_end_does_not_match_keys_inside_string_values() -> None:
    # given
    document = '{"a": "{\\"b\\": 1}", "b": true}'

    # when
    result = find_value_end(document=document, location=("b",))

    # then
    assert document[:result].endswith("true")
    assert result == len(document) - 1


def test_extract_context_window_in_the_middle_of_body() -> None:
    # given
    body = b"a" * 150 + b"b" * 150

    # when
    result = extract_context_window(body=body, offset=150)

    # then
    assert result == "a" * 100 + "\n<-->\n" + "b" * 100


def test_extract_context_window_clamped_to_body_bounds() -> None:
    # given
    body = b"0123456789"

    # when
    result = extract_context_window(body=body, offset=4)

    # then
    assert result == "0123\n<-->\n456789"


def test_character_to_byte_offset_with_multibyte_characters() -> None:
    # given
    document = '{"name": "zürich", "size": "x"}'

    # when
    result = character_to_byte_offset(document=document, index=len(document))

    # then
    assert result == len(document.encode("utf-8"))
    assert result == len(document) + 1
