import json
from json.decoder import WHITESPACE, scanstring
from typing import Optional, Sequence, Tuple, Union

CONTEXT_WINDOW_SIZE = 100
CONTEXT_SEPARATOR = "\n<-->\n"

Location = Sequence[Union[str, int]]

_DECODER = json.JSONDecoder()


def find_value_end(document: str, location: Location) -> int:
    """Find where the value at `location` ends in a JSON document.

    The document is walked along the location path (object keys and array
    indices, as reported by pydantic). When a path element cannot be followed
    (missing key, union tags, a scalar in place of a container), the walk stops
    at the deepest value reached.

    Args:
        document: A valid JSON document.
        location: Path to the value.

    Returns:
        Index of the first character after the located value.
    """
    index = _skip_whitespace(document=document, index=0)
    for element in location:
        child_index = _find_child(document=document, index=index, element=element)
        if child_index is None:
            break
        index = child_index
    _, end = _DECODER.raw_decode(document, index)
    return end


def extract_context_window(body: bytes, offset: int) -> str:
    start = max(offset - CONTEXT_WINDOW_SIZE, 0)
    end = min(offset + CONTEXT_WINDOW_SIZE, len(body))
    before = body[start:offset].decode("utf-8", errors="replace")
    after = body[offset:end].decode("utf-8", errors="replace")
    return f"{before}{CONTEXT_SEPARATOR}{after}"


def character_to_byte_offset(document: str, index: int) -> int:
    return len(document[:index].encode("utf-8"))


def _find_child(
    document: str, index: int, element: Union[str, int]
) -> Optional[int]:
    opening = document[index]
    if opening == "{" and isinstance(element, str):
        return _find_member(document=document, index=index, key=element)
    if opening == "[" and isinstance(element, int) and not isinstance(element, bool):
        return _find_item(document=document, index=index, position=element)
    return None


def _find_member(document: str, index: int, key: str) -> Optional[int]:
    index = _skip_whitespace(document=document, index=index + 1)
    if document[index] == "}":
        return None
    found = None
    while True:
        member_key, index = scanstring(document, index + 1)
        index = _skip_whitespace(document=document, index=index)
        index = _skip_whitespace(document=document, index=index + 1)
        # duplicated keys resolve to the last occurrence, as in json.loads
        if member_key == key:
            found = index
        index, has_more = _skip_value(document=document, index=index)
        if not has_more:
            return found


def _find_item(document: str, index: int, position: int) -> Optional[int]:
    index = _skip_whitespace(document=document, index=index + 1)
    if document[index] == "]":
        return None
    current = 0
    while True:
        if current == position:
            return index
        index, has_more = _skip_value(document=document, index=index)
        if not has_more:
            return None
        current += 1


def _skip_value(document: str, index: int) -> Tuple[int, bool]:
    _, index = _DECODER.raw_decode(document, index)
    index = _skip_whitespace(document=document, index=index)
    if document[index] != ",":
        return index, False
    return _skip_whitespace(document=document, index=index + 1), True


def _skip_whitespace(document: str, index: int) -> int:
    return WHITESPACE.match(document, index).end()
