import json
from typing import Any, Callable, Optional

from pydantic import TypeAdapter, ValidationError
from requests import Response

from rokka_sdk.http.entities import APIErrorResponse
from rokka_sdk.http.errors import AnnotatedDecodeError, StatusCodeError
from rokka_sdk.http.utils.decoding import (
    character_to_byte_offset,
    extract_context_window,
    find_value_end,
)

ResponseHandler = Callable[[Response, Any], Any]


def read_body(response: Response) -> bytes:
    """Read the whole body of the response and release the connection.

    Args:
        response: The response to read.

    Returns:
        The body of the response.
    """
    try:
        return response.content
    finally:
        response.close()


def handle_status_code_error(response: Response) -> StatusCodeError:
    """Turn a failed response into a structured error.

    Args:
        response: The response with status code >= 400.

    Returns:
        The error carrying the status code, the raw body and, when the body
        follows the API error format, the error reported by the API.
    """
    body = read_body(response=response)
    if len(body) == 0:
        return StatusCodeError(status_code=response.status_code)
    try:
        api_error = APIErrorResponse.model_validate_json(body, strict=True).error
    except ValidationError:
        return StatusCodeError(status_code=response.status_code, body=body)
    return StatusCodeError(
        status_code=response.status_code,
        api_error=api_error,
        body=body,
    )


def json_response_handler(response: Response, target: Optional[Any] = None) -> Any:
    """Decode the JSON body of a successful response.

    Validation is strict: JSON values are not coerced, so `"12"` does not
    match an `int` field and `1.0` does not match one either.

    Args:
        response: The response with status code < 400.
        target: The type to decode into (pydantic model, `dict`, `List[...]`, ...).
            When not given, the plain JSON value is returned.

    Returns:
        The decoded body, or None if the body is empty.

    Raises:
        AnnotatedDecodeError: If the body does not match `target`.
        json.JSONDecodeError: If the body is not valid JSON.
    """
    body = read_body(response=response)
    if len(body) == 0:
        return None
    document = body.decode("utf-8")
    payload = json.loads(document)
    if target is None:
        return payload
    try:
        return TypeAdapter(target).validate_json(body, strict=True)
    except ValidationError as error:
        raise annotate_validation_error(
            error=error, body=body, document=document
        ) from error


def annotate_validation_error(
    error: ValidationError, body: bytes, document: str
) -> AnnotatedDecodeError:
    """Attach the part of the body around the first mismatch to a validation error.

    Args:
        error: The validation error.
        body: The raw body.
        document: The body decoded to text.

    Returns:
        The annotated error.
    """
    location = error.errors()[0]["loc"] if error.error_count() > 0 else ()
    end = find_value_end(document=document, location=location)
    offset = character_to_byte_offset(document=document, index=end)
    return AnnotatedDecodeError(
        validation_error=error,
        offset=offset,
        content=extract_context_window(body=body, offset=offset),
    )
