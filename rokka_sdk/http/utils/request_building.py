from typing import IO, Dict, Optional, Union

import requests
from requests import PreparedRequest
from requests.exceptions import InvalidSchema, InvalidURL, MissingSchema

from rokka_sdk.http.errors import InvalidRequestError

RequestBody = Union[bytes, str, IO[bytes]]


def build_request(
    api_url: str,
    method: str,
    path: str,
    body: Optional[RequestBody] = None,
    query: Optional[Dict[str, str]] = None,
) -> PreparedRequest:
    """Build a request against the rokka API.

    Args:
        api_url: The address of the API, prefixed to `path` as is.
        method: The HTTP method.
        path: The path of the resource, starting with `/`.
        body: The body of the request. Streams are read at once, so the request
            can be sent more than once.
        query: The query parameters, encoded in key order.

    Returns:
        The prepared request.

    Raises:
        InvalidRequestError: If the resulting URL is not valid.
    """
    url = f"{api_url}{path}"
    params = sorted(query.items()) if query else None
    request = requests.Request(
        method=method,
        url=url,
        data=_materialise_body(body=body),
        params=params,
    )
    try:
        return request.prepare()
    except (MissingSchema, InvalidSchema, InvalidURL) as error:
        raise InvalidRequestError(
            f"Could not build {method} request for {url}: {error}"
        ) from error


def _materialise_body(body: Optional[RequestBody]) -> Optional[bytes]:
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return body.read()
