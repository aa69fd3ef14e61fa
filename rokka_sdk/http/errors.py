from typing import Optional

from pydantic import ValidationError

from rokka_sdk.http.entities import APIError


class RokkaClientError(Exception):
    """Base class for rokka client errors."""

    pass


class APIKeyNotProvided(RokkaClientError):
    """Error raised locally when an operation needs an API key that is not configured."""

    pass


class InvalidRequestError(RokkaClientError):
    """Error for requests that cannot be constructed, e.g. because of an invalid URL."""

    pass


class StatusCodeError(RokkaClientError):
    """Error for responses with status code >= 400.

    Attributes:
        status_code: The HTTP status code of the response.
        api_error: The error reported by the API, if the body could be parsed.
        body: The raw response body.
    """

    def __init__(
        self,
        status_code: int,
        api_error: Optional[APIError] = None,
        body: bytes = b"",
    ):
        description = f"rokka: Status Code {status_code}"
        if api_error is not None:
            description = f"{description} ({api_error.message})"
        super().__init__(description)
        self.__status_code = status_code
        self.__api_error = api_error
        self.__body = body

    @property
    def status_code(self) -> int:
        """The HTTP status code of the response."""
        return self.__status_code

    @property
    def api_error(self) -> Optional[APIError]:
        """The error reported by the API, if the body could be parsed."""
        return self.__api_error

    @property
    def body(self) -> bytes:
        """The raw response body."""
        return self.__body

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"status_code={self.__status_code}, "
            f"api_error={self.__api_error!r}, "
            f"body={self.__body!r})"
        )


class AnnotatedDecodeError(RokkaClientError):
    """Error for response bodies that do not match the requested type.

    Attributes:
        validation_error: The original validation error.
        offset: Byte offset in the body right after the offending value.
        content: Body excerpt around the offset, in the form
            `<bytes before>\\n<-->\\n<bytes after>`.
    """

    def __init__(
        self,
        validation_error: ValidationError,
        offset: int,
        content: str,
    ):
        super().__init__(str(validation_error))
        self.__validation_error = validation_error
        self.__offset = offset
        self.__content = content

    @property
    def validation_error(self) -> ValidationError:
        return self.__validation_error

    @property
    def offset(self) -> int:
        return self.__offset

    @property
    def content(self) -> str:
        return self.__content
