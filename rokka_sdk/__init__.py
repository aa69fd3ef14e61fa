from rokka_sdk.http.client import RokkaHTTPClient
from rokka_sdk.http.entities import ClientConfiguration
from rokka_sdk.http.errors import (
    AnnotatedDecodeError,
    APIKeyNotProvided,
    InvalidRequestError,
    RokkaClientError,
    StatusCodeError,
)
from rokka_sdk.http.transports import HTTPRequester, RetryingTransport

try:
    from rokka_sdk.version import __version__
except ImportError:
    __version__ = "development"
