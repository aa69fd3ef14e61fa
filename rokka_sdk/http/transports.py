import logging
from typing import Protocol, Union

import backoff
import requests
from requests import PreparedRequest, Response

from rokka_sdk.utils.logging import get_logger

RETRYABLE_STATUS_CODES = {429, 502, 503}
DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_TIME_BUDGET_MS = 6000
DEFAULT_BACKOFF_FACTOR = 0.1

LOGGER = get_logger("http.transports")

AttemptOutcome = Union[Response, requests.ConnectionError]


class HTTPRequester(Protocol):
    """Anything able to send a prepared request. `requests.Session` satisfies it."""

    def send(self, request: PreparedRequest) -> Response: ...


class RetryingTransport:
    """Transport re-sending requests on transient failures.

    A request is sent again when the response status is one of
    `RETRYABLE_STATUS_CODES` or when the wrapped transport raises
    `requests.ConnectionError`. Waits grow exponentially (with jitter) and the
    loop stops after `max_attempts` attempts or once `time_budget_ms` elapsed.
    The outcome of the last attempt is handed back as is: the last response is
    returned, the last connection error is re-raised.
    """

    def __init__(
        self,
        transport: HTTPRequester,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        time_budget_ms: int = DEFAULT_TIME_BUDGET_MS,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
    ):
        if max_attempts < 1:
            raise ValueError(
                f"Retrying transport needs at least one attempt, got {max_attempts}"
            )
        self.__transport = transport
        self.__max_attempts = max_attempts
        self.__time_budget_ms = time_budget_ms
        self.__send_with_retries = backoff.on_predicate(
            backoff.expo,
            predicate=outcome_is_retryable,
            max_tries=max_attempts,
            max_time=time_budget_ms / 1000,
            on_backoff=release_discarded_outcome,
            logger=LOGGER,
            backoff_log_level=logging.DEBUG,
            giveup_log_level=logging.DEBUG,
            factor=backoff_factor,
        )(self.__attempt)

    @property
    def transport(self) -> HTTPRequester:
        return self.__transport

    @property
    def max_attempts(self) -> int:
        return self.__max_attempts

    @property
    def time_budget_ms(self) -> int:
        return self.__time_budget_ms

    def send(self, request: PreparedRequest) -> Response:
        outcome = self.__send_with_retries(request)
        if isinstance(outcome, requests.ConnectionError):
            raise outcome
        return outcome

    def __attempt(self, request: PreparedRequest) -> AttemptOutcome:
        try:
            return self.__transport.send(request)
        except requests.ConnectionError as error:
            return error


def outcome_is_retryable(outcome: AttemptOutcome) -> bool:
    """Check if the outcome of an attempt allows another one.

    Args:
        outcome: Response received, or connection error raised by the transport.

    Returns:
        True for connection errors and retryable status codes, False otherwise.
    """
    if isinstance(outcome, requests.ConnectionError):
        return True
    return outcome.status_code in RETRYABLE_STATUS_CODES


def release_discarded_outcome(details: dict) -> None:
    outcome = details.get("value")
    if isinstance(outcome, Response):
        outcome.close()
