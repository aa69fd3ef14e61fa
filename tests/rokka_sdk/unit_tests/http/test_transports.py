from io import BytesIO
from unittest.mock import MagicMock

import pytest
import requests
from requests import PreparedRequest, Response

from rokka_sdk.http.transports import (
    RetryingTransport,
    outcome_is_retryable,
    release_discarded_outcome,
)


def _response(status_code: int, body: bytes = b"") -> Response:
    response = Response()
    response.status_code = status_code
    response.raw = BytesIO(body)
    return response


def _request() -> PreparedRequest:
    return requests.Request(method="GET", url="https://api.rokka.io/").prepare()


def test_retrying_transport_returns_first_successful_response() -> None:
    # given
    expected_response = _response(200)
    transport = MagicMock()
    transport.send.return_value = expected_response
    retrying_transport = RetryingTransport(transport=transport, backoff_factor=0)

    # when
    result = retrying_transport.send(_request())

    # then
    assert result is expected_response
    assert transport.send.call_count == 1


@pytest.mark.parametrize("status_code", [429, 502, 503])
def test_retrying_transport_when_retryable_status_occurs_and_recovers(
    status_code: int,
) -> None:
    # given
    failed_response = _response(status_code)
    expected_response = _response(200)
    transport = MagicMock()
    transport.send.side_effect = [failed_response, expected_response]
    retrying_transport = RetryingTransport(transport=transport, backoff_factor=0)
    request = _request()

    # when
    result = retrying_transport.send(request)

    # then
    assert result is expected_response
    assert transport.send.call_count == 2
    assert transport.send.call_args_list[0].args[0] is request
    assert transport.send.call_args_list[1].args[0] is request
    assert failed_response.raw.closed, "Discarded response must be released"


def test_retrying_transport_when_retryable_status_does_not_recover() -> None:
    # given
    responses = [_response(503), _response(503), _response(503, b"third")]
    transport = MagicMock()
    transport.send.side_effect = responses
    retrying_transport = RetryingTransport(
        transport=transport, max_attempts=3, backoff_factor=0
    )

    # when
    result = retrying_transport.send(_request())

    # then
    assert result is responses[-1], "Expected to return last response unchanged"
    assert result.content == b"third"
    assert transport.send.call_count == 3


@pytest.mark.parametrize("status_code", [400, 401, 403, 404, 500, 504])
def test_retrying_transport_does_not_retry_other_statuses(status_code: int) -> None:
    # given
    expected_response = _response(status_code)
    transport = MagicMock()
    transport.send.return_value = expected_response
    retrying_transport = RetryingTransport(transport=transport, backoff_factor=0)

    # when
    result = retrying_transport.send(_request())

    # then
    assert result is expected_response
    assert transport.send.call_count == 1


def test_retrying_transport_when_connection_error_occurs_and_recovers() -> None:
    # given
    expected_response = _response(200)
    transport = MagicMock()
    transport.send.side_effect = [requests.ConnectionError(), expected_response]
    retrying_transport = RetryingTransport(transport=transport, backoff_factor=0)

    # when
    result = retrying_transport.send(_request())

    # then
    assert result is expected_response
    assert transport.send.call_count == 2


def test_retrying_transport_when_connection_error_does_not_recover() -> None:
    # given
    last_error = requests.ConnectionError("Third")
    transport = MagicMock()
    transport.send.side_effect = [
        requests.ConnectionError(),
        requests.ConnectionError(),
        last_error,
    ]
    retrying_transport = RetryingTransport(
        transport=transport, max_attempts=3, backoff_factor=0
    )

    # when
    with pytest.raises(requests.ConnectionError) as error:
        retrying_transport.send(_request())

    # then
    assert error.value is last_error, "Last error should be re-raised unchanged"
    assert transport.send.call_count == 3


def test_retrying_transport_counts_errors_and_statuses_against_one_limit() -> None:
    # given
    transport = MagicMock()
    transport.send.side_effect = [
        requests.ConnectionError(),
        _response(429),
        requests.ConnectionError(),
        _response(502),
    ]
    retrying_transport = RetryingTransport(
        transport=transport, max_attempts=4, backoff_factor=0
    )

    # when
    result = retrying_transport.send(_request())

    # then
    assert result.status_code == 502
    assert transport.send.call_count == 4


def test_retrying_transport_does_not_retry_other_transport_errors() -> None:
    # given
    transport = MagicMock()
    transport.send.side_effect = requests.exceptions.ReadTimeout()
    retrying_transport = RetryingTransport(transport=transport, backoff_factor=0)

    # when
    with pytest.raises(requests.exceptions.ReadTimeout):
        retrying_transport.send(_request())

    # then
    assert transport.send.call_count == 1


def test_retrying_transport_stops_when_time_budget_is_exhausted() -> None:
    # given
    transport = MagicMock()
    transport.send.side_effect = [_response(503), _response(200)]
    retrying_transport = RetryingTransport(
        transport=transport, max_attempts=10, time_budget_ms=0, backoff_factor=0
    )

    # when
    result = retrying_transport.send(_request())

    # then
    assert result.status_code == 503
    assert transport.send.call_count == 1


def test_retrying_transport_rejects_non_positive_attempts() -> None:
    # when
    with pytest.raises(ValueError):
        _ = RetryingTransport(transport=MagicMock(), max_attempts=0)


def test_retrying_transport_defaults() -> None:
    # given
    transport = MagicMock()

    # when
    retrying_transport = RetryingTransport(transport=transport)

    # then
    assert retrying_transport.transport is transport
    assert retrying_transport.max_attempts == 10
    assert retrying_transport.time_budget_ms == 6000


def test_outcome_is_retryable() -> None:
    # then
    assert outcome_is_retryable(requests.ConnectionError()) is True
    assert outcome_is_retryable(_response(429)) is True
    assert outcome_is_retryable(_response(500)) is False
    assert outcome_is_retryable(_response(200)) is False


def test_release_discarded_outcome_ignores_errors() -> None:
    # when
    release_discarded_outcome({"value": requests.ConnectionError()})
