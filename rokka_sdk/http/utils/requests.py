from typing import Dict, Mapping

from rokka_sdk.config import API_KEY_HEADER

MIN_KEY_LENGTH_TO_REVEAL_PREFIX = 8


def mask_api_key(value: str) -> str:
    """Mask an API key, so that it can be logged.

    Args:
        value: The API key.

    Returns:
        The first and last two characters of the key around `***`, or `***` alone
        for keys too short to reveal anything.
    """
    if len(value) < MIN_KEY_LENGTH_TO_REVEAL_PREFIX:
        return "***"
    return f"{value[:2]}***{value[-2:]}"


def mask_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Copy request headers with the API key masked.

    Args:
        headers: The headers of the request.

    Returns:
        The headers safe to log.
    """
    return {
        name: mask_api_key(value) if name.lower() == API_KEY_HEADER.lower() else value
        for name, value in headers.items()
    }
