from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, Field

from rokka_sdk.config import (
    ROKKA_API_URL,
    ROKKA_API_VERSION,
    ROKKA_IMAGE_HOST,
    ROKKA_RETRY_BACKOFF_FACTOR,
    ROKKA_RETRY_MAX_ATTEMPTS,
    ROKKA_RETRY_TIME_BUDGET_MS,
    ROKKA_VERBOSE,
)
from rokka_sdk.http.transports import HTTPRequester, RetryingTransport


@dataclass(frozen=True)
class ClientConfiguration:
    """Dataclass for the client configuration.

    Every field is optional. Use `with_defaults()` to obtain a copy in which
    unset fields are filled in; the client does that on construction.

    Attributes:
        api_url: Address of the rokka API, prefixed to every request path.
        api_version: Value sent in the `Api-Version` header.
        api_key: Value sent in the `Api-Key` header, if not empty.
        image_host: Template of the image delivery host, with `{{organization}}`
            placeholder.
        verbose: Log every dispatched call at INFO level instead of DEBUG.
        transport: Transport used for direct calls.
        retrying_transport: Transport activated by `RokkaHTTPClient.auto_retry()`.
            Derived from `transport` when not given.
    """

    api_url: str = ""
    api_version: str = ""
    api_key: str = ""
    image_host: str = ""
    verbose: Optional[bool] = None
    transport: Optional[HTTPRequester] = None
    retrying_transport: Optional[HTTPRequester] = None

    @classmethod
    def init_default(cls) -> "ClientConfiguration":
        return cls().with_defaults()

    def with_defaults(self) -> "ClientConfiguration":
        transport = self.transport
        if transport is None:
            transport = requests.Session()
        retrying_transport = self.retrying_transport
        if retrying_transport is None:
            retrying_transport = RetryingTransport(
                transport=transport,
                max_attempts=ROKKA_RETRY_MAX_ATTEMPTS,
                time_budget_ms=ROKKA_RETRY_TIME_BUDGET_MS,
                backoff_factor=ROKKA_RETRY_BACKOFF_FACTOR,
            )
        return replace(
            self,
            api_url=self.api_url or ROKKA_API_URL,
            api_version=self.api_version or ROKKA_API_VERSION,
            api_key=self.api_key or "",
            image_host=self.image_host or ROKKA_IMAGE_HOST,
            verbose=ROKKA_VERBOSE if self.verbose is None else self.verbose,
            transport=transport,
            retrying_transport=retrying_transport,
        )


class APIError(BaseModel):
    code: int = 0
    message: str = ""


class APIErrorResponse(BaseModel):
    error: APIError


class SourceImage(BaseModel):
    hash: str
    short_hash: Optional[str] = None
    binary_hash: Optional[str] = None
    created: Optional[datetime] = None
    name: Optional[str] = None
    mime_type: Optional[str] = Field(alias="mimetype", default=None)
    format: Optional[str] = None
    size: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    organization: Optional[str] = None
    link: Optional[str] = None
    user_metadata: Optional[Dict[str, Any]] = None
    dynamic_metadata: Optional[Dict[str, Any]] = None


class PageLink(BaseModel):
    href: str = ""


class PageLinks(BaseModel):
    prev: Optional[PageLink] = None
    next: Optional[PageLink] = None


class ListSourceImagesResponse(BaseModel):
    total: int = 0
    items: List[SourceImage] = Field(default_factory=list)
    cursor: Optional[str] = None
    links: Optional[PageLinks] = None


class OrganizationLimit(BaseModel):
    space_in_bytes: Optional[int] = None
    traffic_in_bytes: Optional[int] = None


class Organization(BaseModel):
    id: str
    name: str
    display_name: Optional[str] = None
    billing_email: Optional[str] = None
    limit: Optional[OrganizationLimit] = None
