import copy
import json
import logging
from typing import IO, Any, Dict, Optional, Union

from requests import PreparedRequest, Response
from urllib3.filepost import encode_multipart_formdata

from rokka_sdk.config import (
    ACCEPT_HEADER,
    API_KEY_HEADER,
    API_VERSION_HEADER,
    CONTENT_TYPE_HEADER,
    IMAGE_HOST_ORGANIZATION_PLACEHOLDER,
    JSON_CONTENT_TYPE,
)
from rokka_sdk.http.entities import (
    ClientConfiguration,
    ListSourceImagesResponse,
    Organization,
    SourceImage,
)
from rokka_sdk.http.errors import APIKeyNotProvided, StatusCodeError
from rokka_sdk.http.transports import HTTPRequester
from rokka_sdk.http.utils.request_building import RequestBody, build_request
from rokka_sdk.http.utils.requests import mask_headers
from rokka_sdk.http.utils.response_handling import (
    ResponseHandler,
    handle_status_code_error,
    json_response_handler,
)
from rokka_sdk.utils.logging import get_logger

FORBIDDEN_STATUS_CODE = 403
SOURCE_IMAGE_FILE_FIELD = "filedata"
USER_METADATA_FIELD = "meta_user[0]"
DYNAMIC_METADATA_FIELD_TEMPLATE = "meta_dynamic[0][{name}]"

LOGGER = get_logger("http.client")


class RokkaHTTPClient:
    """Client of the rokka API.

    The configuration is fixed at construction. `auto_retry()` does not modify
    the client it is called on, it returns a copy dispatching through the
    retrying transport instead, so clients can be shared between threads as long
    as the transports themselves are thread safe.
    """

    @classmethod
    def init(
        cls,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
    ) -> "RokkaHTTPClient":
        return cls(
            configuration=ClientConfiguration(
                api_key=api_key or "",
                api_url=api_url or "",
            )
        )

    def __init__(self, configuration: Optional[ClientConfiguration] = None):
        if configuration is None:
            configuration = ClientConfiguration()
        self.__configuration = configuration.with_defaults()
        self.__transport = self.__configuration.transport

    @property
    def configuration(self) -> ClientConfiguration:
        return self.__configuration

    @property
    def transport(self) -> HTTPRequester:
        """The transport calls are currently dispatched through."""
        return self.__transport

    def auto_retry(self) -> "RokkaHTTPClient":
        """Get a copy of the client with automatic retries enabled.

        The copy sends requests through the configured retrying transport, which
        by default retries up to 10 times on 429, 502 and 503 responses and on
        connection errors. The client the method is called on is left untouched:

            client = RokkaHTTPClient.init(api_key="...")
            client.auto_retry().get_organization("example")

        Returns:
            The client dispatching through the retrying transport.
        """
        retrying_client = copy.copy(self)
        retrying_client.__transport = self.__configuration.retrying_transport
        return retrying_client

    def new_request(
        self,
        method: str,
        path: str,
        body: Optional[RequestBody] = None,
        query: Optional[Dict[str, str]] = None,
    ) -> PreparedRequest:
        return build_request(
            api_url=self.__configuration.api_url,
            method=method,
            path=path,
            body=body,
            query=query,
        )

    def call(
        self,
        request: PreparedRequest,
        target: Optional[Any] = None,
        response_handler: Optional[ResponseHandler] = None,
    ) -> Any:
        """Execute a request against the API.

        `Api-Version` and `Accept` headers are always set. `Api-Key` is added when
        an API key is configured and the request does not carry its own, and
        `Content-Type` defaults to JSON.

        Args:
            request: The request to execute.
            target: The type passed to `response_handler`.
            response_handler: Callable decoding successful responses.

        Returns:
            The result of `response_handler`, or None if no handler is given.

        Raises:
            StatusCodeError: If the response status code is >= 400.
        """
        request.headers[API_VERSION_HEADER] = self.__configuration.api_version
        request.headers[ACCEPT_HEADER] = JSON_CONTENT_TYPE
        if self.__configuration.api_key and not request.headers.get(API_KEY_HEADER):
            request.headers[API_KEY_HEADER] = self.__configuration.api_key
        if not request.headers.get(CONTENT_TYPE_HEADER):
            request.headers[CONTENT_TYPE_HEADER] = JSON_CONTENT_TYPE
        self.__log_request(request=request)
        response = self.__transport.send(request)
        self.__log_response(request=request, response=response)
        if response.status_code >= 400:
            raise handle_status_code_error(response=response)
        if response_handler is None:
            response.close()
            return None
        return response_handler(response, target)

    def call_json_response(
        self, request: PreparedRequest, target: Optional[Any] = None
    ) -> Any:
        return self.call(
            request=request,
            target=target,
            response_handler=json_response_handler,
        )

    def valid_api_key(self) -> bool:
        """Check if the configured API key is accepted by the API.

        Executes a request to `/`, which is undocumented. A 403 response means
        the key is invalid and results in False, not in an error.

        Returns:
            True if the API accepted the key, False if it responded with 403.

        Raises:
            APIKeyNotProvided: If no API key is configured.
        """
        _ensure_api_key_provided(api_key=self.__configuration.api_key)
        request = self.new_request(method="GET", path="/")
        try:
            self.call_json_response(request=request)
        except StatusCodeError as error:
            if error.status_code == FORBIDDEN_STATUS_CODE:
                return False
            raise
        return True

    def list_source_images(
        self,
        organization: str,
        query: Optional[Dict[str, str]] = None,
    ) -> ListSourceImagesResponse:
        request = self.new_request(
            method="GET",
            path=f"/sourceimages/{organization}",
            query=query,
        )
        return self.call_json_response(
            request=request, target=ListSourceImagesResponse
        )

    def get_source_image(self, organization: str, image_hash: str) -> SourceImage:
        request = self.new_request(
            method="GET",
            path=f"/sourceimages/{organization}/{image_hash}",
        )
        return self.call_json_response(request=request, target=SourceImage)

    def create_source_image(
        self,
        organization: str,
        name: str,
        data: Union[bytes, IO[bytes]],
    ) -> ListSourceImagesResponse:
        return self.create_source_image_with_metadata(
            organization=organization,
            name=name,
            data=data,
        )

    def create_source_image_with_metadata(
        self,
        organization: str,
        name: str,
        data: Union[bytes, IO[bytes]],
        user_metadata: Optional[Dict[str, Any]] = None,
        dynamic_metadata: Optional[Dict[str, Any]] = None,
    ) -> ListSourceImagesResponse:
        """Upload a source image.

        Args:
            organization: The organization to upload the image to.
            name: The file name of the image.
            data: The content of the image.
            user_metadata: Free-form metadata attached to the image.
            dynamic_metadata: Metadata affecting rendering, keyed by type
                (e.g. `subject_area`).

        Returns:
            The listing of created images.
        """
        fields = []
        if user_metadata is not None:
            fields.append((USER_METADATA_FIELD, json.dumps(user_metadata)))
        for metadata_name, metadata_value in (dynamic_metadata or {}).items():
            fields.append(
                (
                    DYNAMIC_METADATA_FIELD_TEMPLATE.format(name=metadata_name),
                    json.dumps(metadata_value),
                )
            )
        content = data if isinstance(data, bytes) else data.read()
        fields.append((SOURCE_IMAGE_FILE_FIELD, (name, content)))
        body, content_type = encode_multipart_formdata(fields)
        request = self.new_request(
            method="POST",
            path=f"/sourceimages/{organization}",
            body=body,
        )
        request.headers[CONTENT_TYPE_HEADER] = content_type
        return self.call_json_response(
            request=request, target=ListSourceImagesResponse
        )

    def delete_source_image(self, organization: str, image_hash: str) -> None:
        request = self.new_request(
            method="DELETE",
            path=f"/sourceimages/{organization}/{image_hash}",
        )
        self.call(request=request)

    def get_organization(self, organization: str) -> Organization:
        request = self.new_request(method="GET", path=f"/organizations/{organization}")
        return self.call_json_response(request=request, target=Organization)

    def get_stack_options(self) -> dict:
        request = self.new_request(method="GET", path="/stackoptions")
        return self.call_json_response(request=request, target=dict)

    def get_image_url(
        self,
        organization: str,
        image_hash: str,
        stack: str,
        image_format: str = "jpg",
        seo_filename: Optional[str] = None,
    ) -> str:
        """Build the URL an image is delivered at.

        Args:
            organization: The organization owning the image.
            image_hash: The hash (or short hash) of the source image.
            stack: The name of the stack to render the image with.
            image_format: The output format.
            seo_filename: Optional file name placed in the URL.

        Returns:
            The delivery URL, based on the configured image host.
        """
        host = self.__configuration.image_host.replace(
            IMAGE_HOST_ORGANIZATION_PLACEHOLDER, organization
        )
        if seo_filename:
            return f"{host}/{stack}/{image_hash}/{seo_filename}.{image_format}"
        return f"{host}/{stack}/{image_hash}.{image_format}"

    def __log_request(self, request: PreparedRequest) -> None:
        LOGGER.log(
            self.__log_level(),
            "Sending %s %s with headers %s",
            request.method,
            request.url,
            mask_headers(headers=request.headers),
        )

    def __log_response(self, request: PreparedRequest, response: Response) -> None:
        LOGGER.log(
            self.__log_level(),
            "Received status %s for %s %s",
            response.status_code,
            request.method,
            request.url,
        )

    def __log_level(self) -> int:
        return logging.INFO if self.__configuration.verbose else logging.DEBUG


def _ensure_api_key_provided(api_key: Optional[str]) -> None:
    if not api_key:
        raise APIKeyNotProvided("API key must be set")
