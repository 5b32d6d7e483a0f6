"""
Synchronous Yandex.Disk client implementation.

This module provides the main synchronous client for interacting with the
Yandex.Disk REST API on top of ``requests``.
"""

import json
import logging
from typing import Optional, Any
from urllib.parse import urlencode

import requests
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from .config import ClientConfig
from .destinations import Destination, RawSink, Typed
from .exceptions import APIError
from .models import Disk, Resource, ResourceList, ResourcesOptions
from .request import ApiRequest, DEFAULT_BASE_URL, build_request


logger = logging.getLogger(__name__)

# Unread body left on a response is drained up to this many bytes before the
# connection goes back to the pool.
DRAIN_LIMIT = 512
CHUNK_SIZE = 64 * 1024


class YandexDiskClient:
    """
    Synchronous client for the Yandex.Disk API.

    The base URL and access token are fixed at construction. The HTTP session
    is injected by the caller or created by the client; a caller-supplied
    session is never closed by the client and may be shared between clients.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize the Yandex.Disk client.

        Args:
            access_token: OAuth access token; an empty token raises ConfigurationError
            base_url: Base URL for API requests
            session: HTTP session to send requests with (a new one if omitted)
            timeout: Default request timeout in seconds
        """
        self._config = ClientConfig(access_token=access_token, base_url=base_url, timeout=timeout)
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    @classmethod
    def from_config(cls, config: ClientConfig, session: Optional[requests.Session] = None) -> "YandexDiskClient":
        """Create a client from a ClientConfig."""
        return cls(
            access_token=config.access_token,
            base_url=config.base_url,
            session=session,
            timeout=config.timeout,
        )

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def access_token(self) -> str:
        return self._config.access_token

    @property
    def timeout(self) -> float:
        return self._config.timeout

    def new_request(self, method: str, url_str: str, body: Any = None) -> ApiRequest:
        """
        Create an API request.

        A relative URL given in ``url_str`` is resolved against the base URL
        and should be specified without a preceding slash. If ``body`` is
        given, it is JSON encoded and included as the request body.
        """
        return build_request(method, self.base_url, self.access_token, url_str, body)

    def do(
        self,
        request: ApiRequest,
        destination: Optional[Destination] = None,
        timeout: Optional[float] = None,
    ) -> requests.Response:
        """
        Send an API request and return the HTTP response.

        The response body goes to ``destination``: a ``RawSink`` receives the
        raw bytes, a ``Typed`` destination the decoded JSON value. Responses
        with a status code of 400 or above raise APIError. Connection errors
        and timeouts propagate as raised by ``requests``.
        """
        prepared = self.session.prepare_request(
            requests.Request(
                method=request.method,
                url=request.url,
                headers=request.headers,
                data=request.body,
            )
        )
        # Session-level auth must not replace the OAuth header.
        prepared.headers["Authorization"] = request.headers["Authorization"]

        settings = self.session.merge_environment_settings(prepared.url, {}, True, None, None)
        logger.debug(f"{prepared.method} {prepared.url}")
        response = self.session.send(
            prepared,
            timeout=self.timeout if timeout is None else timeout,
            **settings,
        )
        logger.debug(f"{prepared.method} {prepared.url} -> {response.status_code}")

        try:
            check_response(response)

            if isinstance(destination, RawSink):
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    destination.write(chunk)
            elif isinstance(destination, Typed):
                destination.decode(response.content)
            elif destination is not None:
                raise TypeError(f"Unsupported destination: {destination!r}")

            return response
        finally:
            _drain_and_close(response)

    def get_disk(self) -> Disk:
        """
        Get general information about the user's Disk: available space,
        addresses of system folders and so on.

        https://yandex.com/dev/disk/api/reference/capacity.html
        """
        request = self.new_request("GET", "disk")
        disk = Typed(Disk.from_dict, default=Disk())
        self.do(request, disk)
        return disk.value

    def get_resource(self, path: str, options: Optional[ResourcesOptions] = None) -> Resource:
        """
        Get metainformation about a file or folder.

        Args:
            path: Path relative to the Disk root, or to the Trash root for
                resources in the Trash
            options: Sorting, paging, field filtering and preview options

        Returns:
            Resource, with ``embedded`` holding the listing for folders

        https://yandex.com/dev/disk/api/reference/meta.html
        """
        request = self.new_request("GET", resources_url(path, options))
        resource = Typed(Resource.from_dict, default=Resource())
        self.do(request, resource)
        return resource.value

    def list_resources(self, path: str, options: Optional[ResourcesOptions] = None) -> ResourceList:
        """List the contents of a folder. A file yields an empty list."""
        resource = self.get_resource(path, options)
        if resource.embedded is None:
            return ResourceList(path=resource.path)
        return resource.embedded

    def close(self):
        """Close the HTTP session if the client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


def resources_url(path: str, options: Optional[ResourcesOptions] = None) -> str:
    """Relative URL of the resource metainformation endpoint."""
    params = {"path": path}
    if options is not None:
        params.update(options.to_params())
    return f"disk/resources?{urlencode(params)}"


def check_response(response: requests.Response) -> None:
    """Raise APIError if the response carries an HTTP error status."""
    if response.status_code < 400:
        return
    raise decode_api_error(response.content, response.status_code, response)


def decode_api_error(data: bytes, status_code: int, response: Any = None) -> APIError:
    """Build an APIError from an error body, leaving it unclassified if the body is not JSON."""
    try:
        payload = json.loads(data)
    except ValueError:
        logger.warning(f"Could not decode error body of HTTP {status_code} response")
        return APIError(status_code=status_code, response=response)

    if not isinstance(payload, dict):
        return APIError(status_code=status_code, response=response)
    return APIError.from_dict(payload, status_code=status_code, response=response)


def _drain_and_close(response: requests.Response) -> None:
    try:
        if response.raw is not None:
            response.raw.read(DRAIN_LIMIT)
    except (OSError, ValueError, Urllib3HTTPError) as e:
        logger.debug(f"Failed to drain response body: {e}")
    finally:
        response.close()
