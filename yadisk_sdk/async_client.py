"""
Asynchronous Yandex.Disk client implementation.

This module provides an async/await compatible client built on ``aiohttp``.
Calls run inside the caller's task, so cancelling the task or wrapping the
call in ``asyncio.wait_for`` bounds its lifetime: the call then fails with
``asyncio.CancelledError`` or ``asyncio.TimeoutError``.
"""

import asyncio
import logging
from typing import Optional, Any

import aiohttp

from .client import CHUNK_SIZE, DRAIN_LIMIT, decode_api_error, resources_url
from .config import ClientConfig
from .destinations import Destination, RawSink, Typed
from .models import Disk, Resource, ResourceList, ResourcesOptions
from .request import ApiRequest, DEFAULT_BASE_URL, build_request


logger = logging.getLogger(__name__)


class AsyncYandexDiskClient:
    """
    Asynchronous client for the Yandex.Disk API.

    Provides the same operations as YandexDiskClient with async/await
    support, for callers issuing many calls concurrently.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize the async Yandex.Disk client.

        Args:
            access_token: OAuth access token; an empty token raises ConfigurationError
            base_url: Base URL for API requests
            session: aiohttp session to send requests with; if omitted one is
                created on first use and closed by ``close()``
            timeout: Default request timeout in seconds
        """
        self._config = ClientConfig(access_token=access_token, base_url=base_url, timeout=timeout)
        self._owns_session = session is None
        self._session: Optional[aiohttp.ClientSession] = session

    @classmethod
    def from_config(
        cls, config: ClientConfig, session: Optional[aiohttp.ClientSession] = None
    ) -> "AsyncYandexDiskClient":
        """Create an async client from a ClientConfig."""
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

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owns_session = True
        return self._session

    def new_request(self, method: str, url_str: str, body: Any = None) -> ApiRequest:
        """Create an API request. See YandexDiskClient.new_request."""
        return build_request(method, self.base_url, self.access_token, url_str, body)

    async def do(
        self,
        request: ApiRequest,
        destination: Optional[Destination] = None,
        timeout: Optional[float] = None,
    ) -> aiohttp.ClientResponse:
        """
        Send an API request and return the HTTP response.

        Behaves like YandexDiskClient.do. Cancellation and timeouts propagate
        unwrapped as ``asyncio.CancelledError`` and ``asyncio.TimeoutError``.
        """
        session = await self._get_session()

        # Overrides the default timeout of an injected session too.
        client_timeout = aiohttp.ClientTimeout(total=self.timeout if timeout is None else timeout)

        logger.debug(f"{request.method} {request.url}")
        response = await session.request(
            request.method,
            request.url,
            headers=request.headers,
            data=request.body,
            timeout=client_timeout,
        )
        logger.debug(f"{request.method} {request.url} -> {response.status}")

        try:
            if response.status >= 400:
                data = await response.read()
                raise decode_api_error(data, response.status, response)

            if isinstance(destination, RawSink):
                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    destination.write(chunk)
            elif isinstance(destination, Typed):
                destination.decode(await response.read())
            elif destination is not None:
                raise TypeError(f"Unsupported destination: {destination!r}")

            return response
        finally:
            await _drain_and_release(response)

    async def get_disk(self) -> Disk:
        """Get general information about the user's Disk."""
        request = self.new_request("GET", "disk")
        disk = Typed(Disk.from_dict, default=Disk())
        await self.do(request, disk)
        return disk.value

    async def get_resource(self, path: str, options: Optional[ResourcesOptions] = None) -> Resource:
        """Get metainformation about a file or folder."""
        request = self.new_request("GET", resources_url(path, options))
        resource = Typed(Resource.from_dict, default=Resource())
        await self.do(request, resource)
        return resource.value

    async def list_resources(self, path: str, options: Optional[ResourcesOptions] = None) -> ResourceList:
        """List the contents of a folder. A file yields an empty list."""
        resource = await self.get_resource(path, options)
        if resource.embedded is None:
            return ResourceList(path=resource.path)
        return resource.embedded

    async def close(self):
        """Close the aiohttp session if the client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


async def _drain_and_release(response: aiohttp.ClientResponse) -> None:
    try:
        if not response.content.at_eof():
            await response.content.read(DRAIN_LIMIT)
    except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as e:
        logger.debug(f"Failed to drain response body: {e}")
    finally:
        response.release()
