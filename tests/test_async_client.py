"""
Unit tests for the asynchronous Yandex.Disk client.

Each test serves its handlers from an in-process aiohttp application.
"""

import asyncio
import io
import json
import unittest
from unittest import mock

import aiohttp
from aiohttp import web
from aiohttp import test_utils

from yadisk_sdk import AsyncYandexDiskClient, RawSink, Typed
from yadisk_sdk.async_client import _drain_and_release
from yadisk_sdk.exceptions import APIError
from yadisk_sdk.models import Disk, SystemFolders


DISK = {
    "trash_size": 4631577437,
    "total_space": 319975063552,
    "used_space": 26157681270,
    "system_folders": {
        "applications": "disk:/Applications",
        "downloads": "disk:/Downloads/",
    },
}


class AsyncClientTestCase(unittest.IsolatedAsyncioTestCase):
    """Base test case starting a local server per test."""

    async def asyncSetUp(self):
        # Slow handlers block on this event; it is set before the server stops.
        self.release = asyncio.Event()

    async def _release_handlers(self):
        self.release.set()

    async def serve(self, path, handler, method="GET") -> AsyncYandexDiskClient:
        app = web.Application()
        app.router.add_route(method, path, handler)

        server = test_utils.TestServer(app)
        await server.start_server()
        self.addAsyncCleanup(server.close)
        self.addAsyncCleanup(self._release_handlers)

        client = AsyncYandexDiskClient("ACCESS_TOKEN", base_url=str(server.make_url("/")))
        self.addAsyncCleanup(client.close)
        return client


class TestAsyncDo(AsyncClientTestCase):
    """Test async request dispatch and response handling."""

    async def test_raw_sink(self):
        async def handler(request):
            return web.Response(text='{"A":"a"}', content_type="application/json")

        client = await self.serve("/v1/echo/", handler)
        buf = io.BytesIO()

        await client.do(client.new_request("GET", "echo"), RawSink(buf))

        self.assertEqual(buf.getvalue(), b'{"A":"a"}')

    async def test_typed(self):
        async def handler(request):
            return web.json_response({"A": "a"})

        client = await self.serve("/v1/echo/", handler)
        body = Typed()

        response = await client.do(client.new_request("GET", "echo"), body)

        self.assertEqual(response.status, 200)
        self.assertEqual(body.value, {"A": "a"})

    async def test_empty_body(self):
        async def handler(request):
            return web.Response(status=204)

        client = await self.serve("/v1/disk/", handler)
        disk = Typed(Disk.from_dict, default=Disk())

        await client.do(client.new_request("GET", "disk"), disk)

        self.assertEqual(disk.value, Disk())

    async def test_null_body(self):
        async def handler(request):
            return web.Response(text="null", content_type="application/json")

        client = await self.serve("/v1/disk/", handler)

        self.assertEqual(await client.get_disk(), Disk())

    async def test_non_object_body(self):
        async def handler(request):
            return web.Response(text="[1]", content_type="application/json")

        client = await self.serve("/v1/disk/", handler)

        with self.assertRaises(TypeError):
            await client.get_disk()

    async def test_unread_body_is_drained_and_released(self):
        """Test that at most 512 unread bytes are drained before release."""
        async def handler(request):
            return web.Response(body=b"x" * 4096)

        client = await self.serve("/v1/echo/", handler)
        read = aiohttp.StreamReader.read

        with mock.patch.object(aiohttp.StreamReader, "read", autospec=True, side_effect=read) as mock_read:
            response = await client.do(client.new_request("GET", "echo"))

        mock_read.assert_called_once_with(response.content, 512)
        self.assertTrue(response.closed)

    async def test_body_released_on_error(self):
        async def handler(request):
            return web.Response(status=500, body=b"y" * 4096)

        client = await self.serve("/v1/disk/", handler)

        with self.assertRaises(APIError) as ctx:
            await client.do(client.new_request("GET", "disk"))

        self.assertEqual(ctx.exception.status_code, 500)
        self.assertTrue(ctx.exception.response.closed)

    async def test_unsupported_destination(self):
        async def handler(request):
            return web.json_response({})

        client = await self.serve("/v1/disk/", handler)

        with mock.patch("yadisk_sdk.async_client._drain_and_release", wraps=_drain_and_release) as drain:
            with self.assertRaises(TypeError):
                await client.do(client.new_request("GET", "disk"), {})

        drain.assert_awaited_once()
        self.assertTrue(drain.await_args.args[0].closed)

    async def test_http_error_not_json(self):
        async def handler(request):
            return web.Response(status=400, text="Bad Request")

        client = await self.serve("/v1/echo/", handler)

        with self.assertRaises(APIError) as ctx:
            await client.do(client.new_request("GET", "echo"))

        self.assertEqual(str(ctx.exception), "Yandex.Disk API error.")
        self.assertEqual(ctx.exception.status_code, 400)

    async def test_http_error_json(self):
        async def handler(request):
            return web.json_response(
                {"description": "resource already exists", "error": "PlatformResourceAlreadyExists"},
                status=409,
            )

        client = await self.serve("/v1/echo/", handler)

        with self.assertRaises(APIError) as ctx:
            await client.do(client.new_request("GET", "echo"))

        self.assertEqual(
            str(ctx.exception),
            "Yandex.Disk API error. Code: PlatformResourceAlreadyExists. "
            "Description: resource already exists.",
        )

    async def test_headers_and_body(self):
        seen = {}

        async def handler(request):
            seen["authorization"] = request.headers.getall("Authorization")
            seen["content_type"] = request.headers.get("Content-Type")
            seen["body"] = await request.read()
            return web.json_response({})

        client = await self.serve("/v1/disk/", handler, method="POST")

        await client.do(client.new_request("POST", "disk", {"login": "sosisa"}))

        self.assertEqual(seen["authorization"], ["OAuth ACCESS_TOKEN"])
        self.assertEqual(seen["content_type"], "application/json")
        self.assertEqual(seen["body"], b'{"login":"sosisa"}\n')

    async def test_cancellation(self):
        """Test that cancelling the calling task fails the call with CancelledError."""
        started = asyncio.Event()

        async def handler(request):
            started.set()
            await self.release.wait()
            return web.json_response(DISK)

        client = await self.serve("/v1/disk/", handler)

        task = asyncio.ensure_future(client.get_disk())
        await asyncio.wait_for(started.wait(), 5)
        task.cancel()

        with self.assertRaises(asyncio.CancelledError):
            await task

    async def test_wait_for_timeout(self):
        async def handler(request):
            await self.release.wait()
            return web.json_response(DISK)

        client = await self.serve("/v1/disk/", handler)

        with self.assertRaises(asyncio.TimeoutError):
            await asyncio.wait_for(client.get_disk(), 0.2)

    async def test_per_call_timeout(self):
        async def handler(request):
            await self.release.wait()
            return web.json_response(DISK)

        client = await self.serve("/v1/disk/", handler)

        with self.assertRaises(asyncio.TimeoutError):
            await client.do(client.new_request("GET", "disk"), Typed(), timeout=0.2)

    async def test_default_timeout_with_injected_session(self):
        """Test that the client timeout bounds calls on a caller-supplied session."""
        async def handler(request):
            await self.release.wait()
            return web.json_response(DISK)

        server_client = await self.serve("/v1/disk/", handler)
        session = aiohttp.ClientSession()
        self.addAsyncCleanup(session.close)
        client = AsyncYandexDiskClient(
            "ACCESS_TOKEN", base_url=server_client.base_url, session=session, timeout=0.2
        )

        with self.assertRaises(asyncio.TimeoutError):
            await client.get_disk()

    async def test_connection_refused(self):
        client = AsyncYandexDiskClient("ACCESS_TOKEN", base_url="http://127.0.0.1:1/")
        self.addAsyncCleanup(client.close)

        with self.assertRaises(aiohttp.ClientConnectionError):
            await client.get_disk()


class TestAsyncOperations(AsyncClientTestCase):
    """Test typed async operations."""

    async def test_get_disk(self):
        async def handler(request):
            return web.json_response(DISK)

        client = await self.serve("/v1/disk/", handler)

        disk = await client.get_disk()

        self.assertEqual(
            disk,
            Disk(
                trash_size=4631577437,
                total_space=319975063552,
                used_space=26157681270,
                system_folders=SystemFolders(
                    applications="disk:/Applications",
                    downloads="disk:/Downloads/",
                ),
            ),
        )
        self.assertEqual(disk, await client.get_disk())

    async def test_get_resource(self):
        seen = {}

        async def handler(request):
            seen["query"] = dict(request.query)
            return web.Response(
                text=json.dumps({
                    "name": "Photos",
                    "path": "disk:/Photos",
                    "type": "dir",
                    "_embedded": {"path": "disk:/Photos", "items": [], "limit": 20, "offset": 0, "total": 0},
                }),
                content_type="application/json",
            )

        client = await self.serve("/v1/disk/resources/", handler)

        listing = await client.list_resources("/Photos")

        self.assertEqual(seen["query"], {"path": "/Photos"})
        self.assertEqual(listing.path, "disk:/Photos")
        self.assertEqual(listing.limit, 20)

    async def test_get_resource_not_found(self):
        async def handler(request):
            return web.json_response({"error": "DiskNotFoundError", "description": "Resource not found."}, status=404)

        client = await self.serve("/v1/disk/resources/", handler)

        with self.assertRaises(APIError) as ctx:
            await client.get_resource("/missing")
        self.assertEqual(ctx.exception.code, "DiskNotFoundError")
        self.assertEqual(str(ctx.exception), "Yandex.Disk API error. Code: DiskNotFoundError. Description: Resource not found.")


if __name__ == "__main__":
    unittest.main()
