"""Tests for the asyncio HTTP server over a real loopback socket."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx
import pytest

from src.app import App
from src.config.settings import Settings
from src.web.router import router
from src.web.server import HandlerResult, HTTPServer, Router


def _make_app(**overrides: Any) -> App:
    settings = Settings(_env_file=None, HOST="127.0.0.1", PORT=0, **overrides)
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda _request: httpx.Response(200, json={"pong": True}))
    )
    return App(settings=settings, client=client)


@asynccontextmanager
async def _running(app: App, routes: Router = router) -> AsyncIterator[int]:
    server = await HTTPServer(app, routes).start()
    port = server.sockets[0].getsockname()[1]
    try:
        yield port
    finally:
        server.close()
        await server.wait_closed()
        await app.client.aclose()


async def _roundtrip(port: int, raw: bytes) -> tuple[int, dict[str, str], Any]:
    reader, writer = await asyncio.open_connection("127.0.0.1", port)
    writer.write(raw)
    await writer.drain()
    data = await reader.read()
    writer.close()
    await writer.wait_closed()

    head, _, body = data.partition(b"\r\n\r\n")
    lines = head.decode("iso-8859-1").split("\r\n")
    status = int(lines[0].split()[1])
    headers = {}
    for line in lines[1:]:
        key, value = line.split(":", 1)
        headers[key.strip().lower()] = value.strip()
    return status, headers, json.loads(body)


def _post(path: str, payload: bytes) -> bytes:
    return (
        f"POST {path} HTTP/1.1\r\nHost: localhost\r\nContent-Type: application/json\r\n"
        f"Content-Length: {len(payload)}\r\n\r\n"
    ).encode() + payload


@pytest.mark.asyncio
async def test_post_reqline_end_to_end() -> None:
    payload = json.dumps({"reqline": "HTTP GET | URL http://upstream.test/ping"}).encode()

    async with _running(_make_app()) as port:
        status, headers, body = await _roundtrip(port, _post("/", payload))

    assert status == 200
    assert headers["content-type"].startswith("application/json")
    assert headers["connection"] == "close"
    assert body["request"]["full_url"] == "http://upstream.test/ping"
    assert body["response"]["http_status"] == 200
    assert body["response"]["response_data"] == {"pong": True}


@pytest.mark.asyncio
async def test_parse_error_is_400() -> None:
    payload = json.dumps({"reqline": "HTTP GET|URL http://x"}).encode()

    async with _running(_make_app()) as port:
        status, _, body = await _roundtrip(port, _post("/", payload))

    assert status == 400
    assert body == {"error": True, "message": "Invalid spacing around pipe delimiter"}


@pytest.mark.asyncio
async def test_non_json_body_is_invalid_input() -> None:
    async with _running(_make_app()) as port:
        status, _, body = await _roundtrip(port, _post("/", b"reqline=HTTP GET"))

    assert status == 400
    assert body == {"error": True, "message": "Invalid reqline input"}


@pytest.mark.asyncio
async def test_unknown_path_is_404() -> None:
    async with _running(_make_app()) as port:
        status, _, body = await _roundtrip(port, _post("/nope", b"{}"))

    assert status == 404
    assert body == {"error": True, "message": "Not Found"}


@pytest.mark.asyncio
async def test_wrong_method_is_405() -> None:
    async with _running(_make_app()) as port:
        status, headers, _ = await _roundtrip(port, b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n")

    assert status == 405
    assert headers["allow"] == "POST"


@pytest.mark.asyncio
async def test_malformed_request_line_is_400() -> None:
    async with _running(_make_app()) as port:
        status, _, body = await _roundtrip(port, b"GARBAGE\r\n\r\n")

    assert status == 400
    assert body["error"] is True


@pytest.mark.asyncio
async def test_oversized_body_is_413() -> None:
    raw = b"POST / HTTP/1.1\r\nHost: localhost\r\nContent-Length: 2048\r\n\r\n"

    async with _running(_make_app(MAX_BODY_BYTES=1024)) as port:
        status, _, body = await _roundtrip(port, raw)

    assert status == 413
    assert body == {"error": True, "message": "Payload Too Large"}


@pytest.mark.asyncio
async def test_handler_crash_is_500() -> None:
    async def _boom(_payload: Any, _app: App) -> HandlerResult:
        raise RuntimeError("boom")

    routes = Router(name="test")
    routes.register("POST", "/", _boom)

    async with _running(_make_app(), routes) as port:
        status, _, body = await _roundtrip(port, _post("/", b"{}"))

    assert status == 500
    assert body == {"error": True, "message": "Internal server error"}


def test_router_rejects_duplicate_routes() -> None:
    async def _noop(_payload: Any, _app: App) -> HandlerResult:
        return HandlerResult(status=200, data={})

    routes = Router(name="test")
    routes.register("post", "/", _noop)
    with pytest.raises(ValueError):
        routes.register("POST", "/", _noop)


@pytest.mark.asyncio
async def test_deeply_nested_payload_is_invalid_input() -> None:
    depth = 200_000
    payload = b"[" * depth + b"]" * depth

    async with _running(_make_app()) as port:
        status, _, body = await _roundtrip(port, _post("/", payload))

    assert status == 400
    assert body == {"error": True, "message": "Invalid reqline input"}


@pytest.mark.asyncio
async def test_deeply_nested_section_is_400() -> None:
    depth = 200_000
    statement = "HTTP POST | URL http://upstream.test/ | BODY " + "[" * depth + "]" * depth
    payload = json.dumps({"reqline": statement}).encode()

    async with _running(_make_app()) as port:
        status, _, body = await _roundtrip(port, _post("/", payload))

    assert status == 400
    assert body == {"error": True, "message": "Invalid JSON format in BODY section"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("section", "message"),
    [
        ("QUERY", "Invalid JSON format in QUERY section"),
        ("BODY", "Invalid JSON format in BODY section"),
        ("HEADERS", "Invalid JSON format in HEADERS section"),
    ],
)
async def test_lone_surrogate_in_section_is_400(section: str, message: str) -> None:
    statement = "HTTP POST | URL http://upstream.test/ | " + section + ' {"a": "\\ud800"}'
    payload = json.dumps({"reqline": statement}).encode()

    async with _running(_make_app()) as port:
        status, _, body = await _roundtrip(port, _post("/", payload))

    assert status == 400
    assert body == {"error": True, "message": message}


@pytest.mark.asyncio
async def test_lone_surrogate_in_response_data_is_escaped() -> None:
    async def _echo(_payload: Any, _app: App) -> HandlerResult:
        return HandlerResult(status=200, data={"response_data": "\ud800"})

    routes = Router(name="test")
    routes.register("POST", "/", _echo)

    async with _running(_make_app(), routes) as port:
        status, _, body = await _roundtrip(port, _post("/", b"{}"))

    assert status == 200
    assert body == {"response_data": "\ud800"}
