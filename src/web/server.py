"""Minimal asyncio HTTP/1.1 server for JSON APIs.

One request per connection: the server reads the head and a `Content-Length` body, dispatches the
decoded JSON payload to the registered handler and answers with a JSON document and
`Connection: close`.
"""

from __future__ import annotations

import asyncio
import json
import logging
import socket
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any
from urllib.parse import unquote

from src.app import App
from src.web.models import ErrorBody

logger = logging.getLogger(__name__)

MAX_HEADER_BYTES = 64 * 1024
_HEAD_TERMINATOR = b"\r\n\r\n"


@dataclass(frozen=True)
class HandlerResult:
    """What a handler returns: an HTTP status and a JSON-serializable body."""

    status: int
    data: Any


Handler = Callable[[Any, App], Awaitable[HandlerResult]]


class RouteNotFound(LookupError):
    """No route is registered for the path."""


class MethodNotAllowed(LookupError):
    """The path exists but not for the requested method."""

    def __init__(self, allowed: list[str]) -> None:
        self.allowed = allowed
        super().__init__(", ".join(allowed))


class Router:
    """Maps `(method, path)` pairs to handlers."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._routes: dict[str, dict[str, Handler]] = {}

    def register(self, method: str, path: str, handler: Handler) -> None:
        methods = self._routes.setdefault(path, {})
        method = method.upper()
        if method in methods:
            raise ValueError(f"route already registered: {method} {path}")
        methods[method] = handler

    def resolve(self, method: str, path: str) -> Handler:
        """Return the handler for a request.

        Raises:
            RouteNotFound: If nothing is registered for `path`.
            MethodNotAllowed: If `path` is registered for other methods only.
        """

        methods = self._routes.get(path)
        if methods is None:
            raise RouteNotFound(path)
        handler = methods.get(method.upper())
        if handler is None:
            raise MethodNotAllowed(sorted(methods))
        return handler


class PayloadTooLarge(ValueError):
    """The declared request body exceeds the configured limit."""


@dataclass(frozen=True)
class Request:
    method: str
    target: str
    path: str
    version: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


@dataclass(frozen=True)
class ResponseSpec:
    status: int
    data: Any
    headers: dict[str, str] = field(default_factory=dict)


def _error_response(status: int, message: str, headers: dict[str, str] | None = None) -> ResponseSpec:
    return ResponseSpec(
        status=status,
        data=ErrorBody(message=message).model_dump(),
        headers=headers or {},
    )


def _decode_json_body(body: bytes) -> Any:
    """Decoded JSON payload, or `None` when the body is empty or not JSON."""

    if not body:
        return None
    try:
        return json.loads(body)
    except (ValueError, RecursionError):
        return None


def _parse_head(raw: bytes) -> Request:
    lines = raw.removesuffix(_HEAD_TERMINATOR).split(b"\r\n")

    request_line = lines[0].decode("iso-8859-1")
    parts = request_line.split()
    if len(parts) != 3:
        raise ValueError("bad request line")

    method, target, version = parts
    if not version.startswith("HTTP/"):
        raise ValueError("bad http version")

    headers: dict[str, str] = {}
    for bline in lines[1:]:
        if not bline:
            continue
        line = bline.decode("iso-8859-1", errors="ignore")
        if ":" not in line:
            raise ValueError("bad header line")
        k, v = line.split(":", 1)
        headers[k.strip().lower()] = v.strip()

    path = unquote(target.split("?", 1)[0])
    return Request(method=method, target=target, path=path, version=version, headers=headers)


class HTTPServer:
    """Serves a `Router` over plain HTTP/1.1."""

    def __init__(self, app: App, router: Router, server_name: str | None = None) -> None:
        self.app = app
        self.router = router
        if server_name is None:
            server_name = f"reqline/{socket.gethostname()}"
        self.server_name = server_name

    async def start(self) -> asyncio.Server:
        """Bind the listening socket. The caller owns the returned server."""

        return await asyncio.start_server(
            self.handle_connection,
            host=self.app.settings.host,
            port=self.app.settings.port,
            limit=MAX_HEADER_BYTES,
        )

    async def handle_connection(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            await self.process(reader, writer)
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                pass

    async def process(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            request = await self._read_request(reader)
        except (asyncio.IncompleteReadError, ConnectionError):
            return
        except PayloadTooLarge:
            return await self._send(writer, _error_response(413, "Payload Too Large"))
        except asyncio.LimitOverrunError:
            return await self._send(writer, _error_response(431, "Request Header Fields Too Large"))
        except ValueError:
            return await self._send(writer, _error_response(400, "Bad Request"))

        response = await self._dispatch(request)
        await self._send(writer, response)

    async def _read_request(self, reader: asyncio.StreamReader) -> Request:
        raw = await reader.readuntil(_HEAD_TERMINATOR)
        request = _parse_head(raw)

        if "transfer-encoding" in request.headers:
            raise ValueError("chunked request bodies are not supported")

        length_header = request.headers.get("content-length", "0")
        if not length_header.isdigit():
            raise ValueError("bad content-length")
        length = int(length_header)
        if length > self.app.settings.max_body_bytes:
            raise PayloadTooLarge(str(length))

        body = await reader.readexactly(length) if length else b""
        return Request(
            method=request.method,
            target=request.target,
            path=request.path,
            version=request.version,
            headers=request.headers,
            body=body,
        )

    async def _dispatch(self, request: Request) -> ResponseSpec:
        try:
            handler = self.router.resolve(request.method, request.path)
        except RouteNotFound:
            return _error_response(404, "Not Found")
        except MethodNotAllowed as exc:
            return _error_response(405, "Method Not Allowed", {"Allow": ", ".join(exc.allowed)})

        payload = _decode_json_body(request.body)

        # noinspection PyBroadException
        try:
            result = await handler(payload, self.app)
        except Exception:
            # Server boundary: every request gets a structured response.
            logger.exception("handler failed method=%s path=%s", request.method, request.path)
            return _error_response(500, "Internal server error")

        return ResponseSpec(status=result.status, data=result.data)

    async def _send(self, writer: asyncio.StreamWriter, resp: ResponseSpec) -> None:
        # ASCII escapes keep lone surrogates in upstream data serializable.
        body = json.dumps(resp.data).encode("ascii")

        headers = dict(resp.headers)
        headers.setdefault("Content-Type", "application/json; charset=utf-8")
        headers.setdefault("Content-Length", str(len(body)))
        headers.setdefault("Date", self._http_date())
        headers.setdefault("Server", self.server_name)
        headers.setdefault("Connection", "close")

        status_line = f"HTTP/1.1 {resp.status} {self._reason(resp.status)}\r\n"
        header_block = status_line + "".join(f"{k}: {v}\r\n" for k, v in headers.items()) + "\r\n"
        writer.write(header_block.encode("iso-8859-1") + body)
        try:
            await writer.drain()
        except ConnectionError:
            logger.info("client went away before the response was sent")

    @staticmethod
    def _reason(status: int) -> str:
        try:
            return HTTPStatus(status).phrase
        except ValueError:
            return "Unknown"

    @staticmethod
    def _http_date() -> str:
        dt = datetime.now(timezone.utc)
        return dt.strftime("%a, %d %b %Y %H:%M:%S GMT")
