"""Upstream request execution with timing metadata.

Failures of the upstream call (connection errors, timeouts, unusable URLs) never propagate: they
are folded into the `ExecutionResult` with `http_status = 0` and a synthesized error object.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from src.reqline.keywords import HttpMethod
from src.reqline.schema import RequestDescriptor
from src.reqline.url_builder import to_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one upstream call."""

    http_status: int
    duration: int
    request_start_timestamp: int
    request_stop_timestamp: int
    response_data: Any


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def _header_values(headers: dict[str, Any]) -> dict[str, str]:
    return {key: to_text(value) for key, value in headers.items()}


def decode_response_data(response: httpx.Response) -> Any:
    """Return the JSON body when it parses, the text body otherwise, `None` when empty."""

    if not response.content:
        return None
    try:
        return response.json()
    except (ValueError, RecursionError):
        return response.text


async def _send(client: httpx.AsyncClient, descriptor: RequestDescriptor) -> httpx.Response:
    headers = _header_values(descriptor.headers)
    if descriptor.method == HttpMethod.POST:
        return await client.post(descriptor.full_url, json=descriptor.body, headers=headers)
    return await client.get(descriptor.full_url, headers=headers)


async def execute_request(
        client: httpx.AsyncClient,
        descriptor: RequestDescriptor,
) -> ExecutionResult:
    """Send the described request upstream and time it."""

    started = _epoch_ms()
    try:
        response = await _send(client, descriptor)
        http_status = response.status_code
        response_data = decode_response_data(response)
    except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
        # UnicodeEncodeError: non-ASCII header values cannot go on the wire.
        logger.warning(
            "upstream failed method=%s url=%s error=%s",
            descriptor.method,
            descriptor.full_url,
            type(exc).__name__,
        )
        http_status = 0
        response_data = {"error": True, "message": str(exc) or type(exc).__name__}
    stopped = _epoch_ms()

    return ExecutionResult(
        http_status=http_status,
        duration=stopped - started,
        request_start_timestamp=started,
        request_stop_timestamp=stopped,
        response_data=response_data,
    )
