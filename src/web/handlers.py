"""HTTP API handlers.

Contract: a statement that fails to parse yields 400 with the parser's message; a statement that
parses yields 200 with the request summary and the upstream outcome, even if the upstream call
itself failed.
"""

from __future__ import annotations

import logging
from time import monotonic
from typing import Any

from src.app import App
from src.reqline.errors import ReqlineError
from src.reqline.parser import parse_reqline
from src.upstream.execute import execute_request
from src.web.models import ErrorBody, build_result
from src.web.server import HandlerResult

logger = logging.getLogger(__name__)


def _extract_statement(payload: Any) -> Any:
    if isinstance(payload, dict):
        return payload.get("reqline")
    return None


async def handle_reqline(payload: Any, app: App) -> HandlerResult:
    """Parse the posted reqline statement, execute it and report both sides."""

    started = monotonic()

    try:
        descriptor = parse_reqline(_extract_statement(payload))
    except ReqlineError as exc:
        latency_ms = int((monotonic() - started) * 1000)
        logger.info("rejected reason=%s latency_ms=%d", exc.kind, latency_ms)
        return HandlerResult(status=400, data=ErrorBody(message=exc.message).model_dump())

    execution = await execute_request(app.client, descriptor)
    result = build_result(descriptor, execution)

    latency_ms = int((monotonic() - started) * 1000)
    logger.info(
        "handled method=%s http_status=%d upstream_ms=%d latency_ms=%d",
        descriptor.method,
        execution.http_status,
        execution.duration,
        latency_ms,
    )
    return HandlerResult(status=200, data=result.model_dump(mode="json"))
