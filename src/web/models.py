"""Wire models for the reqline HTTP API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel

from src.reqline.schema import RequestDescriptor
from src.upstream.execute import ExecutionResult


class ErrorBody(BaseModel):
    """Body of every non-200 response."""

    error: Literal[True] = True
    message: str


class RequestSummary(BaseModel):
    query: dict[str, Any]
    body: dict[str, Any]
    headers: dict[str, Any]
    full_url: str


class ResponseSummary(BaseModel):
    http_status: int
    duration: int
    request_start_timestamp: int
    request_stop_timestamp: int
    response_data: Any = None


class ReqlineResult(BaseModel):
    """Body of a 200 response: the parsed request and the timed upstream response."""

    request: RequestSummary
    response: ResponseSummary


def build_result(descriptor: RequestDescriptor, execution: ExecutionResult) -> ReqlineResult:
    return ReqlineResult(
        request=RequestSummary(
            query=descriptor.query,
            body=descriptor.body,
            headers=descriptor.headers,
            full_url=descriptor.full_url,
        ),
        response=ResponseSummary(
            http_status=execution.http_status,
            duration=execution.duration,
            request_start_timestamp=execution.request_start_timestamp,
            request_stop_timestamp=execution.request_stop_timestamp,
            response_data=execution.response_data,
        ),
    )
