"""Reqline statement assembler.

Composes segmentation, keyword extraction and section decoding into a single `RequestDescriptor`.
Errors raised by any step propagate unchanged as `ReqlineError`.
"""

from __future__ import annotations

from typing import Any

from src.reqline.decoder import DecodeFailure, decode_section
from src.reqline.errors import ReqlineError, ReqlineErrorKind
from src.reqline.extractor import extract_keyword
from src.reqline.keywords import JSON_SECTIONS, HttpMethod, SectionKeyword
from src.reqline.schema import RequestDescriptor
from src.reqline.segmenter import split_segments
from src.reqline.url_builder import build_full_url


def _check_required_order(segments: list[str]) -> None:
    """HTTP must open the statement and URL must follow it."""

    if not segments[0].startswith(SectionKeyword.HTTP.value):
        raise ReqlineError(ReqlineErrorKind.missing_http_keyword)
    if len(segments) < 2 or not segments[1].startswith(SectionKeyword.URL.value):
        raise ReqlineError(ReqlineErrorKind.missing_url_keyword)


def _parse_method(value: str) -> HttpMethod:
    if value != value.upper():
        raise ReqlineError(ReqlineErrorKind.non_uppercase_method)
    try:
        return HttpMethod(value)
    except ValueError as exc:
        raise ReqlineError(ReqlineErrorKind.unsupported_method) from exc


def parse_reqline(statement: Any) -> RequestDescriptor:
    """Parse a reqline statement into a validated request descriptor.

    Raises:
        ReqlineError: If the statement violates the grammar or a section cannot be decoded.
    """

    segments = split_segments(statement)
    _check_required_order(segments)

    seen: set[SectionKeyword] = set()
    method: HttpMethod | None = None
    url = ""
    sections: dict[SectionKeyword, dict[str, Any]] = {}

    for segment in segments:
        keyword, value = extract_keyword(segment)

        if keyword in seen:
            raise ReqlineError(ReqlineErrorKind.duplicate_section, keyword=keyword.value)
        seen.add(keyword)

        if keyword == SectionKeyword.HTTP:
            method = _parse_method(value)
        elif keyword == SectionKeyword.URL:
            url = value
        elif keyword in JSON_SECTIONS:
            result = decode_section(value, keyword)
            if isinstance(result, DecodeFailure):
                raise result.to_error()
            sections[keyword] = result.value

    # The order check guarantees both sections were seen.
    assert method is not None

    query = sections.get(SectionKeyword.QUERY, {})
    return RequestDescriptor(
        method=method,
        url=url,
        headers=sections.get(SectionKeyword.HEADERS, {}),
        query=query,
        body=sections.get(SectionKeyword.BODY, {}),
        full_url=build_full_url(url, query),
    )
