"""Closed vocabularies of the reqline grammar."""

from __future__ import annotations

from enum import StrEnum


class SectionKeyword(StrEnum):
    """Section keywords, in canonical statement order."""

    HTTP = "HTTP"
    URL = "URL"
    HEADERS = "HEADERS"
    QUERY = "QUERY"
    BODY = "BODY"


class HttpMethod(StrEnum):
    """HTTP methods a statement may use."""

    GET = "GET"
    POST = "POST"


# Sections whose value is decoded as a JSON object.
JSON_SECTIONS: frozenset[SectionKeyword] = frozenset(
    {SectionKeyword.HEADERS, SectionKeyword.QUERY, SectionKeyword.BODY}
)


def lookup_keyword(token: str) -> SectionKeyword | None:
    """Return the keyword for an exact (case-sensitive) token, or `None`."""

    try:
        return SectionKeyword(token)
    except ValueError:
        return None
