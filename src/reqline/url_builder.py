"""Query-string serialization and full URL construction."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote

from src.reqline.errors import ReqlineError, ReqlineErrorKind
from src.reqline.keywords import SectionKeyword

# Characters left unescaped, matching JavaScript's `encodeURIComponent`.
_UNRESERVED_MARKS = "-_.!~*'()"


def to_text(value: Any) -> str:
    """Coerce a decoded JSON value into its query/header text form.

    Rules:
        - strings are used verbatim;
        - booleans become `true`/`false`, null becomes `null`;
        - integral floats drop the fraction (`1.0` -> `1`), other numbers use Python's repr;
        - arrays and objects become compact JSON.
    """

    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, int | float):
        return repr(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def percent_encode(text: str) -> str:
    """Percent-encode a query key or value (UTF-8, `encodeURIComponent` semantics)."""

    return quote(text, safe=_UNRESERVED_MARKS)


def build_query_string(query: dict[str, Any]) -> str:
    """Serialize a mapping into `key=value&...`, preserving insertion order.

    Raises:
        ReqlineError: `invalid_section_json` naming QUERY if a key or value is not valid Unicode.
    """

    try:
        return "&".join(
            f"{percent_encode(str(key))}={percent_encode(to_text(value))}"
            for key, value in query.items()
        )
    except UnicodeEncodeError as exc:
        raise ReqlineError(
            ReqlineErrorKind.invalid_section_json, section=SectionKeyword.QUERY.value
        ) from exc


def build_full_url(base_url: str, query: dict[str, Any]) -> str:
    """Append the serialized query to `base_url`.

    The base URL is returned unchanged for an empty query; otherwise `?` or `&` is used depending on
    whether the base URL already carries a query string.
    """

    query_string = build_query_string(query)
    if not query_string:
        return base_url

    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{query_string}"
