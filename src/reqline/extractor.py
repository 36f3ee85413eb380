"""Keyword/value extraction for a single segment."""

from __future__ import annotations

from src.reqline.errors import ReqlineError, ReqlineErrorKind
from src.reqline.keywords import SectionKeyword, lookup_keyword


def extract_keyword(segment: str) -> tuple[SectionKeyword, str]:
    """Split a segment into its keyword and raw value.

    The keyword is everything before the first space and must match a `SectionKeyword` exactly.
    Exactly one space separates it from a non-empty value.

    Raises:
        ReqlineError: `missing_space_after_keyword`, `non_uppercase_keyword` or `multiple_spaces`.
    """

    space_index = segment.find(" ")
    if space_index == -1:
        raise ReqlineError(ReqlineErrorKind.missing_space_after_keyword)

    token = segment[:space_index]
    value = segment[space_index + 1:]

    keyword = lookup_keyword(token)
    if token != token.upper() or keyword is None:
        raise ReqlineError(ReqlineErrorKind.non_uppercase_keyword)

    if not value:
        raise ReqlineError(ReqlineErrorKind.missing_space_after_keyword)
    if value[0] == " ":
        raise ReqlineError(ReqlineErrorKind.multiple_spaces)

    return keyword, value
