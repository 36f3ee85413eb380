"""Reqline error taxonomy.

Every parse failure maps to exactly one `ReqlineErrorKind`; the message shown to API clients is
rendered from the kind's template.
"""

from __future__ import annotations

from enum import StrEnum


class ReqlineErrorKind(StrEnum):
    """All the ways a reqline statement can be rejected."""

    invalid_input = "invalid_input"
    empty_input = "empty_input"
    boundary_spacing = "boundary_spacing"
    pipe_spacing = "pipe_spacing"
    missing_space_after_keyword = "missing_space_after_keyword"
    multiple_spaces = "multiple_spaces"
    non_uppercase_keyword = "non_uppercase_keyword"
    missing_http_keyword = "missing_http_keyword"
    missing_url_keyword = "missing_url_keyword"
    duplicate_section = "duplicate_section"
    non_uppercase_method = "non_uppercase_method"
    unsupported_method = "unsupported_method"
    invalid_section_json = "invalid_section_json"
    section_not_object = "section_not_object"


_MESSAGES: dict[ReqlineErrorKind, str] = {
    ReqlineErrorKind.invalid_input: "Invalid reqline input",
    ReqlineErrorKind.empty_input: "Missing required HTTP keyword",
    ReqlineErrorKind.boundary_spacing: "Multiple spaces found where single space expected",
    ReqlineErrorKind.pipe_spacing: "Invalid spacing around pipe delimiter",
    ReqlineErrorKind.missing_space_after_keyword: "Missing space after keyword",
    ReqlineErrorKind.multiple_spaces: "Multiple spaces found where single space expected",
    ReqlineErrorKind.non_uppercase_keyword: "Keywords must be uppercase",
    ReqlineErrorKind.missing_http_keyword: "Missing required HTTP keyword",
    ReqlineErrorKind.missing_url_keyword: "Missing required URL keyword",
    ReqlineErrorKind.duplicate_section: "Duplicate section {keyword}",
    ReqlineErrorKind.non_uppercase_method: "HTTP method must be uppercase",
    ReqlineErrorKind.unsupported_method: "Invalid HTTP method. Only GET and POST are supported",
    ReqlineErrorKind.invalid_section_json: "Invalid JSON format in {section} section",
    ReqlineErrorKind.section_not_object: "{section} section must be a JSON object",
}


def render_message(
        kind: ReqlineErrorKind,
        *,
        section: str | None = None,
        keyword: str | None = None,
) -> str:
    """Render the client-facing message for an error kind."""

    return _MESSAGES[kind].format(section=section or "", keyword=keyword or "")


class ReqlineError(ValueError):
    """Raised when a reqline statement cannot be turned into a request descriptor.

    Attributes:
        kind: The classified failure.
        section: The JSON section (HEADERS/QUERY/BODY) that failed to decode, if any.
        keyword: The keyword involved in a duplicate-section failure, if any.
    """

    def __init__(
            self,
            kind: ReqlineErrorKind,
            *,
            section: str | None = None,
            keyword: str | None = None,
    ) -> None:
        self.kind = kind
        self.section = section
        self.keyword = keyword
        self.message = render_message(kind, section=section, keyword=keyword)
        super().__init__(self.message)
