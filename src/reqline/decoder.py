"""Strict JSON decoding for HEADERS, QUERY and BODY sections.

Decoding returns a tagged result instead of raising: a malformed section is an expected outcome
and the caller decides whether it becomes a `ReqlineError`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from src.reqline.errors import ReqlineError, ReqlineErrorKind
from src.reqline.keywords import JSON_SECTIONS, SectionKeyword


@dataclass(frozen=True)
class Decoded:
    """A section value successfully decoded into a JSON object."""

    section: SectionKeyword
    value: dict[str, Any]


@dataclass(frozen=True)
class DecodeFailure:
    """A section value that is not a valid JSON object."""

    section: SectionKeyword
    kind: ReqlineErrorKind

    def to_error(self) -> ReqlineError:
        return ReqlineError(self.kind, section=self.section.value)


DecodeResult = Decoded | DecodeFailure


def _reject_constant(name: str) -> Any:
    # json accepts NaN/Infinity by default; standard JSON does not.
    raise ValueError(f"non-standard JSON constant: {name}")


def _is_utf8_encodable(value: dict[str, Any]) -> bool:
    """False when a key or string holds a lone surrogate escape such as `\\ud800`."""

    try:
        json.dumps(value, ensure_ascii=False).encode("utf-8")
    except (UnicodeEncodeError, RecursionError):
        return False
    return True


def decode_section(raw_value: str, section: SectionKeyword) -> DecodeResult:
    """Decode a JSON section value.

    Raises:
        ValueError: If `section` is not a JSON-bearing section (programming error).
    """

    if section not in JSON_SECTIONS:
        raise ValueError(f"{section} is not a JSON section")

    try:
        value = json.loads(raw_value, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return DecodeFailure(section=section, kind=ReqlineErrorKind.invalid_section_json)

    if not isinstance(value, dict):
        return DecodeFailure(section=section, kind=ReqlineErrorKind.section_not_object)

    if not _is_utf8_encodable(value):
        return DecodeFailure(section=section, kind=ReqlineErrorKind.invalid_section_json)

    return Decoded(section=section, value=value)
