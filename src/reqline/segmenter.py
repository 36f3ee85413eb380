"""Pipe-delimited segmentation of a reqline statement.

A delimiter is exactly ` | `: one space on each side of the pipe and a non-space character beyond
each of those spaces. The scan is a single left-to-right pass with a cursor; the four lookahead
positions around a pipe are named so the spacing rules read as they are stated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.reqline.errors import ReqlineError, ReqlineErrorKind

PIPE = "|"
SPACE = " "


@dataclass
class _Cursor:
    text: str
    pos: int = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def current(self) -> str:
        return self.text[self.pos]

    def peek(self, offset: int) -> str | None:
        """Character at `pos + offset`, or `None` outside the text."""

        index = self.pos + offset
        if index < 0 or index >= len(self.text):
            return None
        return self.text[index]

    def advance(self) -> None:
        self.pos += 1


def _check_pipe_spacing(cursor: _Cursor) -> None:
    prev_prev = cursor.peek(-2)
    prev = cursor.peek(-1)
    next_ = cursor.peek(1)
    next_next = cursor.peek(2)

    if prev != SPACE or next_ != SPACE:
        raise ReqlineError(ReqlineErrorKind.pipe_spacing)
    if prev_prev == SPACE or next_next == SPACE:
        raise ReqlineError(ReqlineErrorKind.pipe_spacing)


def split_segments(statement: Any) -> list[str]:
    """Split a statement into its segments, preserving order.

    Raises:
        ReqlineError: `invalid_input`, `empty_input`, `boundary_spacing` or `pipe_spacing`.
    """

    if not isinstance(statement, str):
        raise ReqlineError(ReqlineErrorKind.invalid_input)
    if not statement:
        raise ReqlineError(ReqlineErrorKind.empty_input)
    if statement[0] == SPACE or statement[-1] == SPACE:
        raise ReqlineError(ReqlineErrorKind.boundary_spacing)

    segments: list[str] = []
    segment_start = 0
    cursor = _Cursor(statement)

    while not cursor.at_end():
        if cursor.current() == PIPE:
            _check_pipe_spacing(cursor)

            # The segment ends before the space that precedes the pipe.
            segment = statement[segment_start:cursor.pos - 1]
            if not segment:
                raise ReqlineError(ReqlineErrorKind.pipe_spacing)
            segments.append(segment)
            segment_start = cursor.pos + 2
        cursor.advance()

    remainder = statement[segment_start:]
    if not remainder:
        raise ReqlineError(ReqlineErrorKind.pipe_spacing)
    segments.append(remainder)

    return segments
