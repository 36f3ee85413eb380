"""Shared async HTTP client for upstream requests."""

from __future__ import annotations

import httpx


def create_client(*, timeout_s: float | None = None) -> httpx.AsyncClient:
    """Create the process-wide upstream client.

    Notes:
        - `timeout_s=None` disables client timeouts entirely.
        - Redirects are not followed; the caller sees the upstream status as-is.
        - Close the client at shutdown with `await client.aclose()`.
    """

    return httpx.AsyncClient(timeout=httpx.Timeout(timeout_s), follow_redirects=False)
