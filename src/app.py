"""Application composition root.

This module wires together configuration and the shared upstream HTTP client for the service
runtime.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from src.config.settings import Settings
from src.upstream.client import create_client


@dataclass(frozen=True)
class App:
    """Shared application dependencies for handlers."""

    settings: Settings
    client: httpx.AsyncClient


def create_app(settings: Settings) -> App:
    """Create the application container.

    Note:
        The returned client stays open for the process lifetime. Call `await app.client.aclose()`
        at shutdown.
    """

    client = create_client(timeout_s=settings.upstream_timeout_s)
    return App(settings=settings, client=client)
