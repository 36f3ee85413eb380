"""Service process entrypoint."""

from __future__ import annotations

import asyncio
import logging

from src.app import create_app
from src.config.logging import configure_logging
from src.config.settings import Settings, load_settings
from src.web.router import router
from src.web.server import HTTPServer

logger = logging.getLogger(__name__)


async def serve(settings: Settings) -> None:
    """Serve the reqline API until cancelled."""

    app = create_app(settings)
    server = await HTTPServer(app, router).start()

    for sock in server.sockets:
        logger.info("listening on %s", sock.getsockname())

    try:
        async with server:
            await server.serve_forever()
    finally:
        logger.info("shutting down")
        await app.client.aclose()


async def main() -> None:
    """Run the HTTP service."""

    settings = load_settings()
    configure_logging(settings.log_level)
    await serve(settings)


if __name__ == "__main__":
    asyncio.run(main())
