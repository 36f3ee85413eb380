"""Parse (and optionally execute) a reqline statement from the command line.

Prints the request descriptor as JSON; with `--execute`, prints the same document the HTTP API
returns for the statement.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from src.config.settings import load_settings
from src.reqline.errors import ReqlineError
from src.reqline.parser import parse_reqline
from src.reqline.schema import RequestDescriptor
from src.upstream.client import create_client
from src.upstream.execute import execute_request
from src.web.models import build_result


async def _run(descriptor: RequestDescriptor, *, timeout_s: float | None) -> dict:
    client = create_client(timeout_s=timeout_s)
    try:
        execution = await execute_request(client, descriptor)
    finally:
        await client.aclose()
    return build_result(descriptor, execution).model_dump(mode="json")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""

    parser = argparse.ArgumentParser(description="Parse a reqline statement into a request.")
    parser.add_argument("statement", help='Reqline statement, e.g. "HTTP GET | URL https://example.com".')
    parser.add_argument(
        "--execute",
        action="store_true",
        help="Send the request upstream and print the timed response.",
    )
    args = parser.parse_args(argv)

    try:
        descriptor = parse_reqline(args.statement)
    except ReqlineError as exc:
        print(exc.message, file=sys.stderr)
        return 2

    if args.execute:
        settings = load_settings()
        document = asyncio.run(_run(descriptor, timeout_s=settings.upstream_timeout_s))
    else:
        document = descriptor.model_dump(mode="json")

    print(json.dumps(document, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
