"""
Command-line access to the short link store.

Usage:
    python src/cli.py serve [--host HOST] [--port PORT]
    python src/cli.py init-db
    python src/cli.py shorten [URL]
    python src/cli.py stats CODE
    python src/cli.py list [--limit N]

``shorten`` without a URL reads one from stdin.
"""

import argparse
import asyncio
import json
import sys

import uvicorn

from config import (
    BASE_URL,
    CODE_LENGTH,
    CODE_MAX_ATTEMPTS,
    HOST,
    LIST_LIMIT,
    LOG_FILE,
    LOG_LEVEL,
    PORT,
)
from database import async_session_maker, create_db_and_tables, engine
from links.exceptions import LinkError
from links.schemas import LinkRead
from links.service import LinkService
from links.store import LinkStore
from logging_config import setup_logging


def _dump(data) -> None:
    print(json.dumps(data, indent=2, default=str))


def _link_record(link) -> dict:
    return LinkRead.model_validate(link).model_dump(mode="json")


async def _run(args: argparse.Namespace) -> None:
    try:
        if args.command == "init-db":
            await create_db_and_tables()
            print("Tables created")
            return

        async with async_session_maker() as session:
            service = LinkService(
                LinkStore(session),
                base_url=BASE_URL,
                code_length=CODE_LENGTH,
                max_attempts=CODE_MAX_ATTEMPTS,
            )
            if args.command == "shorten":
                link, created = await service.shorten(args.url)
                _dump(
                    {
                        "code": link.code,
                        "short_url": service.short_url(link.code),
                        "original_url": link.original_url,
                        "created": created,
                    }
                )
            elif args.command == "stats":
                _dump(_link_record(await service.get_link(args.code)))
            elif args.command == "list":
                _dump([_link_record(link) for link in await service.list_recent(args.limit)])
    finally:
        await engine.dispose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shortlinks", description="Short link service")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default=HOST)
    serve.add_argument("--port", type=int, default=PORT)

    subparsers.add_parser("init-db", help="Create the database tables")

    shorten = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten.add_argument("url", nargs="?", help="URL to shorten (read from stdin if omitted)")

    stats = subparsers.add_parser("stats", help="Show a link and its visit count")
    stats.add_argument("code")

    list_cmd = subparsers.add_parser("list", help="List recent links")
    list_cmd.add_argument("--limit", type=int, default=LIST_LIMIT)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    # stdout carries the JSON output
    setup_logging(LOG_LEVEL, LOG_FILE, stream=sys.stderr)

    if args.command == "serve":
        uvicorn.run("main:app", host=args.host, port=args.port, log_level=LOG_LEVEL.lower())
        return 0

    if args.command == "shorten" and args.url is None:
        try:
            args.url = input("Long URL: ")
        except EOFError:
            print("Error: invalid url (no URL on stdin)", file=sys.stderr)
            return 1

    try:
        asyncio.run(_run(args))
    except LinkError as exc:
        print(f"Error: {exc.error} ({exc})", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
