"""Command-line entry point for querying the catalog."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from lorekeeper import __version__
from lorekeeper.config.loader import load_config
from lorekeeper.gateway.service import DEFAULT_PAGE_SIZE, QueryGateway


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lorekeeper", description=__doc__)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("endpoints", help="List catalog endpoints")

    list_p = sub.add_parser("list", help="List items of one endpoint")
    list_p.add_argument("endpoint")
    list_p.add_argument("--page", type=int, default=0)
    list_p.add_argument("--page-size", type=int, default=DEFAULT_PAGE_SIZE)

    get_p = sub.add_parser("get", help="Show the detail record of one item")
    get_p.add_argument("endpoint")
    get_p.add_argument("index")

    search_p = sub.add_parser("search", help="Search item names and indexes")
    search_p.add_argument("query")
    search_p.add_argument(
        "-e",
        "--endpoint",
        dest="endpoints",
        action="append",
        default=None,
        help="Restrict to an endpoint (repeatable)",
    )
    search_p.add_argument("-n", "--max-results", type=int, default=None)

    sub.add_parser("health", help="Report service health")
    sub.add_parser("stats", help="Preload configured endpoints and print cache stats")
    return parser


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def _action_kwargs(args: argparse.Namespace) -> dict[str, Any]:
    if args.command == "list":
        return {"endpoint": args.endpoint, "page": args.page, "page_size": args.page_size}
    if args.command == "get":
        return {"endpoint": args.endpoint, "index": args.index}
    if args.command == "search":
        return {
            "query": args.query,
            "endpoints": args.endpoints,
            "max_results": args.max_results,
        }
    return {}


async def run(args: argparse.Namespace) -> dict[str, Any]:
    config = load_config(args.config)
    _configure_logging("DEBUG" if args.verbose else config.logging.level)

    gateway = QueryGateway(config)
    if args.command in ("search", "stats"):
        await gateway.preload()
    return await gateway.handle(args.command, **_action_kwargs(args))


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    result = asyncio.run(run(args))
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0 if result.get("ok") else 1


if __name__ == "__main__":
    raise SystemExit(main())
