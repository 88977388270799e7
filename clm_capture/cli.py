"""Command-line interface for the CLM position capture engine."""
from __future__ import annotations

import argparse
import asyncio
import json
import sys

from .cache import PositionCache
from .config import AppConfig, load_config
from .logging_setup import configure_logging
from .notifications import build_notifiers
from .page import load_page
from .registry import build_registry
from .services import CaptureResult, CaptureService, HistoryService
from .storage import build_store


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="clm-capture",
        description="Capture, validate and diff concentrated-liquidity positions",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    capture_parser = sub.add_parser("capture", help="Capture one or more page dumps")
    capture_parser.add_argument("pages", nargs="+", help="JSON page dump file(s)")

    history_parser = sub.add_parser("history", help="List stored captures")
    history_parser.add_argument("--protocol", default=None, help="Filter by protocol")
    history_parser.add_argument("--pair", default=None, help="Filter by pair, e.g. SOL/USDC")
    history_parser.add_argument("--limit", type=int, default=10, help="Max captures (default: 10)")

    sub.add_parser("stats", help="Stats over the latest position per pair")

    prune_parser = sub.add_parser("prune", help="Delete old captures")
    prune_parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Keep captures from the last N days (default: capture.retention_days)",
    )

    return parser


def _result_dict(result: CaptureResult) -> dict:
    return {
        "capture": result.capture.to_dict(),
        "validation": result.validation.to_dict(),
        "comparison": result.comparison.to_dict() if result.comparison else None,
    }


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2))


async def _run(args: argparse.Namespace, config: AppConfig) -> int:
    """Execute the selected command; returns the exit code."""
    store = build_store(config)
    cache = PositionCache(config.capture.cache_ttl_seconds)
    history = HistoryService(store, cache, config.capture.retention_days)

    if args.command == "capture":
        service = CaptureService(
            build_registry(config.protocols),
            store,
            cache,
            build_notifiers(config.notifications),
        )
        pages = [load_page(path) for path in args.pages]
        results = await service.capture_many(pages)
        _print_json([_result_dict(r) if r else None for r in results])
        return 0 if all(results) else 2

    if args.command == "history":
        captures = await history.captures(args.protocol, args.pair, args.limit)
        _print_json([c.to_dict() for c in captures])
    elif args.command == "stats":
        stats = await history.position_stats()
        _print_json(stats.to_dict())
    elif args.command == "prune":
        deleted = await history.prune(args.days)
        _print_json({"deleted": deleted})
    else:
        build_parser().print_help()
        return 1
    return 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(args.log_level)
    config = load_config(args.config)
    sys.exit(asyncio.run(_run(args, config)))
