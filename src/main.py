# src/main.py - v2
"""CLI entry point: render, batch and cache administration commands.

Usage:
    lpcsheet render <definition.json> [-o sheet.png]
    lpcsheet batch <definitions.json> [-o out_dir]
    lpcsheet cache stats|list|warm|clear
    lpcsheet cache delete <fingerprint>
    lpcsheet cache generate <definitions.json>
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from lpcsheet.version import __version__

if TYPE_CHECKING:
    from lpcsheet.config.settings import Settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = _load_settings(args)
        _setup_logging(settings, args.verbose)
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def cli() -> None:
    sys.exit(main())


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="lpcsheet",
        description=f"lpcsheet v{__version__} - layered character spritesheet generator",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--cache-root", type=Path, default=None,
        help="Disk cache directory (overrides LPCSHEET_CACHE_ROOT)",
    )
    parser.add_argument(
        "--spritesheet-root", type=Path, default=None,
        help="Layer asset directory (overrides LPCSHEET_SPRITESHEET_ROOT)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- render ---
    p_render = subparsers.add_parser(
        "render", help="Resolve a single character definition to a PNG",
    )
    p_render.add_argument("definition", type=Path, help="JSON file with one definition")
    p_render.add_argument(
        "-o", "--output", type=Path, default=Path("./spritesheet.png"),
        help="Output PNG path (default: ./spritesheet.png)",
    )
    p_render.set_defaults(func=_cmd_render)

    # --- batch ---
    p_batch = subparsers.add_parser(
        "batch", help="Resolve a list of definitions (memory tier only, no disk writes)",
    )
    p_batch.add_argument("definitions", type=Path, help="JSON file with a list of definitions")
    p_batch.add_argument(
        "-o", "--output", type=Path, default=Path("./output"),
        help="Directory for <fingerprint>.png files (default: ./output)",
    )
    p_batch.set_defaults(func=_cmd_batch)

    # --- cache ---
    p_cache = subparsers.add_parser("cache", help="Disk cache administration")
    cache_sub = p_cache.add_subparsers(dest="cache_command", required=True)

    cache_sub.add_parser("stats", help="Entry count and total size").set_defaults(
        func=_cmd_cache_stats
    )
    cache_sub.add_parser("list", help="List cached fingerprints").set_defaults(
        func=_cmd_cache_list
    )
    cache_sub.add_parser("warm", help="Count cached entries").set_defaults(
        func=_cmd_cache_warm
    )
    cache_sub.add_parser("clear", help="Delete every cached entry").set_defaults(
        func=_cmd_cache_clear
    )

    p_delete = cache_sub.add_parser("delete", help="Delete one cached entry")
    p_delete.add_argument("fingerprint", help="Fingerprint (64 hex chars)")
    p_delete.set_defaults(func=_cmd_cache_delete)

    p_generate = cache_sub.add_parser(
        "generate", help="Pre-generate definitions into the disk cache",
    )
    p_generate.add_argument("definitions", type=Path, help="JSON file with a list of definitions")
    p_generate.set_defaults(func=_cmd_cache_generate)

    return parser


async def _cmd_render(args: argparse.Namespace, settings: Settings) -> int:
    """Resolve one definition and write the sheet."""
    from lpcsheet.api.facade import create_service

    payload = _read_json(args.definition)
    if not isinstance(payload, dict):
        logger.error("%s must contain a single definition object", args.definition)
        return 1

    async with create_service(settings) as service:
        result = await service.resolve(payload)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_bytes(result.data)
    print(f"{result.tier.value} {result.fingerprint} {result.size_bytes} bytes -> {args.output}")
    return 0


async def _cmd_batch(args: argparse.Namespace, settings: Settings) -> int:
    """Resolve many definitions and write each sheet under its fingerprint."""
    from lpcsheet.api.facade import create_service

    payload = _read_json(args.definitions)
    if not isinstance(payload, list):
        logger.error("%s must contain a list of definitions", args.definitions)
        return 1

    async with create_service(settings) as service:
        report = await service.resolve_many(payload)

    args.output.mkdir(parents=True, exist_ok=True)
    for item in report.results:
        if item.success and item.data is not None:
            (args.output / f"{item.fingerprint}.png").write_bytes(item.data)

    print("\nBatch complete:")
    print(f"  Total:      {report.total}")
    print(f"  Disk hits:  {report.disk_hits}")
    print(f"  Memory:     {report.memory_hits}")
    print(f"  Generated:  {report.generated}")
    print(f"  Failed:     {report.failed}")
    print(f"  Duration:   {report.total_time_ms:.0f}ms")
    return 0 if report.failed == 0 else 1


async def _cmd_cache_stats(args: argparse.Namespace, settings: Settings) -> int:
    from lpcsheet.api.facade import create_service

    async with create_service(settings) as service:
        stats = await service.disk_cache_stats()
    print(json.dumps(stats.model_dump(), indent=2))
    return 0


async def _cmd_cache_list(args: argparse.Namespace, settings: Settings) -> int:
    from lpcsheet.api.facade import create_service

    async with create_service(settings) as service:
        entries = await service.list_disk_cache()
    for fingerprint in entries:
        print(fingerprint)
    return 0


async def _cmd_cache_warm(args: argparse.Namespace, settings: Settings) -> int:
    from lpcsheet.api.facade import create_service

    async with create_service(settings) as service:
        report = await service.warm_cache()
    print(f"Warmed up {report.count} cached spritesheets")
    return 0


async def _cmd_cache_clear(args: argparse.Namespace, settings: Settings) -> int:
    from lpcsheet.api.facade import create_service

    async with create_service(settings) as service:
        report = await service.clear_disk_cache()
    print(f"Cache cleared: {report.deleted_count} entries deleted")
    return 0


async def _cmd_cache_delete(args: argparse.Namespace, settings: Settings) -> int:
    from lpcsheet.api.facade import create_service

    async with create_service(settings) as service:
        found = await service.delete_disk_entry(args.fingerprint)
    if not found:
        print(f"Not found: {args.fingerprint}")
        return 1
    print(f"Deleted cached spritesheet: {args.fingerprint}")
    return 0


async def _cmd_cache_generate(args: argparse.Namespace, settings: Settings) -> int:
    """Pre-generate definitions into the disk cache."""
    from lpcsheet.api.facade import create_service

    payload = _read_json(args.definitions)
    if not isinstance(payload, list):
        logger.error("%s must contain a list of definitions", args.definitions)
        return 1

    async with create_service(settings) as service:
        report = await service.pre_generate(payload)

    for item in report.results:
        detail = item.fingerprint if item.fingerprint else item.error
        print(f"  {item.status:15s} {item.body_type_tag:12s} {detail}")
    print("\nPre-generation complete:")
    print(f"  Total:           {report.total}")
    print(f"  Generated:       {report.generated}")
    print(f"  Already cached:  {report.already_cached}")
    print(f"  Failed:          {report.failed}")
    return 0 if report.failed == 0 else 1


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _load_settings(args: argparse.Namespace) -> Settings:
    from lpcsheet.config.settings import load_settings

    overrides: dict[str, Any] = {}
    if args.cache_root is not None:
        overrides["cache_root"] = args.cache_root
    if args.spritesheet_root is not None:
        overrides["spritesheet_root"] = args.spritesheet_root
    return load_settings(**overrides)


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from lpcsheet.logging.logger import setup_logging_from_settings

    setup_logging_from_settings(settings, verbose=verbose)


if __name__ == "__main__":
    sys.exit(main())
