#!/usr/bin/env python3
"""CLI for listing iCloud Photos items that are already safe in Immich.

Usage example:
  python immprune_cli.py compare --after 2020-01-01 --limit 200 --output safe_to_delete.txt
  python immprune_cli.py compare --batch --start-year 2018 --end-year 2024 --batch-years 2
  python immprune_cli.py setup
"""
import argparse
import dataclasses
import logging
import os
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console

from immprune import batching, indexer, matcher, photos, report
from immprune.assets import LocalAsset
from immprune.config import DEFAULT_OUTPUT, CompareOptions, Settings, load_settings, run_setup
from immprune.errors import (
    ConfigError,
    ImmpruneError,
    LocalAccessError,
    LocalParseError,
    LocalToolMissingError,
    RemoteFetchError,
    UnsupportedPlatformError,
    UserInputError,
)
from immprune.i18n import LANGUAGES, normalize_lang, t
from immprune.immich import DEFAULT_TIMEOUT, ImmichClient
from immprune.logs import setup_logging
from immprune.progress import format_elapsed, inline_progress, spinner
from immprune.wizard import run_wizard

logger = logging.getLogger("immprune.cli")

LocalReader = Callable[..., List[LocalAsset]]


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="immprune", description="Safely prune iCloud Photos (already safe in Immich)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    p.add_argument("--config", default=None, help="Path to config.yaml")
    p.add_argument("--lang", choices=LANGUAGES, default=None, help="Interface and report language")
    sub = p.add_subparsers(dest="command", required=True)

    c = sub.add_parser("compare", help="List files safe to delete from iCloud Photos (newest first)")
    # None means "not given", so the wizard can tell flags from defaults
    c.add_argument("--only-videos", action="store_true", default=None, help="Videos only")
    c.add_argument("--after", default=None, help="Only assets after YYYY-MM-DD")
    c.add_argument("--limit", type=int, default=None, help="Maximum number of results (0 = no limit)")
    c.add_argument("--output", default=DEFAULT_OUTPUT, help="Output file path")
    c.add_argument("--ui", dest="ui", action="store_true", default=True, help="Enable interactive wizard UI")
    c.add_argument("--no-ui", dest="ui", action="store_false", help="Never run the wizard")
    c.add_argument("--batch", action="store_true", default=None, help="Split the report into year batches")
    c.add_argument("--start-year", type=int, default=None)
    c.add_argument("--end-year", type=int, default=None)
    c.add_argument("--batch-years", type=int, default=None, help="Years per batch")
    c.add_argument("--limit-per-batch", type=int, default=None, help="Limit per batch (0 = no limit)")
    c.add_argument("--backend", choices=photos.BACKENDS, default=photos.DEFAULT_BACKEND,
                   help="How to query Apple Photos: osascript (jxa) or the osxphotos CLI")
    c.add_argument("--verify-checksum", action="store_true",
                   help="Also match local files by SHA-1 checksum (needs local paths, e.g. --backend osxphotos)")
    c.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                   help="Seconds to wait for each Immich request (0 = wait forever)")

    sub.add_parser("setup", help="(Re)create the Immich credentials file")
    return p.parse_args(argv)


def options_from_args(args, lang: str) -> CompareOptions:
    limit = args.limit or 0
    opts = CompareOptions(
        only_videos=bool(args.only_videos),
        after=args.after or "",
        limit=limit,
        output=args.output,
        use_batch=bool(args.batch),
        backend=args.backend,
        verify_checksum=args.verify_checksum,
        lang=lang,
        limit_per_batch=limit,
    )
    overrides = {}
    if args.start_year is not None:
        overrides["start_year"] = args.start_year
    if args.end_year is not None:
        overrides["end_year"] = args.end_year
    if args.batch_years is not None:
        overrides["batch_years"] = args.batch_years
    if args.limit_per_batch is not None:
        overrides["limit_per_batch"] = args.limit_per_batch
    return dataclasses.replace(opts, **overrides)


def wants_wizard(args, interactive: bool) -> bool:
    if not args.ui or not interactive:
        return False
    given = (args.after, args.limit, args.only_videos, args.batch)
    return all(v is None for v in given)


def run_compare(
    opts: CompareOptions,
    settings: Settings,
    console: Console,
    *,
    client: Optional[ImmichClient] = None,
    read_local: Optional[LocalReader] = None,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
    now: Optional[datetime] = None,
) -> Path:
    """Fetch both inventories, match, rank and write the report."""
    lang = opts.lang
    client = client or ImmichClient(settings.immich_url, settings.immich_key, timeout=timeout)
    read_local = read_local or photos.read_local_assets

    with spinner(console, t(lang, "scan_immich"), lang) as step:
        remote_assets = client.get_all_assets(only_videos=opts.only_videos)
        step.message = t(lang, "scan_immich_done", count=len(remote_assets))
    idx = indexer.build_index(remote_assets)

    with spinner(console, t(lang, "scan_photos"), lang) as step:
        local_assets = read_local(opts.only_videos, backend=opts.backend)
        step.message = t(lang, "scan_photos_done", count=len(local_assets))

    if opts.verify_checksum:
        with inline_progress(console, t(lang, "checksumming"), len(local_assets)) as cb:
            local_assets = photos.attach_checksums(local_assets, progress=cb)

    started = time.monotonic()
    with inline_progress(console, t(lang, "matching"), len(local_assets)) as cb:
        safe = matcher.match_assets(
            local_assets,
            idx,
            after=opts.after_cutoff(),
            year_range=opts.year_range(),
            use_checksum=opts.verify_checksum,
            progress=cb,
        )
    elapsed = format_elapsed(time.monotonic() - started)
    console.print(t(lang, "matching_done", count=len(safe), elapsed=elapsed), markup=False)
    ambiguous = matcher.count_ambiguous(
        local_assets,
        idx,
        after=opts.after_cutoff(),
        year_range=opts.year_range(),
        use_checksum=opts.verify_checksum,
    )
    if ambiguous:
        console.print(t(lang, "ambiguous", count=ambiguous), markup=False)

    batches = opts.batches()
    plan = batching.plan_report(
        safe,
        limit=opts.limit,
        batches=batches,
        limit_per_batch=opts.limit_per_batch,
    )
    if batches is not None:
        console.print(t(lang, "writing_batches", count=len(batches)), markup=False)

    batch_started = {}

    def on_batch(batch, index, total):
        if index is not None:
            batch_started[batch] = time.monotonic()
            msg = t(lang, "batch_progress", index=index, total=total, start=batch.start, end=batch.end)
            console.print(msg, markup=False)
        else:
            took = format_elapsed(time.monotonic() - batch_started.get(batch, time.monotonic()))
            console.print(t(lang, "batch_written", start=batch.start, end=batch.end, elapsed=took), markup=False)

    scanned_at = now or datetime.now(timezone.utc).astimezone()
    out_path = report.write_report_file(Path(opts.output), plan, scanned_at, lang=lang, on_batch=on_batch)
    console.print(t(lang, "output_ready", path=out_path), markup=False)
    return out_path


def describe_error(err: ImmpruneError, lang: str) -> str:
    if isinstance(err, UserInputError):
        return t(lang, "err_input", error=err)
    if isinstance(err, ConfigError):
        return t(lang, "err_config", error=err)
    if isinstance(err, RemoteFetchError):
        return t(lang, "err_remote", error=err)
    if isinstance(err, UnsupportedPlatformError):
        return t(lang, "err_platform", error=err)
    if isinstance(err, LocalToolMissingError):
        return t(lang, "err_tool_missing", tool=err.tool)
    if isinstance(err, LocalAccessError):
        return t(lang, "err_access", error=err)
    if isinstance(err, LocalParseError):
        return t(lang, "err_parse", error=err)
    return str(err)


def main(argv=None, console: Optional[Console] = None) -> int:
    args = parse_args(argv)
    console = console or Console()
    setup_logging(args.verbose)
    lang = normalize_lang(args.lang or os.environ.get("IMMPRUNE_LANG", ""))
    config_path = Path(args.config) if args.config else None
    interactive = sys.stdin.isatty()

    try:
        if args.command == "setup":
            run_setup(path=config_path, lang=lang, console=console)
            return 0

        opts = options_from_args(args, lang)
        if wants_wizard(args, interactive):
            opts = run_wizard(opts, console=console)
        opts.validate()

        settings = load_settings(config_path, interactive=interactive, lang=lang)
        if args.lang is None and settings.language != lang:
            lang = settings.language
            opts = dataclasses.replace(opts, lang=lang)

        timeout = args.timeout if args.timeout and args.timeout > 0 else None
        run_compare(opts, settings, console, timeout=timeout)
    except ImmpruneError as e:
        logger.debug("Run aborted", exc_info=True)
        console.print(describe_error(e, lang), markup=False)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
