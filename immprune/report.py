"""Reporting utilities: the newest-first deletion manifest.

One line per asset:

    2022-01-01 | 3 MB | img_0001.heic | PHOTO | /path/in/library

Batched reports add a "📦 Batch 2022-2023 | 12 candidates" header before each
group and a blank line after it.

Rapport : liste des fichiers à supprimer, du plus récent au plus ancien.
"""
from datetime import datetime
from pathlib import Path
from typing import IO, Callable, Optional

from immprune.assets import LocalAsset
from immprune.batching import ReportPlan, YearBatch
from immprune.i18n import DEFAULT_LANG, t

BYTES_PER_MB = 1024 * 1024

# called with (batch, index, total) before a batch is written and with
# (batch, None, None) once its entries are written
BatchHook = Callable[[YearBatch, Optional[int], Optional[int]], None]


def format_entry(a: LocalAsset) -> str:
    day = a.date.strftime("%Y-%m-%d") if a.date is not None else ""
    return f"{day} | {a.size // BYTES_PER_MB} MB | {a.filename} | {a.kind} | {a.path}"


def write_header(out: IO[str], total: int, scanned_at: datetime, lang: str = DEFAULT_LANG) -> None:
    out.write(t(lang, "report_title", count=total) + "\n")
    out.write(t(lang, "report_scan", timestamp=scanned_at.isoformat(timespec="seconds")) + "\n\n")


def write_report(
    out: IO[str],
    plan: ReportPlan,
    scanned_at: datetime,
    lang: str = DEFAULT_LANG,
    on_batch: Optional[BatchHook] = None,
) -> None:
    write_header(out, plan.total, scanned_at, lang)
    if not plan.batched:
        for a in plan.entries:
            out.write(format_entry(a) + "\n")
        return

    total = len(plan.groups)
    for i, (batch, group) in enumerate(plan.groups, start=1):
        if on_batch:
            on_batch(batch, i, total)
        out.write(t(lang, "batch_header", start=batch.start, end=batch.end, count=len(group)) + "\n")
        for a in group:
            out.write(format_entry(a) + "\n")
        if on_batch and group:
            on_batch(batch, None, None)
        out.write("\n")


def write_report_file(
    out_path: Path,
    plan: ReportPlan,
    scanned_at: datetime,
    lang: str = DEFAULT_LANG,
    on_batch: Optional[BatchHook] = None,
) -> Path:
    """Create (or truncate) `out_path` and write the report into it."""
    out_path = Path(out_path)
    if out_path.parent and not out_path.parent.exists():
        out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="\n") as f:
        write_report(f, plan, scanned_at, lang=lang, on_batch=on_batch)
    return out_path
