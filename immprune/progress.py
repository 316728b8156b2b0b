"""Console feedback: spinners around blocking steps and inline progress bars.

Both are cosmetic. A spinner runs on rich's refresh thread and is always
stopped (its context exited) before anything else is printed, so it never
interleaves with later output or the report announcement.
"""
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from immprune.assets import LocalAsset
from immprune.i18n import DEFAULT_LANG, t

ITEM_WIDTH = 42

ProgressFn = Callable[[int, int, LocalAsset], None]


class StepResult:
    """Holder for the message printed when a spinner step succeeds."""

    def __init__(self, message: str = ""):
        self.message = message


def format_elapsed(seconds: float) -> str:
    total = int(round(max(seconds, 0)))
    minutes, secs = divmod(total, 60)
    if minutes:
        return f"{minutes}m{secs:02d}s"
    return f"{secs}s"


def shorten(name: str, width: int = ITEM_WIDTH) -> str:
    if len(name) > width:
        return name[: width - 3] + "..."
    return name


@contextmanager
def spinner(console: Console, label: str, lang: str = DEFAULT_LANG) -> Iterator[StepResult]:
    result = StepResult()
    try:
        with console.status(label, spinner="dots"):
            yield result
    except Exception:
        console.print(t(lang, "step_failed", label=label), markup=False)
        raise
    console.print(f"✨ {result.message or label}", markup=False)


@contextmanager
def inline_progress(console: Console, label: str, total: int) -> Iterator[Optional[ProgressFn]]:
    """Yield a (current, total, asset) callback driving a transient bar."""
    if total <= 0:
        yield None
        return
    bar = Progress(
        TextColumn(label),
        BarColumn(),
        TaskProgressColumn(),
        MofNCompleteColumn(),
        TextColumn("ETA"),
        TimeRemainingColumn(),
        TextColumn("{task.fields[item]}"),
        console=console,
        transient=True,
    )
    with bar:
        task = bar.add_task(label, total=total, item="")

        def update(current: int, _total: int, asset: LocalAsset) -> None:
            bar.update(task, completed=current, item=shorten(asset.display_name))

        yield update
