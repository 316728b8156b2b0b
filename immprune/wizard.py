"""Interactive compare wizard.

Asks for the content scope, single pass or year batches, the batch
parameters and the output file. Non-numeric or out-of-range answers raise
UserInputError, so the run stops before anything is fetched.
"""
import dataclasses
from datetime import date
from typing import List, Optional

from rich.console import Console
from rich.prompt import Prompt

from immprune.config import DEFAULT_BATCH_YEARS, DEFAULT_START_YEAR, CompareOptions
from immprune.errors import UserInputError
from immprune.i18n import t


def _choose(console: Console, label: str, items: List[str]) -> int:
    for i, item in enumerate(items, start=1):
        console.print(f"  {i}) {item}")
    choice = Prompt.ask(label, choices=[str(i) for i in range(1, len(items) + 1)], default="1", console=console)
    return int(choice) - 1


def _ask_int(console: Console, label: str, default: int, error: str, minimum: Optional[int] = None) -> int:
    raw = Prompt.ask(label, default=str(default), console=console)
    try:
        value = int(str(raw).strip())
    except ValueError as e:
        raise UserInputError(error) from e
    if minimum is not None and value < minimum:
        raise UserInputError(error)
    return value


def run_wizard(opts: CompareOptions, console: Optional[Console] = None) -> CompareOptions:
    """Return a copy of `opts` filled in from the user's answers."""
    console = console or Console()
    lang = opts.lang
    console.print(t(lang, "wizard_title"))

    scope = _choose(console, t(lang, "wizard_scope"), [t(lang, "wizard_scope_all"), t(lang, "wizard_scope_videos")])
    opts = dataclasses.replace(opts, only_videos=scope == 1)

    style = _choose(console, t(lang, "wizard_style"), [t(lang, "wizard_style_single"), t(lang, "wizard_style_batches")])
    if style == 1:
        start_year = _ask_int(console, t(lang, "wizard_start_year"), DEFAULT_START_YEAR, "invalid start year")
        end_year = _ask_int(console, t(lang, "wizard_end_year"), date.today().year, "invalid end year")
        if end_year < start_year:
            raise UserInputError("end year must be >= start year")
        batch_years = _ask_int(console, t(lang, "wizard_batch_years"), DEFAULT_BATCH_YEARS, "invalid years per batch", minimum=1)
        limit_per_batch = _ask_int(console, t(lang, "wizard_limit"), 0, "invalid batch limit", minimum=0)
        opts = dataclasses.replace(
            opts,
            use_batch=True,
            start_year=start_year,
            end_year=end_year,
            batch_years=batch_years,
            limit_per_batch=limit_per_batch,
        )

    output = Prompt.ask(t(lang, "wizard_output"), default=opts.output, console=console)
    if output and output.strip():
        opts = dataclasses.replace(opts, output=output.strip())
    return opts
