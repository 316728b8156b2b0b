"""Ranking and year batching of matched assets.

Matched assets are ordered newest first. Ties on the capture date are broken
by filename, then uuid, so the report is deterministic.

Year batches are generated from the end year downwards, `size` years each;
the last batch is clipped so it never starts before the start year:

    build_year_batches(2020, 2023, 2) -> [(2022, 2023), (2020, 2021)]
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, NamedTuple, Optional, Sequence, Tuple

from immprune.assets import LocalAsset

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class YearBatch(NamedTuple):
    start: int
    end: int

    def contains(self, year: int) -> bool:
        return self.start <= year <= self.end

    @property
    def label(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass
class ReportPlan:
    """What the report writer serializes: a flat list or year groups."""

    total: int
    entries: List[LocalAsset] = field(default_factory=list)
    groups: Optional[List[Tuple[YearBatch, List[LocalAsset]]]] = None

    @property
    def batched(self) -> bool:
        return self.groups is not None


def rank_newest_first(assets: Sequence[LocalAsset]) -> List[LocalAsset]:
    # two stable passes: tie-break keys first, then date descending
    ordered = sorted(assets, key=lambda a: (a.filename, a.uuid))
    return sorted(ordered, key=lambda a: a.date or _OLDEST, reverse=True)


def apply_limit(assets: Sequence[LocalAsset], limit: int) -> List[LocalAsset]:
    if limit and limit > 0 and len(assets) > limit:
        return list(assets[:limit])
    return list(assets)


def build_year_batches(start_year: int, end_year: int, size: int) -> List[YearBatch]:
    if size <= 0:
        raise ValueError("batch size must be positive")
    batches: List[YearBatch] = []
    upper = end_year
    while upper >= start_year:
        lower = max(upper - size + 1, start_year)
        batches.append(YearBatch(lower, upper))
        upper -= size
    return batches


def group_by_batches(
    assets: Sequence[LocalAsset],
    batches: Sequence[YearBatch],
    limit_per_batch: int = 0,
) -> List[Tuple[YearBatch, List[LocalAsset]]]:
    """Split assets into the given batches; empty batches are kept."""
    groups = []
    for b in batches:
        members = [a for a in assets if a.date is not None and b.contains(a.date.year)]
        groups.append((b, apply_limit(rank_newest_first(members), limit_per_batch)))
    return groups


def plan_report(
    safe: Sequence[LocalAsset],
    *,
    limit: int = 0,
    batches: Optional[Sequence[YearBatch]] = None,
    limit_per_batch: int = 0,
) -> ReportPlan:
    """Rank the matched assets and apply either the global or per-batch limit.

    `total` is the number of matched assets reported in the header. In batch
    mode it counts every match, before per-batch limits.
    """
    ranked = rank_newest_first(safe)
    if batches is None:
        limited = apply_limit(ranked, limit)
        return ReportPlan(total=len(limited), entries=limited)
    return ReportPlan(total=len(ranked), groups=group_by_batches(ranked, batches, limit_per_batch))
