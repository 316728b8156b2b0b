"""Matcher: decide which local assets are already safe on the Immich server.

A local asset is safe when either
  (a) its strict key (name, size, date) is in the remote index, or
  (b) its size is unknown (0) and exactly one remote asset shares its
      name and date. Two or more remote assets on the same fallback key
      make the match ambiguous, so the asset is left out.
When checksum verification is enabled, (c) a local checksum present in the
remote checksum set also counts as a match.

Filtering before the match test:
- after: only assets strictly after the cutoff are considered; assets with
  no capture date are dropped.
- year_range: in batch mode, assets outside [start, end] are dropped.

The matcher is a pure single pass: same inputs, same ordered output.

Le matcher est un filtre pur, sans effet de bord.
"""
from datetime import date, datetime, time, timezone
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from immprune.assets import LocalAsset
from immprune.indexer import RemoteIndex
from immprune.keys import fallback_key, format_date_key, strict_key

ProgressFn = Callable[[int, int, LocalAsset], None]


def cutoff_from_date(day: date) -> datetime:
    """Midnight UTC of `day`, the instant an asset must be strictly after."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def passes_after(asset: LocalAsset, after: Optional[datetime]) -> bool:
    if after is None:
        return True
    if asset.date is None:
        return False
    return asset.date > after


def passes_year_range(asset: LocalAsset, year_range: Optional[Tuple[int, int]]) -> bool:
    if year_range is None:
        return True
    if asset.date is None:
        return False
    start, end = year_range
    return start <= asset.date.year <= end


def is_safe(asset: LocalAsset, index: RemoteIndex, use_checksum: bool = False) -> bool:
    """Match test for a single asset, ignoring the date and year filters."""
    if use_checksum and index.has_checksum(asset.checksum):
        return True
    if asset.date is None:
        # no date key can be built; remote assets without a date use ""
        return False
    date_key = format_date_key(asset.date)
    if index.has_strict(strict_key(asset.filename, asset.size, date_key)):
        return True
    if asset.size == 0:
        return index.fallback_count(fallback_key(asset.filename, date_key)) == 1
    return False


def match_assets(
    local_assets: Sequence[LocalAsset],
    index: RemoteIndex,
    *,
    after: Optional[datetime] = None,
    year_range: Optional[Tuple[int, int]] = None,
    use_checksum: bool = False,
    progress: Optional[ProgressFn] = None,
) -> List[LocalAsset]:
    """Return the safe subset of `local_assets`, in input order."""
    safe: List[LocalAsset] = []
    total = len(local_assets)
    for i, a in enumerate(local_assets, start=1):
        if (
            passes_after(a, after)
            and passes_year_range(a, year_range)
            and is_safe(a, index, use_checksum=use_checksum)
        ):
            safe.append(a)
        if progress is not None:
            progress(i, total, a)
    return safe


def count_ambiguous(
    local_assets: Iterable[LocalAsset],
    index: RemoteIndex,
    *,
    after: Optional[datetime] = None,
    year_range: Optional[Tuple[int, int]] = None,
    use_checksum: bool = False,
) -> int:
    """How many size-less local assets were rejected by the ambiguity guard."""
    n = 0
    for a in local_assets:
        if a.size != 0 or a.date is None:
            continue
        if not (passes_after(a, after) and passes_year_range(a, year_range)):
            continue
        if use_checksum and index.has_checksum(a.checksum):
            continue
        date_key = format_date_key(a.date)
        if index.has_strict(strict_key(a.filename, 0, date_key)):
            continue
        if index.fallback_count(fallback_key(a.filename, date_key)) > 1:
            n += 1
    return n
