"""Remote index built from the Immich catalog.

The index holds three lookups:
- strict_keys: name|size|date keys, for a presence test
- checksums: every non-empty Immich checksum, for a presence test
- fallback_counts: name|date key -> number of remote assets sharing it

It is built once per run and never mutated afterwards.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping

from immprune.assets import RemoteAsset
from immprune.keys import fallback_key, format_date_key, parse_timestamp, strict_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteIndex:
    strict_keys: FrozenSet[str] = frozenset()
    checksums: FrozenSet[str] = frozenset()
    fallback_counts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    def __len__(self) -> int:
        return sum(self.fallback_counts.values())

    def has_strict(self, key: str) -> bool:
        return key in self.strict_keys

    def has_checksum(self, checksum: str) -> bool:
        return bool(checksum) and checksum in self.checksums

    def fallback_count(self, key: str) -> int:
        return self.fallback_counts.get(key, 0)


def remote_date_key(asset: RemoteAsset) -> str:
    """Second-precision date key for a remote asset, or "" when it has none."""
    if not asset.date_time_original:
        return ""
    return format_date_key(parse_timestamp(asset.date_time_original))


def build_index(remote_assets: Iterable[RemoteAsset]) -> RemoteIndex:
    """Build the read-only lookup index from the whole remote catalog."""
    strict = set()
    checksums = set()
    counts: Counter = Counter()
    for a in remote_assets:
        date_key = remote_date_key(a)
        strict.add(strict_key(a.original_filename, a.effective_size, date_key))
        counts[fallback_key(a.original_filename, date_key)] += 1
        if a.checksum:
            checksums.add(a.checksum)
    idx = RemoteIndex(
        strict_keys=frozenset(strict),
        checksums=frozenset(checksums),
        fallback_counts=MappingProxyType(dict(counts)),
    )
    logger.debug(
        "Index built: %d strict keys, %d checksums, %d fallback keys",
        len(idx.strict_keys),
        len(idx.checksums),
        len(idx.fallback_counts),
    )
    return idx
