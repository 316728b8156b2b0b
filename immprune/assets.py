"""Asset records for both sides of the comparison.

LocalAsset comes from the Apple Photos library, RemoteAsset from the Immich
catalog. Both are immutable once built.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from immprune.keys import parse_timestamp


@dataclass(frozen=True)
class LocalAsset:
    uuid: str
    filename: str
    size: int = 0
    date: Optional[datetime] = None
    is_video: bool = False
    path: str = ""
    checksum: str = ""

    @property
    def kind(self) -> str:
        return "VIDEO" if self.is_video else "PHOTO"

    @property
    def display_name(self) -> str:
        if self.filename:
            return self.filename
        if self.path:
            return self.path.replace("\\", "/").rsplit("/", 1)[-1]
        return "(unknown)"

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> "LocalAsset":
        """Build from one record of the local tool's JSON output.

        Keys: uuid, original_filename, original_filesize, date, ismovie, path.
        The filename is lowercased so keys compare case-insensitively.
        """
        return cls(
            uuid=str(rec.get("uuid") or ""),
            filename=str(rec.get("original_filename") or "").lower(),
            size=_as_int(rec.get("original_filesize")),
            date=parse_timestamp(rec.get("date")),
            is_video=bool(rec.get("ismovie")),
            path=str(rec.get("path") or ""),
        )


@dataclass(frozen=True)
class RemoteAsset:
    original_filename: str
    size: int = 0
    exif_size: int = 0
    date_time_original: str = ""
    checksum: str = ""

    @property
    def effective_size(self) -> int:
        # exif size is only a fallback when the primary field is unset
        return self.size or self.exif_size

    @classmethod
    def from_json(cls, rec: Dict[str, Any]) -> "RemoteAsset":
        exif = rec.get("exifInfo") or {}
        return cls(
            original_filename=str(rec.get("originalFileName") or ""),
            size=_as_int(rec.get("fileSizeInByte")),
            exif_size=_as_int(exif.get("fileSizeInByte")) if isinstance(exif, dict) else 0,
            date_time_original=str(rec.get("dateTimeOriginal") or ""),
            checksum=str(rec.get("checksum") or ""),
        )


def _as_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
