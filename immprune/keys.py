"""Key normalization shared by the index builder and the matcher.

Keys are plain strings:
- strict key:   "<lowercased filename>|<size>|<YYYY-MM-DD HH:MM:SS>"
- fallback key: "<lowercased filename>|<YYYY-MM-DD HH:MM:SS>"

Timestamps from both sources are converted to UTC before formatting, so an
Immich "2021-05-01T10:00:00.000Z" and an osxphotos "2021-05-01T12:00:00+02:00"
produce the same key.

Normalisation des clés : les deux sources passent par les mêmes fonctions.
"""
from datetime import datetime, timezone
from typing import Any, Optional

DATE_KEY_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware datetime.

    The offset of the input is kept, so year and day stay those of the
    capture zone; format_date_key converts to UTC. Naive values are taken as
    UTC. Returns None for empty or unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_date_key(dt: Optional[datetime]) -> str:
    if dt is None:
        return ""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime(DATE_KEY_FORMAT)


def normalize_name(name: str) -> str:
    return (name or "").lower()


def strict_key(name: str, size: int, date_key: str) -> str:
    return f"{normalize_name(name)}|{int(size)}|{date_key}"


def fallback_key(name: str, date_key: str) -> str:
    return f"{normalize_name(name)}|{date_key}"
