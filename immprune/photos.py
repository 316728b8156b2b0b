"""Apple Photos inventory reader.

Two ways to query the library, both printing a JSON array of
{uuid, original_filename, original_filesize, date, ismovie, path}:

- "jxa": osascript running a JavaScript for Automation snippet. It cannot
  filter by media type and does not know file sizes or paths.
- "osxphotos": the osxphotos CLI (`osxphotos query --json`), which reports
  sizes and paths and filters videos natively with --only-movies.

Videos-only is always applied again on the parsed records, so both backends
honor it the same way.
"""
import base64
import dataclasses
import hashlib
import json
import logging
import subprocess
import sys
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from immprune.assets import LocalAsset
from immprune.errors import (
    LocalAccessError,
    LocalParseError,
    LocalToolMissingError,
    UnsupportedPlatformError,
)

logger = logging.getLogger(__name__)

BACKENDS = ("jxa", "osxphotos")
DEFAULT_BACKEND = "jxa"
SUPPORTED_PLATFORMS = ("darwin",)

JXA_SCRIPT = r"""
const app = Application("Photos");

function tryGet(getter, fallback) {
  try {
    const v = getter();
    return (v === undefined || v === null) ? fallback : v;
  } catch (err) {
    return fallback;
  }
}

const out = [];
const items = app.mediaItems();
for (let i = 0; i < items.length; i++) {
  const it = items[i];
  const kind = String(tryGet(() => it.mediaType(), "")).toLowerCase();
  const when = tryGet(() => it.date(), null);
  out.push({
    uuid: String(tryGet(() => it.id(), "")),
    original_filename: String(tryGet(() => it.filename(), "")),
    original_filesize: 0,
    date: when ? new Date(when).toISOString() : "",
    ismovie: kind.indexOf("video") >= 0,
    path: ""
  });
}
JSON.stringify(out);
"""

Runner = Callable[..., subprocess.CompletedProcess]


def build_command(backend: str, only_videos: bool = False) -> List[str]:
    if backend == "jxa":
        return ["osascript", "-l", "JavaScript", "-e", JXA_SCRIPT]
    if backend == "osxphotos":
        cmd = ["osxphotos", "query", "--json"]
        if only_videos:
            cmd.append("--only-movies")
        return cmd
    raise ValueError(f"unknown Photos backend: {backend!r}")


def parse_local_assets(payload: str, only_videos: bool = False) -> List[LocalAsset]:
    """Parse the tool's JSON output. Malformed output raises LocalParseError."""
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise LocalParseError(str(e)) from e
    if not isinstance(data, list):
        raise LocalParseError("expected a JSON array of assets")
    assets: List[LocalAsset] = []
    for i, rec in enumerate(data):
        if not isinstance(rec, dict):
            raise LocalParseError(f"record {i} is not an object")
        if only_videos and not rec.get("ismovie"):
            continue
        assets.append(LocalAsset.from_record(rec))
    return assets


def read_local_assets(
    only_videos: bool = False,
    backend: str = DEFAULT_BACKEND,
    *,
    platform: Optional[str] = None,
    runner: Runner = subprocess.run,
) -> List[LocalAsset]:
    platform = platform or sys.platform
    if platform not in SUPPORTED_PLATFORMS:
        raise UnsupportedPlatformError(f"macOS only for now (running on {platform})")

    cmd = build_command(backend, only_videos=only_videos)
    tool = cmd[0]
    logger.debug("Running %s backend: %s", backend, " ".join(cmd[:3]))
    try:
        proc = runner(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError as e:
        raise LocalToolMissingError(tool) from e
    except OSError as e:
        raise LocalAccessError(tool, str(e)) from e
    if proc.returncode != 0:
        detail = (proc.stderr or "").strip().splitlines()
        raise LocalAccessError(tool, detail[-1] if detail else f"exit status {proc.returncode}")

    assets = parse_local_assets(proc.stdout, only_videos=only_videos)
    logger.info("Read %d local assets with %s", len(assets), backend)
    return assets


def file_checksum(path: Path, chunk_size: int = 1024 * 1024) -> str:
    """Base64 SHA-1 of a file, the form Immich stores in `checksum`."""
    h = hashlib.sha1()
    with Path(path).open("rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            h.update(chunk)
    return base64.b64encode(h.digest()).decode("ascii")


def attach_checksums(
    assets: Iterable[LocalAsset],
    progress: Optional[Callable[[int, int, LocalAsset], None]] = None,
) -> List[LocalAsset]:
    """Return copies of `assets` carrying the checksum of their local file.

    Assets without a readable path keep an empty checksum.
    """
    assets = list(assets)
    out: List[LocalAsset] = []
    for i, a in enumerate(assets, start=1):
        checksum = ""
        if a.path:
            p = Path(a.path)
            if p.is_file():
                try:
                    checksum = file_checksum(p)
                except OSError as e:
                    logger.warning("Cannot hash %s: %s", p, e)
        out.append(dataclasses.replace(a, checksum=checksum) if checksum else a)
        if progress is not None:
            progress(i, len(assets), a)
    return out
