"""Run a simple smoke test of the compare pipeline without pytest.

Builds a tiny local inventory and Immich page in memory (no network, no
Photos access) and writes a batched and a flat report to a temp directory.
"""
import json
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from immprune import batching, indexer, matcher, photos, report
from immprune.assets import RemoteAsset

_LOCAL = [
    {"uuid": "1", "original_filename": "IMG_0001.HEIC", "original_filesize": 2_500_000,
     "date": "2023-06-01T09:30:00Z", "ismovie": False, "path": "/Photos/IMG_0001.HEIC"},
    {"uuid": "2", "original_filename": "IMG_0002.MOV", "original_filesize": 0,
     "date": "2021-02-14T18:00:00Z", "ismovie": True, "path": ""},
    {"uuid": "3", "original_filename": "IMG_0003.JPG", "original_filesize": 1_000,
     "date": "2020-08-08T08:08:08Z", "ismovie": False, "path": ""},
]

_REMOTE = {"assets": [
    {"originalFileName": "img_0001.heic", "fileSizeInByte": 2_500_000,
     "dateTimeOriginal": "2023-06-01T09:30:00.000Z", "checksum": "x"},
    {"originalFileName": "IMG_0002.MOV", "fileSizeInByte": 88_000_000,
     "dateTimeOriginal": "2021-02-14T18:00:00.000Z", "checksum": "y"},
]}


def run():
    with tempfile.TemporaryDirectory() as out_dir:
        outp = Path(out_dir)
        print("Parsing local inventory...")
        local = photos.parse_local_assets(json.dumps(_LOCAL))
        print("Building index...")
        idx = indexer.build_index(RemoteAsset.from_json(r) for r in _REMOTE["assets"])
        print("Matching...")
        safe = matcher.match_assets(local, idx)
        print(f"  {len(safe)} of {len(local)} safe")
        scanned = datetime.now(timezone.utc)

        flat = report.write_report_file(outp / "flat.txt", batching.plan_report(safe, limit=1), scanned)
        batches = batching.build_year_batches(2020, 2023, 2)
        grouped = report.write_report_file(
            outp / "batched.txt", batching.plan_report(safe, batches=batches), scanned
        )
        for p in (flat, grouped):
            print(f"--- {p.name}")
            print(p.read_text(encoding="utf-8"))
        print("Smoke run complete.")


if __name__ == "__main__":
    run()
