"""Generate a synthetic local/remote inventory pair for matcher experiments.

Creates under `out_dir`:
  local.json   - records in the Photos tool format (uuid, original_filename, ...)
  remote.json  - Immich search page {"assets": [...]}
  labels.csv   - uuid, case, expected ("safe" / "keep")

Usage:
  python tools/generate_synthetic.py --out_dir ./data --count 5

Each round adds one asset per case below, so the expected label is known.
"""
import argparse
import csv
import json
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path

# case name -> expected label
CASES = {
    "exact": "safe",
    "upper_case_remote": "safe",
    "offset_timestamp": "safe",
    "exif_size_only": "safe",
    "sizeless_unique": "safe",
    "sizeless_ambiguous": "keep",
    "size_mismatch": "keep",
    "date_mismatch": "keep",
    "local_only": "keep",
}


def _iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def _remote(name, size, dt, checksum="", exif_size=None):
    rec = {
        "originalFileName": name,
        "fileSizeInByte": size,
        "dateTimeOriginal": _iso(dt) if dt else "",
        "checksum": checksum,
    }
    if exif_size is not None:
        rec["exifInfo"] = {"fileSizeInByte": exif_size}
    return rec


def build_dataset(count: int = 5, seed: int = 7):
    rng = random.Random(seed)
    base = datetime(2019, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    local, remote, labels = [], [], []
    for i in range(1, count + 1):
        for case, expected in CASES.items():
            uid = f"{case}-{i}"
            name = f"img_{i:04d}_{case}.heic"
            size = rng.randint(500_000, 9_000_000)
            dt = base + timedelta(days=rng.randint(0, 5 * 365), seconds=rng.randint(0, 86_399))
            loc = {
                "uuid": uid,
                "original_filename": name,
                "original_filesize": size,
                "date": _iso(dt),
                "ismovie": i % 3 == 0,
                "path": f"/Photos/originals/{name}",
            }
            if case == "exact":
                remote.append(_remote(name, size, dt, checksum=f"sum-{uid}"))
            elif case == "upper_case_remote":
                remote.append(_remote(name.upper(), size, dt))
            elif case == "offset_timestamp":
                loc["date"] = dt.astimezone(timezone(timedelta(hours=2))).isoformat()
                remote.append(_remote(name, size, dt))
            elif case == "exif_size_only":
                remote.append(_remote(name, 0, dt, exif_size=size))
            elif case == "sizeless_unique":
                loc["original_filesize"] = 0
                remote.append(_remote(name, size, dt))
            elif case == "sizeless_ambiguous":
                loc["original_filesize"] = 0
                remote.append(_remote(name, size, dt, checksum=f"a-{uid}"))
                remote.append(_remote(name, size + 1, dt, checksum=f"b-{uid}"))
            elif case == "size_mismatch":
                remote.append(_remote(name, size + 4096, dt))
            elif case == "date_mismatch":
                remote.append(_remote(name, size, dt + timedelta(seconds=1)))
            local.append(loc)
            labels.append((uid, case, expected))
    return local, remote, labels


def generate(out_dir: Path, count: int = 5, seed: int = 7):
    out_dir.mkdir(parents=True, exist_ok=True)
    local, remote, labels = build_dataset(count, seed)
    (out_dir / "local.json").write_text(json.dumps(local, indent=2), encoding="utf-8")
    (out_dir / "remote.json").write_text(json.dumps({"assets": remote}, indent=2), encoding="utf-8")
    labp = out_dir / "labels.csv"
    with open(labp, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["uuid", "case", "expected"])
        w.writerows(labels)
    return out_dir / "local.json", out_dir / "remote.json", labp


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--out_dir", default="./data")
    parser.add_argument("--count", type=int, default=5)
    parser.add_argument("--seed", type=int, default=7)
    args = parser.parse_args()
    paths = generate(Path(args.out_dir), count=args.count, seed=args.seed)
    print("Synthetic dataset created:")
    for p in paths:
        print(" ", p)
