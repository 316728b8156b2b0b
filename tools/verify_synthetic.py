"""Quick evaluator for the synthetic inventories.

Usage example:
    python tools/verify_synthetic.py \
      --local data/local.json \
      --remote data/remote.json \
      --labels data/labels.csv

Runs the index builder and matcher on the generated inventories and reports
how many assets of each case were classified as expected, with the
mismatches it finds.
"""
import argparse
import csv
import json
import sys
from collections import defaultdict
from pathlib import Path
from typing import Dict

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from immprune import indexer, matcher, photos
from immprune.assets import RemoteAsset


def load_labels(path: Path) -> Dict[str, Dict[str, str]]:
    rows: Dict[str, Dict[str, str]] = {}
    with path.open(newline="", encoding="utf-8") as f:
        for row in csv.DictReader(f):
            rows[row["uuid"]] = row
    return rows


def evaluate(local_path: Path, remote_path: Path, labels_path: Path) -> Dict[str, object]:
    labels = load_labels(labels_path)
    local = photos.parse_local_assets(local_path.read_text(encoding="utf-8"))
    page = json.loads(remote_path.read_text(encoding="utf-8"))
    idx = indexer.build_index(RemoteAsset.from_json(r) for r in page.get("assets", []))
    safe = {a.uuid for a in matcher.match_assets(local, idx)}

    per_case = defaultdict(lambda: {"ok": 0, "wrong": 0})
    mismatches = []
    for a in local:
        row = labels.get(a.uuid)
        if row is None:
            continue
        predicted = "safe" if a.uuid in safe else "keep"
        if predicted == row["expected"]:
            per_case[row["case"]]["ok"] += 1
        else:
            per_case[row["case"]]["wrong"] += 1
            mismatches.append((a.uuid, row["expected"], predicted))
    return {
        "total": len(local),
        "safe": len(safe),
        "per_case": dict(per_case),
        "mismatches": mismatches,
    }


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--local", required=True)
    p.add_argument("--remote", required=True)
    p.add_argument("--labels", required=True)
    args = p.parse_args()

    stats = evaluate(Path(args.local), Path(args.remote), Path(args.labels))
    print(f"Assets: {stats['total']}  safe: {stats['safe']}")
    for case, counts in sorted(stats["per_case"].items()):
        print(f"  {case:<20} ok={counts['ok']} wrong={counts['wrong']}")
    if stats["mismatches"]:
        print("Mismatches:")
        for uid, expected, got in stats["mismatches"]:
            print(f"  {uid}: expected {expected}, got {got}")
        sys.exit(1)
    print("All cases classified as expected.")


if __name__ == "__main__":
    main()
