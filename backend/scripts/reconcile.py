"""Report, and optionally remove, blobs and records that lost their counterpart."""
from __future__ import annotations

import argparse
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app import create_app
from backend.app.storage import get_blob_store, get_metadata_store
from backend.app.storage.reconcile import find_orphans, prune_orphans


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--apply",
        action="store_true",
        help="delete dangling records and orphan blobs instead of only reporting them",
    )
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        metadata = get_metadata_store()
        blobs = get_blob_store()
        report = find_orphans(metadata, blobs)

        for image_id in report.dangling_records:
            print(f"dangling record: {image_id}")
        for key in report.orphan_blobs:
            print(f"orphan blob: {key}")

        if report.clean:
            print("Stores are consistent")
            return 0

        if args.apply:
            removed = prune_orphans(report, metadata, blobs)
            print("Reconcile completed", f"removed={removed}")
            return 0

        print(
            "Reconcile found mismatches",
            f"dangling={len(report.dangling_records)}",
            f"orphans={len(report.orphan_blobs)}",
            "(rerun with --apply to remove them)",
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
