"""Detection and cleanup of blobs and records that lost their counterpart."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from .blobs import FileBlobStore, blob_key
from .metadata import MetadataStore

_ID_LENGTH = 36


def image_id_of(key: str) -> str | None:
    """Return the image id a blob key was derived from, or ``None`` for foreign files."""

    image_id, extension = key[:_ID_LENGTH], key[_ID_LENGTH:]
    if extension and not extension.startswith("."):
        return None
    try:
        parsed = uuid.UUID(image_id)
    except ValueError:
        return None
    return image_id if str(parsed) == image_id else None


@dataclass
class OrphanReport:
    """Mismatches between the metadata store and the blob store."""

    dangling_records: list[str] = field(default_factory=list)
    orphan_blobs: list[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.dangling_records and not self.orphan_blobs


def find_orphans(metadata: MetadataStore, blobs: FileBlobStore) -> OrphanReport:
    """Compare both stores and report records without blobs and blobs without records.

    Blobs are listed before records: uploads write the blob first, so an
    upload finishing between the two reads cannot show up as an orphan blob.
    Files not named like blob keys are ignored.
    """

    present = {key for key in blobs.keys() if image_id_of(key) is not None}
    expected: dict[str, str] = {
        blob_key(image.id, image.original_name): image.id for image in metadata.list_images()
    }

    report = OrphanReport()
    for key, image_id in expected.items():
        if key not in present:
            report.dangling_records.append(image_id)
    report.orphan_blobs = sorted(present - expected.keys())
    return report


def prune_orphans(report: OrphanReport, metadata: MetadataStore, blobs: FileBlobStore) -> int:
    """Delete what ``report`` lists and still holds, returning the number of removals.

    Each entry is re-checked first, so anything repaired or completed since
    the report was taken is left alone.
    """

    removed = 0
    for image_id in report.dangling_records:
        image = metadata.get_image(image_id)
        if image is None or blobs.exists(blob_key(image.id, image.original_name)):
            continue
        removed += int(metadata.delete_image(image_id))
    for key in report.orphan_blobs:
        image_id = image_id_of(key)
        if image_id is None or metadata.get_image(image_id) is not None:
            continue
        blobs.delete(key)
        removed += 1
    return removed
