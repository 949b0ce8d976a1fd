"""Tests for orphan detection between the metadata and blob stores."""

from __future__ import annotations

import io
import uuid

from backend.app.storage.reconcile import OrphanReport, find_orphans, image_id_of, prune_orphans


def test_consistent_stores_report_clean(app, upload):
    from backend.app.storage import get_blob_store, get_metadata_store

    upload(b"ok", "ok.txt")

    report = find_orphans(get_metadata_store(), get_blob_store())

    assert report.clean


def test_orphans_are_reported_and_pruned(app, client, upload):
    from backend.app.storage import get_blob_store, get_metadata_store

    metadata = get_metadata_store()
    blobs = get_blob_store()

    kept = upload(b"keep", "keep.txt").get_json()["id"]
    dangling = upload(b"dangle", "dangle.png", "image/png").get_json()["id"]
    blobs.delete(f"{dangling}.png")
    stray = f"{uuid.uuid4()}.jpg"
    blobs.write(stray, io.BytesIO(b"stray"))

    report = find_orphans(metadata, blobs)

    assert report.dangling_records == [dangling]
    assert report.orphan_blobs == [stray]

    assert prune_orphans(report, metadata, blobs) == 2
    assert find_orphans(metadata, blobs).clean
    assert [image["id"] for image in client.get("/api/images").get_json()] == [kept]
    assert client.get(f"/i/{kept}").data == b"keep"


def test_files_not_named_like_blob_keys_are_ignored(app):
    from backend.app.storage import get_blob_store, get_metadata_store

    blobs = get_blob_store()
    blobs.write(".gitkeep", io.BytesIO(b""))
    blobs.write("notes.txt", io.BytesIO(b"operator notes"))

    report = find_orphans(get_metadata_store(), blobs)

    assert report.clean
    assert prune_orphans(OrphanReport(orphan_blobs=["notes.txt"]), get_metadata_store(), blobs) == 0
    assert blobs.keys() == [".gitkeep", "notes.txt"]


def test_prune_skips_blob_whose_record_appeared_after_report(app, client):
    from backend.app.storage import get_blob_store, get_metadata_store

    metadata = get_metadata_store()
    blobs = get_blob_store()
    image_id = str(uuid.uuid4())
    blobs.write(f"{image_id}.png", io.BytesIO(b"late"))

    report = find_orphans(metadata, blobs)
    assert report.orphan_blobs == [f"{image_id}.png"]

    metadata.add_image(image_id, "late.png", "image/png", 4)

    assert prune_orphans(report, metadata, blobs) == 0
    assert blobs.exists(f"{image_id}.png")
    assert client.get(f"/i/{image_id}").data == b"late"


def test_prune_skips_record_whose_blob_appeared_after_report(app):
    from backend.app.storage import get_blob_store, get_metadata_store

    metadata = get_metadata_store()
    blobs = get_blob_store()
    image_id = str(uuid.uuid4())
    metadata.add_image(image_id, "slow.txt", "text/plain", 4)

    report = find_orphans(metadata, blobs)
    assert report.dangling_records == [image_id]

    blobs.write(f"{image_id}.txt", io.BytesIO(b"slow"))

    assert prune_orphans(report, metadata, blobs) == 0
    assert metadata.get_image(image_id) is not None


def test_image_id_of():
    image_id = str(uuid.uuid4())

    assert image_id_of(f"{image_id}.png") == image_id
    assert image_id_of(image_id) == image_id
    assert image_id_of(f"{image_id}x.png") is None
    assert image_id_of(".gitkeep") is None
    assert image_id_of("stray.jpg") is None
