"""REST API endpoints for uploading, listing and deleting images."""

from __future__ import annotations

import uuid
from http import HTTPStatus
from urllib.parse import quote

from flask import Blueprint, current_app, jsonify, request

from ..errors import BadRequestError, DuplicateIdError, NotFoundError, PartialFailure, StoreFailure
from ..extensions import limiter
from ..storage import blob_key, get_blob_store, get_metadata_store

bp = Blueprint("images", __name__)

UPLOAD_FIELD = "image"
_MAX_ID_ATTEMPTS = 3


def _upload_rate_limit() -> str:
    return current_app.config["UPLOAD_RATE_LIMIT"]


def _retrieval_url(image_id: str, original_name: str) -> str:
    return f"/i/{image_id}/{quote(original_name, safe='')}"


@bp.post("/upload")
@limiter.limit(_upload_rate_limit)
def upload_image() -> tuple[object, int]:
    upload = request.files.get(UPLOAD_FIELD)
    if upload is None or not upload.filename:
        raise BadRequestError("No file uploaded")

    original_name = upload.filename
    mime_type = upload.content_type or "application/octet-stream"
    blobs = get_blob_store()

    for attempt in range(1, _MAX_ID_ATTEMPTS + 1):
        image_id = str(uuid.uuid4())
        key = blob_key(image_id, original_name)
        try:
            size = blobs.write(key, upload.stream)
            break
        except DuplicateIdError:
            # Nothing was read from the stream yet; a fresh id is safe to try.
            current_app.logger.warning(
                "Blob key collision on %s (attempt %s/%s)", key, attempt, _MAX_ID_ATTEMPTS
            )
        except ValueError as exc:
            raise BadRequestError("Invalid file name") from exc
    else:
        raise StoreFailure("could not allocate a unique image id")

    try:
        get_metadata_store().add_image(image_id, original_name, mime_type, size)
    except StoreFailure:
        current_app.logger.exception("Metadata insert failed for %s; removing blob", image_id)
        try:
            blobs.delete(key)
        except StoreFailure as cleanup_exc:
            current_app.logger.error("Orphaned blob left behind: %s", key)
            raise PartialFailure(f"image {image_id} stored without metadata") from cleanup_exc
        raise

    current_app.logger.info(
        "Stored image %s (%r, %s, %s bytes)", image_id, original_name, mime_type, size
    )
    return jsonify({"id": image_id, "url": _retrieval_url(image_id, original_name)}), HTTPStatus.OK


@bp.get("/images")
def list_images() -> tuple[object, int]:
    images = get_metadata_store().list_images()
    return jsonify([image.to_dict() for image in images]), HTTPStatus.OK


@bp.delete("/images/<image_id>")
def delete_image(image_id: str) -> tuple[object, int]:
    metadata = get_metadata_store()
    image = metadata.get_image(image_id)
    if image is None:
        raise NotFoundError("Not found")

    key = blob_key(image.id, image.original_name)
    get_blob_store().delete(key)
    try:
        metadata.delete_image(image_id)
    except StoreFailure as exc:
        current_app.logger.error("Blob %s removed but metadata for %s remains", key, image_id)
        raise PartialFailure(f"image {image_id} lost its blob but kept its metadata") from exc

    current_app.logger.info("Deleted image %s", image_id)
    return jsonify({"ok": True}), HTTPStatus.OK
