"""Public endpoint serving stored image bytes."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, request
from werkzeug.wsgi import wrap_file

from ..errors import BlobNotFoundError, NotFoundError
from ..storage import blob_key, get_blob_store, get_metadata_store
from ..utils.settings import RuntimeSettings

bp = Blueprint("serve", __name__)

CACHE_CONTROL = "public, max-age=31536000"
STREAM_BUFFER_SIZE = 64 * 1024


@bp.get("/i/<image_id>")
@bp.get("/i/<image_id>/<path:name>")
def serve_image(image_id: str, name: str | None = None) -> Response:
    """Stream an image. The trailing name segment is cosmetic and ignored."""

    metadata = get_metadata_store()
    image = metadata.get_image(image_id)
    if image is None:
        raise NotFoundError("Not found")

    send_length = RuntimeSettings(metadata).send_content_length()
    try:
        handle = get_blob_store().open_read(blob_key(image.id, image.original_name))
    except BlobNotFoundError as exc:
        raise NotFoundError("File not found") from exc

    response = Response(
        wrap_file(request.environ, handle, buffer_size=STREAM_BUFFER_SIZE),
        status=HTTPStatus.OK,
        content_type=image.mime_type or "application/octet-stream",
        direct_passthrough=True,
    )
    response.headers["Cache-Control"] = CACHE_CONTROL
    if send_length:
        response.headers["Content-Length"] = str(image.size)
    return response
