"""Error types raised by the stores and request handlers.

Every error carries the HTTP status it is rendered with. The application
factory registers a single handler for :class:`ImageHostError` that turns any
of these into a ``{"error": <message>}`` JSON response.
"""

from __future__ import annotations

from http import HTTPStatus


class ImageHostError(Exception):
    """Base exception for all image host errors."""

    status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.status.phrase
        super().__init__(self.message)


class BadRequestError(ImageHostError):
    """Raised for malformed or missing client input."""

    status = HTTPStatus.BAD_REQUEST


class ForbiddenError(ImageHostError):
    """Raised when the request filter rejects a request."""

    status = HTTPStatus.FORBIDDEN


class NotFoundError(ImageHostError):
    """Raised when an identifier has no record or no blob."""

    status = HTTPStatus.NOT_FOUND


class BlobNotFoundError(NotFoundError):
    """Raised when a blob key does not exist in the blob store."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Blob not found: {key}")


class StoreFailure(ImageHostError):
    """Raised when a metadata or blob store operation fails."""


class DuplicateIdError(StoreFailure):
    """Raised when an identifier is already taken in either store."""

    def __init__(self, image_id: str) -> None:
        self.image_id = image_id
        super().__init__(f"Duplicate image id: {image_id}")


class PartialFailure(StoreFailure):
    """Raised when only one of the two stores was mutated.

    Blob and metadata changes are not transactional. When the second step of
    an upload or delete fails and cannot be undone, the stores disagree until
    someone runs the reconciliation script.
    """


__all__ = [
    "BadRequestError",
    "BlobNotFoundError",
    "DuplicateIdError",
    "ForbiddenError",
    "ImageHostError",
    "NotFoundError",
    "PartialFailure",
    "StoreFailure",
]
