"""Image record model definition."""

from __future__ import annotations

from datetime import UTC, datetime

from ..extensions import db


def _utcnow() -> datetime:
    # Stored naive; serialized with a trailing "Z".
    return datetime.now(UTC).replace(tzinfo=None)


class Image(db.Model):
    """Metadata for one uploaded image."""

    __tablename__ = "images"

    id = db.Column(db.String(36), primary_key=True)
    original_name = db.Column(db.Text, nullable=False)
    mime_type = db.Column(db.String(255), nullable=False)
    size = db.Column(db.BigInteger, nullable=False)
    uploaded_at = db.Column(db.DateTime, default=_utcnow, nullable=False, index=True)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "original_name": self.original_name,
            "mime_type": self.mime_type,
            "size": self.size,
            "uploaded_at": self.uploaded_at.isoformat() + "Z",
        }

    def __repr__(self) -> str:  # pragma: no cover - repr not critical for tests
        return f"<Image {self.id} {self.original_name!r}>"
