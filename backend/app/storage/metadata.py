"""Database-backed metadata store for image records and settings."""

from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import DuplicateIdError, StoreFailure
from ..extensions import db
from ..models.image import Image
from ..models.settings import Setting

DEFAULT_SETTINGS: dict[str, str] = {
    "send_content_length": "true",
    "blocked_ips": "[]",
    "blocked_uas": "[]",
}


class MetadataStore:
    """Settings and image records persisted through Flask-SQLAlchemy.

    Every method runs against the scoped ``db.session`` and commits on its
    own, so each call is independently atomic. Database errors roll the
    session back and surface as :class:`StoreFailure`.
    """

    def _fail(self, action: str, exc: SQLAlchemyError) -> StoreFailure:
        db.session.rollback()
        return StoreFailure(f"failed to {action}: {exc.__class__.__name__}")

    def get_setting(self, key: str) -> str | None:
        try:
            setting = db.session.get(Setting, key)
        except SQLAlchemyError as exc:
            raise self._fail("read setting", exc) from exc
        return setting.value if setting is not None else None

    def set_setting(self, key: str, value: str) -> None:
        try:
            db.session.merge(Setting(key=key, value=value))
            db.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("write setting", exc) from exc

    def list_settings(self) -> dict[str, str]:
        try:
            settings = Setting.query.all()
        except SQLAlchemyError as exc:
            raise self._fail("list settings", exc) from exc
        return {setting.key: setting.value for setting in settings}

    def seed_defaults(self, defaults: Mapping[str, str] = DEFAULT_SETTINGS) -> list[str]:
        """Insert any missing default settings; existing values are never touched."""

        seeded: list[str] = []
        try:
            for key, value in defaults.items():
                if db.session.get(Setting, key) is None:
                    db.session.add(Setting(key=key, value=value))
                    seeded.append(key)
            db.session.commit()
        except IntegrityError:
            # Another process seeded concurrently; its values stand.
            db.session.rollback()
            return []
        except SQLAlchemyError as exc:
            raise self._fail("seed settings", exc) from exc
        return seeded

    def add_image(self, image_id: str, original_name: str, mime_type: str, size: int) -> Image:
        image = Image(id=image_id, original_name=original_name, mime_type=mime_type, size=size)
        try:
            if db.session.get(Image, image_id) is not None:
                raise DuplicateIdError(image_id)
            db.session.add(image)
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            raise DuplicateIdError(image_id) from exc
        except SQLAlchemyError as exc:
            raise self._fail("insert image", exc) from exc
        return image

    def get_image(self, image_id: str) -> Image | None:
        try:
            return db.session.get(Image, image_id)
        except SQLAlchemyError as exc:
            raise self._fail("read image", exc) from exc

    def list_images(self) -> list[Image]:
        try:
            return Image.query.order_by(Image.uploaded_at.desc()).all()
        except SQLAlchemyError as exc:
            raise self._fail("list images", exc) from exc

    def delete_image(self, image_id: str) -> bool:
        """Delete the record; return ``False`` when no such record exists."""

        try:
            deleted = Image.query.filter_by(id=image_id).delete()
            db.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete image", exc) from exc
        return bool(deleted)
