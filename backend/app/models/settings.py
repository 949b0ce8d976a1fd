"""Runtime settings stored in the database."""

from __future__ import annotations

from ..extensions import db


class Setting(db.Model):
    """Key/value store for runtime-mutable settings."""

    __tablename__ = "settings"

    key = db.Column(db.String(255), primary_key=True)
    value = db.Column(db.Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Setting {self.key}={self.value}>"
