"""Configuration for the image host backend."""

from __future__ import annotations

import os
import pathlib

_BACKEND_DIR = pathlib.Path(__file__).resolve().parents[1]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Base configuration for the Flask application."""

    SQLALCHEMY_DATABASE_URI: str = os.getenv("DATABASE_URL", "sqlite:///imagehost.db")
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    SQLITE_WAL: bool = _env_flag("SQLITE_WAL", "true")
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", str(_BACKEND_DIR / "uploads"))
    UPLOAD_RATE_LIMIT: str = os.getenv("UPLOAD_RATE_LIMIT", "600 per minute")
    CORS_ALLOWED_ORIGINS: str = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173")
    # Ordered; the first header with a non-empty value wins.
    TRUSTED_ADDRESS_HEADERS: str = os.getenv(
        "TRUSTED_ADDRESS_HEADERS", "CF-Connecting-IP,X-Forwarded-For"
    )
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    DB_INIT_MAX_RETRIES: int = int(os.getenv("DB_INIT_MAX_RETRIES", "30"))
    DB_INIT_RETRY_DELAY: float = float(os.getenv("DB_INIT_RETRY_DELAY", "2"))
