"""Application factory for the image host backend."""
from __future__ import annotations

import time

from flask import Flask, jsonify
from sqlalchemy import event
from sqlalchemy.exc import OperationalError
from werkzeug.exceptions import HTTPException

from .config import Config
from .errors import ImageHostError
from .extensions import cors, db, limiter


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application instance."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(str(app.config.get("LOG_LEVEL") or "INFO").upper())

    db.init_app(app)

    if cors is not None:
        allowed_origins = [
            origin.strip()
            for origin in (app.config.get("CORS_ALLOWED_ORIGINS") or "").split(",")
            if origin.strip()
        ]
        cors.init_app(
            app,
            resources={r"/api/*": {"origins": allowed_origins}, r"/i/*": {"origins": allowed_origins}},
            allow_headers=["Content-Type"],
        )

    limiter.init_app(app)

    from .api.health import bp as health_bp
    from .api.images import bp as images_bp
    from .api.serve import bp as serve_bp
    from .api.settings import bp as settings_bp
    from .storage import FileBlobStore, MetadataStore
    from .utils.request_filter import enforce_blocklists

    app.register_blueprint(health_bp)
    app.register_blueprint(serve_bp)
    app.register_blueprint(images_bp, url_prefix="/api")
    app.register_blueprint(settings_bp, url_prefix="/api")

    app.extensions["imagehost.metadata"] = MetadataStore()
    app.extensions["imagehost.blobs"] = FileBlobStore(app.config["UPLOAD_DIR"])

    app.before_request(enforce_blocklists)
    _register_error_handlers(app)

    with app.app_context():
        # Import models to ensure they are registered with SQLAlchemy before creating tables.
        from .models import image, settings  # noqa: F401

        if app.config.get("SQLITE_WAL", True) and db.engine.dialect.name == "sqlite":
            event.listen(db.engine, "connect", _enable_sqlite_wal)

        _initialize_database(app)

    return app


def _enable_sqlite_wal(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ImageHostError)
    def handle_image_host_error(exc: ImageHostError):
        if exc.status >= 500:
            app.logger.error("%s: %s", exc.__class__.__name__, exc.message, exc_info=exc)
        return jsonify({"error": exc.message}), exc.status

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        return jsonify({"error": exc.description}), exc.code


def _initialize_database(app: Flask) -> None:
    """Create the schema and seed default settings, retrying while the database is unavailable."""

    from .storage import get_metadata_store

    max_retries = int(app.config.get("DB_INIT_MAX_RETRIES", 30))
    retry_delay = float(app.config.get("DB_INIT_RETRY_DELAY", 2))

    for attempt in range(1, max_retries + 1):
        try:
            db.create_all()
            break
        except OperationalError as exc:
            if attempt >= max_retries:
                app.logger.exception("Database initialization failed after %s attempts.", attempt)
                raise

            app.logger.warning(
                "Database initialization attempt %s/%s failed: %s", attempt, max_retries, exc
            )
            time.sleep(retry_delay)

    seeded = get_metadata_store().seed_defaults()
    if seeded:
        app.logger.info("Seeded default settings: %s", ", ".join(seeded))
