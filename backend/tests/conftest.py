from __future__ import annotations

import io
import pathlib
import shutil
import sys
from collections.abc import Callable

import pytest
from sqlalchemy.pool import StaticPool

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _load_dependencies():
    from app import Config, create_app
    from backend.app.extensions import db

    return Config, create_app, db


ConfigBase, create_app, db = _load_dependencies()


class TestConfig(ConfigBase):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite+pysqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {
        "poolclass": StaticPool,
        "connect_args": {"check_same_thread": False},
    }
    SQLITE_WAL = False
    CORS_ALLOWED_ORIGINS = "http://localhost"
    DB_INIT_MAX_RETRIES = 1
    DB_INIT_RETRY_DELAY = 0


def make_config(upload_dir: pathlib.Path, **overrides: object) -> type[TestConfig]:
    """Return a TestConfig subclass storing blobs in ``upload_dir``."""

    return type("ModuleTestConfig", (TestConfig,), {"UPLOAD_DIR": str(upload_dir), **overrides})


@pytest.fixture(scope="module")
def app(tmp_path_factory):
    app = create_app(make_config(tmp_path_factory.mktemp("uploads")))
    ctx = app.app_context()
    ctx.push()
    yield app
    db.session.remove()
    ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def clean_stores(request):
    if "app" not in request.fixturenames:
        yield
        return

    request.getfixturevalue("app")
    yield

    from backend.app.models.image import Image
    from backend.app.models.settings import Setting
    from backend.app.storage import get_blob_store, get_metadata_store

    db.session.rollback()
    db.session.query(Image).delete()
    db.session.query(Setting).delete()
    db.session.commit()
    get_metadata_store().seed_defaults()

    for entry in get_blob_store().root.iterdir():
        if entry.is_dir():
            shutil.rmtree(entry)
        else:
            entry.unlink()


@pytest.fixture()
def upload(client) -> Callable[..., object]:
    """Upload ``content`` as ``name`` and return the test response."""

    def _upload(
        content: bytes = b"0123456789",
        name: str = "a.txt",
        mime_type: str = "text/plain",
        **kwargs: object,
    ):
        return client.post(
            "/api/upload",
            data={"image": (io.BytesIO(content), name, mime_type)},
            content_type="multipart/form-data",
            **kwargs,
        )

    return _upload


@pytest.fixture()
def put_setting(client) -> Callable[[str, object], None]:
    def _put(key: str, value: object) -> None:
        response = client.put("/api/settings", json={"key": key, "value": value})
        assert response.status_code == 200

    return _put
