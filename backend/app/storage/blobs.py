"""Flat-directory blob store keyed by image identifier and extension."""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import BinaryIO

from ..errors import BlobNotFoundError, DuplicateIdError, StoreFailure

CHUNK_SIZE = 64 * 1024


def extension_of(name: str | None) -> str:
    """Return the extension of ``name`` including its leading dot, or ``""``.

    Only the final path component counts, and a leading dot alone (``.bashrc``)
    is not an extension.
    """

    if not name:
        return ""
    basename = posixpath.basename(name.replace("\\", "/"))
    return posixpath.splitext(basename)[1]


def blob_key(image_id: str, original_name: str | None) -> str:
    """Return the on-disk file name for an image."""

    return f"{image_id}{extension_of(original_name)}"


class FileBlobStore:
    """Store each blob as ``<root>/<key>``.

    Keys are single file names; writes are exclusive-create, so two uploads can
    never overwrite each other.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        if not key or key in {".", ".."} or "/" in key or "\\" in key or "\0" in key:
            raise ValueError(f"invalid blob key: {key!r}")
        root = self._root.resolve()
        candidate = (self._root / key).resolve()
        if candidate.parent != root:
            raise ValueError(f"invalid blob key: {key!r}")
        return candidate

    def write(self, key: str, stream: BinaryIO) -> int:
        """Copy ``stream`` into a new blob and return the number of bytes written."""

        path = self._path(key)
        try:
            handle = path.open("xb")
        except FileExistsError as exc:
            raise DuplicateIdError(key) from exc
        except OSError as exc:
            raise StoreFailure(f"failed to create blob {key}: {exc.strerror}") from exc

        written = 0
        try:
            with handle:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    handle.write(chunk)
                    written += len(chunk)
        except OSError as exc:
            path.unlink(missing_ok=True)
            raise StoreFailure(f"failed to write blob {key}: {exc}") from exc
        return written

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def open_read(self, key: str) -> BinaryIO:
        try:
            return self._path(key).open("rb")
        except FileNotFoundError as exc:
            raise BlobNotFoundError(key) from exc
        except OSError as exc:
            raise StoreFailure(f"failed to open blob {key}: {exc.strerror}") from exc

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StoreFailure(f"failed to delete blob {key}: {exc.strerror}") from exc

    def keys(self) -> list[str]:
        return sorted(entry.name for entry in self._root.iterdir() if entry.is_file())
