"""Metadata and blob storage for uploaded images."""

from flask import current_app

from .blobs import FileBlobStore, blob_key, extension_of
from .metadata import DEFAULT_SETTINGS, MetadataStore


def get_metadata_store() -> MetadataStore:
    """Return the metadata store of the current application."""

    return current_app.extensions["imagehost.metadata"]


def get_blob_store() -> FileBlobStore:
    """Return the blob store of the current application."""

    return current_app.extensions["imagehost.blobs"]


__all__ = [
    "DEFAULT_SETTINGS",
    "FileBlobStore",
    "MetadataStore",
    "blob_key",
    "extension_of",
    "get_blob_store",
    "get_metadata_store",
]
