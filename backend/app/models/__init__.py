"""Database models for the image host backend."""

from .image import Image
from .settings import Setting

__all__ = ["Image", "Setting"]
