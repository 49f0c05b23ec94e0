"""Uploaded file storage."""

from documind.boundary.storage.local_storage import LocalFileStorage

__all__ = ["LocalFileStorage"]
