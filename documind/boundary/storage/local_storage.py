"""
Local filesystem storage for uploaded documents.

Files are written as <uploads_dir>/<document_id>.pdf and referenced from the
database by their path relative to the storage root.

Dependencies: pathlib (stdlib)
System role: Raw upload persistence for the ingestion pipeline
"""

import logging
from pathlib import Path
from uuid import UUID

logger = logging.getLogger(__name__)


class LocalFileStorage:
    """
    Stores uploads under a root directory.

    Attributes:
        root: Directory that relative file paths are resolved against
        uploads_dir: Sub-directory (relative to root) receiving new uploads
    """

    def __init__(self, root: str | Path = ".", uploads_dir: str = "uploads") -> None:
        self.root = Path(root).resolve()
        self.uploads_dir = uploads_dir

    def save(self, document_id: UUID, data: bytes, suffix: str = ".pdf") -> str:
        """
        Write an upload to disk.

        Args:
            document_id: Owning document; determines the file name
            data: Raw file bytes
            suffix: File extension

        Returns:
            str: Path relative to the storage root, as stored on the document
        """
        relative = Path(self.uploads_dir) / f"{document_id}{suffix}"
        target = self.resolve(relative.as_posix())
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info(
            f"{__name__}:save - Stored upload ({len(data)} bytes)",
            extra={"document_id": str(document_id), "path": relative.as_posix()},
        )
        return relative.as_posix()

    def resolve(self, file_path: str) -> Path:
        """
        Absolute path of a stored file.

        Raises:
            ValueError: If the path escapes the storage root
        """
        candidate = (self.root / file_path).resolve()
        if not candidate.is_relative_to(self.root):
            raise ValueError(f"File path outside storage root: {file_path}")
        return candidate

    def delete(self, file_path: str) -> bool:
        """
        Remove a stored file.

        Returns:
            bool: True if a file was removed, False if it was already gone
        """
        target = self.resolve(file_path)
        try:
            target.unlink()
        except FileNotFoundError:
            logger.warning(f"{__name__}:delete - File already missing", extra={"path": file_path})
            return False
        return True
