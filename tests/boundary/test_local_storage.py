"""
Tests for local upload storage.

System role: Verification of upload persistence and path confinement
"""

import uuid

import pytest


class TestLocalFileStorage:
    """Test suite for LocalFileStorage."""

    def test_save_writes_under_uploads(self, storage, tmp_path) -> None:
        document_id = uuid.uuid4()

        relative = storage.save(document_id, b"%PDF-1.4 data")

        assert relative == f"uploads/{document_id}.pdf"
        assert (tmp_path / "uploads" / f"{document_id}.pdf").read_bytes() == b"%PDF-1.4 data"

    def test_resolve_returns_absolute_path(self, storage, tmp_path) -> None:
        assert storage.resolve("uploads/a.pdf") == (tmp_path / "uploads" / "a.pdf").resolve()

    @pytest.mark.parametrize("path", ["../outside.pdf", "uploads/../../etc/passwd", "/etc/passwd"])
    def test_resolve_rejects_escaping_paths(self, storage, path) -> None:
        with pytest.raises(ValueError):
            storage.resolve(path)

    def test_delete_removes_file(self, storage) -> None:
        relative = storage.save(uuid.uuid4(), b"data")

        assert storage.delete(relative) is True
        assert not storage.resolve(relative).exists()

    def test_delete_missing_file_returns_false(self, storage) -> None:
        assert storage.delete("uploads/missing.pdf") is False
