"""Tests for genai_gateway.core.uploads — request-scoped upload storage.

Tests cover:
- Streaming an UploadFile to disk and reporting its metadata.
- Idempotent removal that never raises.
- scoped_upload() cleanup on success, on error in the block, and when
  storing the upload fails part-way.
"""

from __future__ import annotations

import asyncio
import io
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from genai_gateway.core.uploads import (
    DEFAULT_MIME_TYPE,
    new_upload_path,
    remove_upload,
    save_upload,
    scoped_upload,
)


def _upload(content: bytes, filename: str = "file.bin", content_type: str | None = None) -> UploadFile:
    headers = Headers({"content-type": content_type}) if content_type else Headers({})
    return UploadFile(file=io.BytesIO(content), filename=filename, headers=headers)


class _BrokenFile:
    """File object that fails after returning one chunk."""

    def __init__(self):
        self._served = False

    def read(self, size: int = -1) -> bytes:
        if self._served:
            raise OSError("connection reset")
        self._served = True
        return b"partial"


class TestSaveUpload:
    """Test save_upload()."""

    def test_writes_content(self, temp_dir: Path):
        """The upload should be written byte-for-byte."""
        dest = temp_dir / "out"
        stored = asyncio.run(save_upload(_upload(b"abc123", "a.png", "image/png"), dest))

        assert dest.read_bytes() == b"abc123"
        assert stored.path == dest
        assert stored.size == 6
        assert stored.mime_type == "image/png"
        assert stored.filename == "a.png"

    def test_large_upload_spans_chunks(self, temp_dir: Path):
        """Uploads larger than one chunk should be copied completely."""
        content = b"x" * (200 * 1024 + 7)
        stored = asyncio.run(save_upload(_upload(content), temp_dir / "big"))
        assert stored.size == len(content)
        assert (temp_dir / "big").read_bytes() == content

    def test_missing_content_type_defaults(self, temp_dir: Path):
        """Uploads without a content type should be treated as binary."""
        stored = asyncio.run(save_upload(_upload(b"data"), temp_dir / "out"))
        assert stored.mime_type == DEFAULT_MIME_TYPE

    def test_creates_parent_directory(self, temp_dir: Path):
        """A missing upload directory should be created."""
        dest = temp_dir / "new" / "dir" / "file"
        asyncio.run(save_upload(_upload(b"data"), dest))
        assert dest.exists()


class TestNewUploadPath:
    """Test new_upload_path()."""

    def test_paths_are_unique(self, temp_dir: Path):
        """Each call should return a different filename in the directory."""
        paths = {new_upload_path(temp_dir) for _ in range(50)}
        assert len(paths) == 50
        assert all(p.parent == temp_dir for p in paths)


class TestRemoveUpload:
    """Test remove_upload()."""

    def test_removes_file(self, temp_dir: Path):
        """An existing file should be deleted."""
        path = temp_dir / "f"
        path.write_bytes(b"x")
        assert remove_upload(path) is True
        assert not path.exists()

    def test_second_removal_is_noop(self, temp_dir: Path):
        """Removing the same path twice should not raise."""
        path = temp_dir / "f"
        path.write_bytes(b"x")
        assert remove_upload(path) is True
        assert remove_upload(path) is False

    def test_failure_is_swallowed(self, temp_dir: Path):
        """A delete that fails with OSError should be reported, not raised."""
        path = temp_dir / "actually_a_dir"
        path.mkdir()
        assert remove_upload(path) is False
        assert path.exists()


class TestScopedUpload:
    """Test the scoped_upload() context manager."""

    def test_file_exists_inside_block_and_removed_after(self, temp_dir: Path):
        """The file should be present in the block and gone afterwards."""
        seen: dict = {}

        async def run():
            async with scoped_upload(_upload(b"hello", "h.txt", "text/plain"), temp_dir) as stored:
                seen["exists"] = stored.path.exists()
                seen["path"] = stored.path

        asyncio.run(run())
        assert seen["exists"] is True
        assert not seen["path"].exists()
        assert list(temp_dir.iterdir()) == []

    def test_removed_when_block_raises(self, temp_dir: Path):
        """An exception in the block should still remove the file."""

        async def run():
            async with scoped_upload(_upload(b"hello"), temp_dir):
                raise RuntimeError("model exploded")

        with pytest.raises(RuntimeError, match="model exploded"):
            asyncio.run(run())
        assert list(temp_dir.iterdir()) == []

    def test_removed_when_save_fails(self, temp_dir: Path):
        """A partially written file should be removed and the error raised."""

        async def run():
            async with scoped_upload(UploadFile(file=_BrokenFile(), filename="x"), temp_dir):
                pass

        with pytest.raises(OSError, match="connection reset"):
            asyncio.run(run())
        assert list(temp_dir.iterdir()) == []

    def test_block_may_delete_file_itself(self, temp_dir: Path):
        """Cleanup should tolerate the file already being gone."""

        async def run():
            async with scoped_upload(_upload(b"hello"), temp_dir) as stored:
                stored.path.unlink()

        asyncio.run(run())
        assert list(temp_dir.iterdir()) == []
