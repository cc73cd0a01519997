"""Request-scoped storage for uploaded files.

Every multipart upload handled by the gateway goes through
:func:`scoped_upload`:

1. The upload is streamed to ``upload_dir/<uuid4 hex>``.  The random name
   keeps concurrent requests from ever touching the same file.
2. The caller works with the :class:`StoredUpload` inside the ``async with``
   block.
3. On leaving the block, by any route, the file is removed.

Removal is idempotent and never raises.  A failed delete is logged and
otherwise ignored so that it cannot replace the response or error the
request has already produced.

Usage
-----
::

    async with scoped_upload(upload, config.upload_dir) as stored:
        part = await file_to_part(stored.path, stored.mime_type)
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import aiofiles
from fastapi import UploadFile

logger = logging.getLogger(__name__)

# Bytes copied per read when streaming an upload to disk.
CHUNK_SIZE = 64 * 1024

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class StoredUpload:
    """An uploaded file written to the upload directory.

    Attributes:
        path: Location of the file on disk.
        mime_type: MIME type declared by the client.
        size: Number of bytes written.
        filename: Original client-side filename, if one was sent.
    """

    path: Path
    mime_type: str
    size: int
    filename: str | None = None


def upload_mime_type(upload: UploadFile) -> str:
    """Return the declared MIME type of *upload*, or the binary default."""
    return upload.content_type or DEFAULT_MIME_TYPE


def new_upload_path(upload_dir: Path) -> Path:
    """Return a fresh, unused path inside *upload_dir*."""
    return upload_dir / uuid.uuid4().hex


async def save_upload(upload: UploadFile, destination: Path) -> StoredUpload:
    """Stream *upload* to *destination*.

    Args:
        upload: The multipart file received by FastAPI.
        destination: Path to write.  Its parent directory is created if
            needed.

    Returns:
        Metadata describing the stored file.

    Raises:
        OSError: If the file cannot be written.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    size = 0
    async with aiofiles.open(destination, "wb") as out:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            await out.write(chunk)
            size += len(chunk)

    logger.debug(f"Stored upload {upload.filename!r} ({size} bytes) at {destination}")
    return StoredUpload(
        path=destination,
        mime_type=upload_mime_type(upload),
        size=size,
        filename=upload.filename,
    )


def remove_upload(path: Path) -> bool:
    """Delete a stored upload.

    Safe to call more than once for the same path.

    Args:
        path: File to delete.

    Returns:
        ``True`` if a file was deleted, ``False`` if there was nothing to
        delete or the delete failed.
    """
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning(f"Could not remove upload {path}: {e}")
        return False
    return True


@asynccontextmanager
async def scoped_upload(upload: UploadFile, upload_dir: Path) -> AsyncIterator[StoredUpload]:
    """Store *upload* for the duration of an ``async with`` block.

    The file is removed when the block exits, including when storing the
    upload itself fails part-way.

    Args:
        upload: The multipart file received by FastAPI.
        upload_dir: Directory to hold the file.

    Yields:
        The :class:`StoredUpload`.
    """
    path = new_upload_path(upload_dir)
    try:
        yield await save_upload(upload, path)
    finally:
        remove_upload(path)
