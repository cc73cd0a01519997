"""Convert a stored file into an inline media part for the model.

The whole file is read into memory and base64-encoded.  There is no
streaming and no size limit, so the largest usable upload is bounded by
process memory.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from pathlib import Path

import aiofiles

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodedMediaPart:
    """Base64 file content tagged with its MIME type.

    Attributes:
        data: Base64-encoded file content.
        mime_type: MIME type declared for the file.
    """

    data: str
    mime_type: str

    def decoded(self) -> bytes:
        """Return the raw bytes behind :attr:`data`."""
        return base64.b64decode(self.data)


async def file_to_part(path: Path | str, mime_type: str) -> EncodedMediaPart:
    """Read *path* and return it as an :class:`EncodedMediaPart`.

    Args:
        path: File to read.
        mime_type: MIME type to attach to the encoded content.

    Returns:
        The encoded part.

    Raises:
        OSError: If the file cannot be read.
    """
    async with aiofiles.open(path, "rb") as f:
        raw = await f.read()
    logger.debug(f"Encoded {len(raw)} bytes from {path} as {mime_type}")
    return EncodedMediaPart(data=base64.b64encode(raw).decode("ascii"), mime_type=mime_type)
