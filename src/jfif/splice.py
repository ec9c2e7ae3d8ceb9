"""Insert new segments into a JPEG file without rewriting it in place.

The new file is staged in a temporary file next to the original (prefix,
new bytes, suffix) and published with a single os.replace, so readers only
ever see the old or the new file.
"""
from __future__ import annotations

import io
import logging
import os
import shutil
import tempfile
from typing import Optional, Union

from .codec import encode_segment
from .primitives import Segment
from .reader import scan_segments

logger = logging.getLogger(__name__)

COPY_CHUNK_SIZE = 1024 * 1024

PathType = Union[str, os.PathLike]


def _copy_range(src, dst, size: int) -> None:
    remaining = size
    while remaining > 0:
        chunk = src.read(min(remaining, COPY_CHUNK_SIZE))
        if not chunk:
            raise EOFError(f"Source ended {remaining} bytes early")
        dst.write(chunk)
        remaining -= len(chunk)


def splice_file(path: PathType, data: bytes, offset: int) -> None:
    """Replace the file at path with prefix[:offset] + data + suffix[offset:]."""
    path = os.fspath(path)
    directory = os.path.dirname(os.path.abspath(path))
    fd, temp_path = tempfile.mkstemp(
        prefix="." + os.path.basename(path) + ".", suffix=".tmp", dir=directory
    )
    logger.debug("Splicing %d bytes into %s at offset %d via %s", len(data), path, offset, temp_path)
    try:
        with os.fdopen(fd, "wb") as dst, open(path, "rb") as src:
            _copy_range(src, dst, offset)
            dst.write(data)
            shutil.copyfileobj(src, dst, COPY_CHUNK_SIZE)
            dst.flush()
            os.fsync(dst.fileno())
        shutil.copymode(path, temp_path)
        os.replace(temp_path, path)
    except BaseException:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def append_segments(path: PathType, *segments: Segment) -> None:
    """Insert segments just before the SOS segment of the file at path.

    Offsets and lengths of the given segments are ignored. Every segment is
    encoded before the file is touched, so an oversize payload leaves the
    file as it was.
    """
    buf = io.BytesIO()
    for seg in segments:
        encode_segment(seg, buf)

    # A successful scan always ends with the SOS segment
    sos = scan_segments(path)[-1]
    splice_file(path, buf.getvalue(), sos.offset)
    logger.debug("Inserted %d segments (%d bytes) before SOS in %s",
                 len(segments), buf.tell(), os.fspath(path))


def add_segment(path: PathType, marker: int, data: Optional[bytes]) -> None:
    """Add a single new segment before SOS. See append_segments."""
    append_segments(path, Segment.new(marker, data))
