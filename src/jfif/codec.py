from __future__ import annotations

import io
import struct
from typing import BinaryIO

from .errors import OversizeSegmentError, TruncatedError
from .markers import MARKER_PREFIX, marker_name
from .primitives import MAX_LENGTH, Segment, SegmentPointer


def _header(segment: Segment) -> bytes:
    if segment.data is None:
        return bytes([MARKER_PREFIX, segment.marker])
    length = len(segment.data) + 2
    if length > MAX_LENGTH:
        raise OversizeSegmentError(
            f"Oversize segment: {marker_name(segment.marker)} payload of "
            f"{len(segment.data)} bytes exceeds {MAX_LENGTH - 2}"
        )
    return struct.pack(">BBH", MARKER_PREFIX, segment.marker, length)


def encode_segment(segment: Segment, writer: BinaryIO) -> None:
    """Write 0xFF, the marker and, when there is data, the length and payload.

    The length written is always derived from the data; segment.length is
    ignored. Nothing is written if the payload is too large.
    """
    writer.write(_header(segment))
    if segment.data is not None:
        writer.write(segment.data)


def segment_bytes(segment: Segment) -> bytes:
    buf = io.BytesIO()
    encode_segment(segment, buf)
    return buf.getvalue()


def load_segment(pointer: SegmentPointer, stream: BinaryIO) -> Segment:
    """Read the payload for a pointer from a seekable stream."""
    if pointer.length is None:
        return Segment(pointer.offset, pointer.marker)

    stream.seek(pointer.offset + 4)
    size = pointer.length - 2
    data = stream.read(size)
    if len(data) != size:
        raise TruncatedError(
            f"Unexpected end of stream loading {marker_name(pointer.marker)} "
            f"at offset {pointer.offset}: wanted {size} bytes, got {len(data)}"
        )
    return Segment(pointer.offset, pointer.marker, pointer.length, data)
