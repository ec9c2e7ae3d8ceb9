"""Segment scanner.

Walks the marker framing of a JPEG stream from SOI up to and including the
SOS segment. Everything after the SOS payload is entropy-coded image data
and is never read.

Marker search follows what libjpeg (and decoders that copy it) accept:
garbage before a 0xFF sentinel is skipped, 0xFF 0x00 byte stuffing is
discarded and runs of 0xFF fill bytes before a marker are collapsed.
"""
from __future__ import annotations

import io
import logging
import os
from contextlib import nullcontext
from typing import BinaryIO, Iterator, List, Union

from .errors import (
    InvalidFileError,
    JFIFError,
    ShortSegmentError,
    TruncatedError,
    UnseekableStreamError,
)
from .markers import MARKER_PREFIX, SOI, SOS, has_length, marker_name
from .primitives import Segment, SegmentPointer

logger = logging.getLogger(__name__)

# Chunk size used when skipping forward on streams that can't seek
SKIP_CHUNK_SIZE = 64 * 1024


def _is_seekable(stream) -> bool:
    seekable = getattr(stream, "seekable", None)
    return bool(seekable is not None and seekable())


class PositionalReader:
    """Wraps a binary stream and tracks the absolute offset of reads.

    Seekable streams are passed through. Streams that can only be read
    forward support relative forward seeks (the bytes are read and
    discarded) and raise UnseekableStreamError for anything else.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.seekable = _is_seekable(stream)
        self.pos = stream.tell() if self.seekable else 0

    def read(self, n: int = -1) -> bytes:
        data = self.stream.read(n)
        self.pos += len(data)
        return data

    def read_exact(self, n: int) -> bytes:
        data = self.read(n)
        if len(data) != n:
            raise TruncatedError(
                f"Unexpected end of stream at offset {self.pos}: "
                f"wanted {n} bytes, got {len(data)}"
            )
        return data

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if self.seekable:
            # Seeking past the end succeeds on files, so compare with the size
            target = self.stream.seek(offset, whence)
            end = self.stream.seek(0, io.SEEK_END)
            self.pos = self.stream.seek(min(target, end))
            if target > end:
                raise TruncatedError(
                    f"Unexpected end of stream at offset {end}: "
                    f"seek to {target} is past the end"
                )
            return self.pos

        if whence != io.SEEK_CUR or offset < 0:
            raise UnseekableStreamError(
                f"Cannot seek to {offset} (whence={whence}) on a forward-only stream"
            )
        remaining = offset
        while remaining > 0:
            chunk = self.read(min(remaining, SKIP_CHUNK_SIZE))
            if not chunk:
                raise TruncatedError(
                    f"Unexpected end of stream at offset {self.pos} "
                    f"while skipping {remaining} bytes"
                )
            remaining -= len(chunk)
        return self.pos

    def tell(self) -> int:
        return self.pos


def read_u8(f) -> int:
    byte = f.read(1)
    if len(byte) != 1:
        raise TruncatedError("Unexpected length while reading 1 byte")
    return byte[0]


def read_u16(f) -> int:
    bytes_read = f.read(2)
    if len(bytes_read) != 2:
        raise TruncatedError("Unexpected length while reading 2 bytes")
    return (bytes_read[0] << 8) | bytes_read[1]


def iter_segments(stream: BinaryIO, load: bool = False) -> Iterator[SegmentPointer]:
    """Yield segments from SOI through SOS.

    With load=False payloads are skipped and SegmentPointers are yielded.
    With load=True payloads are read and Segments are yielded. Once the SOS
    segment has been yielded the stream is positioned at the first byte of
    entropy-coded data.
    """
    r = stream if isinstance(stream, PositionalReader) else PositionalReader(stream)

    magic = r.read(2)
    if len(magic) != 2 or magic[0] != MARKER_PREFIX or magic[1] != SOI:
        raise InvalidFileError(f"Invalid JPEG: expected FF D8, got {magic.hex(' ').upper()!r}")

    soi_offset = r.pos - 2
    logger.debug("Found SOI at offset %d", soi_offset)
    yield Segment(soi_offset, SOI) if load else SegmentPointer(soi_offset, SOI)

    while True:
        sentinel, marker = r.read_exact(2)

        skipped = 0
        while sentinel != MARKER_PREFIX:
            sentinel, marker = marker, read_u8(r)
            skipped += 1
        if skipped:
            logger.warning("Skipped %d extraneous bytes before offset %d", skipped, r.pos - 2)

        if marker == 0x00:
            # 0xFF 0x00 is a stuffed literal 0xFF, not a marker
            logger.debug("Discarding stuffed byte at offset %d", r.pos - 2)
            continue

        fill = 0
        while marker == MARKER_PREFIX:
            marker = read_u8(r)
            fill += 1
        if fill:
            logger.debug("Skipped %d fill bytes before offset %d", fill, r.pos - 2)

        offset = r.pos - 2

        if not has_length(marker):
            logger.debug("Found %s at offset %d", marker_name(marker), offset)
            yield Segment(offset, marker) if load else SegmentPointer(offset, marker)
            continue

        length = read_u16(r)
        if length < 2:
            raise ShortSegmentError(
                f"Short segment: {marker_name(marker)} at offset {offset} has length {length}"
            )
        logger.debug("Found %s at offset %d with length %d", marker_name(marker), offset, length)

        if load:
            data = r.read_exact(length - 2)
            yield Segment(offset, marker, length, data)
        else:
            r.seek(length - 2, io.SEEK_CUR)
            yield SegmentPointer(offset, marker, length)

        if marker == SOS:
            return


def _source(source: Union[str, os.PathLike, BinaryIO]):
    if isinstance(source, (str, os.PathLike)):
        return open(source, "rb")
    return nullcontext(source)


def _collect(source, load: bool) -> list:
    segments = []
    with _source(source) as f:
        try:
            for seg in iter_segments(f, load=load):
                segments.append(seg)
        except JFIFError as err:
            err.segments = segments
            raise
    return segments


def scan_segments(source: Union[str, os.PathLike, BinaryIO]) -> List[SegmentPointer]:
    """Find segment pointers until the SOS segment, skipping payloads.

    Raises a JFIFError subclass on failure with the pointers found so far
    in ``err.segments``.
    """
    return _collect(source, load=False)


def decode_segments(source: Union[str, os.PathLike, BinaryIO]) -> List[Segment]:
    """Read segments and their payloads until the SOS segment.

    On success a stream argument is left at the start of the entropy-coded
    image data. Raises a JFIFError subclass on failure with the segments
    read so far in ``err.segments``.
    """
    return _collect(source, load=True)
