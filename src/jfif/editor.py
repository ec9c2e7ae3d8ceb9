"""In-place editing of JPEG segments in a file on disk."""
from __future__ import annotations

import logging
import os
import struct
from typing import List, Union

from .codec import segment_bytes
from .errors import (
    OversizePayloadError,
    StaleIndexError,
    UnknownSegmentError,
    UnpaddableSegmentError,
    WrongMarkerError,
)
from .markers import MARKER_PREFIX, marker_name
from .primitives import MAX_LENGTH, Segment, SegmentPointer
from .reader import scan_segments
from .splice import append_segments

logger = logging.getLogger(__name__)

FILL_BYTE = b"\xff"


def write_all(f, data: bytes) -> None:
    """Write all of data to a raw file, which may accept only part per call."""
    view = memoryview(data)
    while view:
        n = f.write(view)
        if not n:
            raise OSError(f"Short write: {len(view)} of {len(data)} bytes not written")
        view = view[n:]


class JFIFEditor:
    """
    Edit session over one JPEG file.

    The file is opened for reading and writing and its segments are scanned
    once into ``pointers``. update() rewrites a segment payload in place
    without moving any other byte. append() inserts new segments before SOS
    by rewriting the whole file, and rescans afterwards.

    Usage:
        with open_editable("photo.jpg") as editor:
            com = editor.query(COM)[0]
            editor.update(com, b"new comment")

    In-place updates are not atomic: a concurrent reader can observe the
    header written before the payload. Work on a copy when that matters.
    """

    def __init__(self, path: Union[str, os.PathLike]):
        self.path = os.fspath(path)
        self._f = None
        self.pointers: List[SegmentPointer] = []
        self._open()

    def _open(self) -> None:
        # Unbuffered so header checks always see what is on disk
        f = open(self.path, "r+b", buffering=0)
        try:
            self.pointers = scan_segments(f)
        except Exception:
            f.close()
            raise
        self._f = f
        logger.debug("Indexed %d segments in %s", len(self.pointers), self.path)

    def _handle(self):
        if self._f is None:
            raise ValueError("I/O operation on closed editor")
        return self._f

    def close(self) -> None:
        if self._f is not None:
            self._f.close()
            self._f = None
            self.pointers = []

    @property
    def closed(self) -> bool:
        return self._f is None

    def __enter__(self) -> "JFIFEditor":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def query(self, marker: int) -> List[SegmentPointer]:
        """Indexed segments with the given marker, in file order."""
        self._handle()
        return [p for p in self.pointers if p.marker == marker]

    def _available_space(self, i: int) -> int:
        pointer = self.pointers[i]
        if i + 1 < len(self.pointers):
            # Fill bytes before the next segment can be reused. Account for
            # the 0xFF, marker and 2 byte length of this segment.
            return self.pointers[i + 1].offset - pointer.offset - 4
        return pointer.length - 2

    def _check_on_disk(self, pointer: SegmentPointer) -> None:
        f = self._handle()
        f.seek(pointer.offset)
        header = f.read(4)
        expected = struct.pack(">BBH", MARKER_PREFIX, pointer.marker, pointer.length)
        if header != expected:
            raise StaleIndexError(
                f"Stale index: expected {expected.hex()} at offset {pointer.offset} "
                f"in {self.path}, found {header.hex()}"
            )

    def update(self, pointer: SegmentPointer, payload: bytes) -> SegmentPointer:
        """Replace the payload of an indexed segment in place.

        The new payload may use the segment's current payload space plus any
        fill bytes before the next segment. Leftover space is filled with
        0xFF bytes, which scanners skip as fill before the next marker, so no
        other offset changes. Returns the updated pointer, which also
        replaces the old one in ``pointers``.
        """
        f = self._handle()
        if isinstance(pointer, Segment):
            pointer = pointer.pointer
        payload = bytes(payload)

        try:
            i = self.pointers.index(pointer)
        except ValueError:
            raise UnknownSegmentError(
                f"Unknown segment: {pointer!r} is not indexed in {self.path}"
            ) from None
        if pointer.length is None:
            raise WrongMarkerError(f"Wrong marker: {marker_name(pointer.marker)} has no payload")

        space = self._available_space(i)
        if len(payload) > space or len(payload) + 2 > MAX_LENGTH:
            raise OversizePayloadError(
                f"Oversize payload: {len(payload)} bytes for {marker_name(pointer.marker)} "
                f"at offset {pointer.offset}, {min(space, MAX_LENGTH - 2)} available"
            )
        fill = space - len(payload)
        if fill and i + 1 == len(self.pointers):
            raise UnpaddableSegmentError(
                f"{marker_name(pointer.marker)} at offset {pointer.offset} is the last "
                f"segment; payload must be exactly {space} bytes"
            )

        self._check_on_disk(pointer)

        seg = Segment(pointer.offset, pointer.marker, len(payload) + 2, payload)
        f.seek(pointer.offset)
        write_all(f, segment_bytes(seg) + FILL_BYTE * fill)
        f.flush()
        logger.debug("Updated %s at offset %d with %d bytes (%d fill)",
                     seg.name, seg.offset, len(payload), fill)

        self.pointers[i] = seg.pointer
        return seg.pointer

    def append(self, *segments: Segment) -> List[SegmentPointer]:
        """Insert segments before SOS and rescan the rewritten file."""
        self._handle()
        self._f.close()
        self._f = None
        try:
            append_segments(self.path, *segments)
        finally:
            self._open()
        return self.pointers


def open_editable(path: Union[str, os.PathLike]) -> JFIFEditor:
    """Open and scan a JPEG file for in-place editing."""
    return JFIFEditor(path)
