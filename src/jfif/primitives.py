from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .markers import marker_name, has_length

# Largest value the 2 byte length field can hold. The length counts itself,
# so a payload can be at most MAX_LENGTH - 2 bytes.
MAX_LENGTH = 0xFFFF


@dataclass(frozen=True)
class SegmentPointer:
    """Location of a segment in a file, without its payload.

    offset is the address of the 0xFF byte in front of the marker, never the
    marker byte itself. length is the raw 2 byte length field (inclusive of
    its own two bytes) or None for markers that don't carry one.
    """
    offset: int
    marker: int
    length: Optional[int] = None

    @property
    def name(self) -> str:
        return marker_name(self.marker)

    @property
    def payload_size(self) -> int:
        if self.length is None:
            return 0
        return self.length - 2

    @property
    def size(self) -> int:
        """Total bytes on disk: 0xFF, marker, length field and payload."""
        if self.length is None:
            return 2
        return 2 + self.length

    @property
    def end(self) -> int:
        return self.offset + self.size


@dataclass(frozen=True)
class Segment(SegmentPointer):
    """A SegmentPointer together with the payload bytes it points at.

    data excludes the 0xFF, marker and length bytes. It is None for markers
    without a length.
    """
    data: Optional[bytes] = None

    @property
    def pointer(self) -> SegmentPointer:
        return SegmentPointer(self.offset, self.marker, self.length)

    @staticmethod
    def new(marker: int, data: Optional[bytes] = None) -> "Segment":
        """Build a segment that hasn't been placed in a file yet."""
        if data is None:
            if has_length(marker):
                data = b""
            else:
                return Segment(0, marker)
        data = bytes(data)
        return Segment(0, marker, len(data) + 2, data)


@dataclass(frozen=True)
class ExtendedXMPHeader:
    # 32 byte ASCII hex MD5 of the full extended serialization
    guid: str
    full_length: int
    offset: int
