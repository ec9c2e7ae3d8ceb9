"""XMP envelopes carried in APP1 segments.

Standard XMP is a single packet after the XMP signature. Packets too large
for one segment spill into Extended XMP segments. Each of those carries a
40 byte header after its signature:

  - 32 byte ASCII hex GUID (MD5 of the full extended serialization)
  - 4 byte big-endian length of the full serialization
  - 4 byte big-endian offset of this chunk within it

followed by the chunk itself.
"""
from __future__ import annotations

import struct
from collections import OrderedDict
from typing import Iterable, List, Tuple

from .errors import JFIFError
from .markers import APP1
from .primitives import ExtendedXMPHeader, Segment
from .signatures import SIG_EXTENDED_XMP, SIG_XMP, match_signature

EXTENDED_HEADER = struct.Struct(">32sII")


def parse_extended_xmp(payload: bytes) -> Tuple[ExtendedXMPHeader, bytes]:
    """Split an Extended XMP payload (signature already removed)."""
    if len(payload) < EXTENDED_HEADER.size:
        raise JFIFError(
            f"Extended XMP payload of {len(payload)} bytes is shorter than "
            f"its {EXTENDED_HEADER.size} byte header"
        )
    guid, full_length, offset = EXTENDED_HEADER.unpack_from(payload)
    header = ExtendedXMPHeader(guid.decode("ascii", "replace"), full_length, offset)
    return header, payload[EXTENDED_HEADER.size:]


def extract_xmp(segments: Iterable[Segment]) -> List[bytes]:
    """Collect XMP packets from decoded segments.

    Standard packets come first in file order, followed by one reassembled
    buffer per Extended XMP GUID. Chunks are ordered by their offset, so
    interleaved or out of order chunks are handled.
    """
    packets = []
    extended = OrderedDict()
    for seg in segments:
        if seg.marker != APP1:
            continue
        match = match_signature(seg)
        if match is None:
            continue
        sig, payload = match
        if sig == SIG_XMP:
            packets.append(payload)
        elif sig == SIG_EXTENDED_XMP:
            header, chunk = parse_extended_xmp(payload)
            extended.setdefault(header.guid, []).append((header.offset, chunk))

    for chunks in extended.values():
        chunks.sort(key=lambda c: c[0])
        packets.append(b"".join(chunk for _, chunk in chunks))
    return packets
