"""Builders for synthetic JPEG byte streams used across the tests."""
import struct

import cv2
import numpy as np

from jfif.markers import APP0, APP1, DHT, DQT, SOF0, SOS
from jfif.signatures import SIG_EXIF, SIG_JFIF, SIG_XMP

SOI_BYTES = b"\xFF\xD8"

# Marker and payload size of every segment up to SOS, matching a typical
# camera JPEG with Exif and XMP blocks.
BASELINE_LAYOUT = [
    (APP0, 14),
    (APP1, 11308),
    (APP1, 5023),
    (DQT, 65),
    (DQT, 65),
    (SOF0, 15),
    (DHT, 29),
    (DHT, 79),
    (DHT, 28),
    (DHT, 72),
    (SOS, 10),
]

# Entropy-coded tail: stuffed 0xFF 0x00, a restart marker and EOI
SCAN_DATA = b"\x12\x34\xFF\x00\x56\xFF\xD0\x78\x9A\xFF\xD9"


def raw_segment(marker, payload):
    """0xFF, marker, big-endian length and payload."""
    return bytes([0xFF, marker]) + struct.pack(">H", len(payload) + 2) + payload


def filler(size, start=0):
    # never produces 0xFF so payloads can't be mistaken for markers
    return bytes((start + i) % 251 for i in range(size))


def payload_for(marker, size, index=0):
    if marker == APP0:
        body = SIG_JFIF + b"\x01\x01\x00\x00\x48\x00\x48\x00\x00"
    elif marker == APP1 and index == 1:
        body = SIG_EXIF + b"MM\x00\x2A\x00\x00\x00\x08"
    elif marker == APP1:
        body = SIG_XMP + b'<x:xmpmeta xmlns:x="adobe:ns:meta/"></x:xmpmeta>'
    elif marker == DQT:
        body = bytes([index % 2]) + bytes(range(1, 65))
    elif marker == SOF0:
        body = b"\x08\x00\x10\x00\x10\x03\x01\x22\x00\x02\x11\x01\x03\x11\x01"
    elif marker == SOS:
        body = b"\x03\x01\x00\x02\x11\x03\x11\x00\x3F\x00"
    else:
        body = b""
    return body + filler(size - len(body), start=index)


def baseline_segments():
    """(marker, payload) pairs for BASELINE_LAYOUT."""
    return [(m, payload_for(m, size, i)) for i, (m, size) in enumerate(BASELINE_LAYOUT)]


def baseline_jpeg():
    parts = [SOI_BYTES]
    for marker, payload in baseline_segments():
        parts.append(raw_segment(marker, payload))
    parts.append(SCAN_DATA)
    return b"".join(parts)


def baseline_offsets():
    """Expected offsets of SOI followed by every BASELINE_LAYOUT segment."""
    offsets = [0]
    pos = 2
    for _, size in BASELINE_LAYOUT:
        offsets.append(pos)
        pos += 4 + size
    return offsets


def real_jpeg(width=48, height=32, seed=0):
    """A baseline JPEG produced by OpenCV's libjpeg encoder."""
    rng = np.random.default_rng(seed)
    img = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
    ok, buf = cv2.imencode(".jpg", img, [cv2.IMWRITE_JPEG_QUALITY, 90])
    assert ok
    return buf.tobytes()
