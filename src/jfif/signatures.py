"""Known signatures that prefix the payload of APPn segments."""
from __future__ import annotations

from typing import Optional, Tuple

from .errors import WrongMarkerError
from .markers import APP0, is_app, marker_name
from .primitives import Segment

# APP0
SIG_JFIF = b"JFIF\x00"
SIG_JFXX = b"JFXX\x00"

# APP1
SIG_EXIF = b"Exif\x00\x00"
SIG_EXIF_ALT = b"Exif\x00\xFF"
SIG_XMP = b"http://ns.adobe.com/xap/1.0/\x00"
SIG_EXTENDED_XMP = b"http://ns.adobe.com/xmp/extension/\x00"

# APP2
SIG_ICC_PROFILE = b"ICC_PROFILE\x00"

# APP3
SIG_META = b"META\x00\x00"
SIG_META_LOWER = b"Meta\x00\x00"

# APP12
SIG_DUCKY = b"Ducky\x00"

# APP13
SIG_PHOTOSHOP3 = b"Photoshop 3.0\x00"
SIG_PHOTOSHOP2 = b"Adobe_Photoshop2.5:"

# APP14
SIG_ADOBE = b"Adobe\x00"

# Candidates per APPn slot, checked in order
APP_SIGNATURES: Tuple[Tuple[bytes, ...], ...] = (
    (SIG_JFIF, SIG_JFXX),
    (SIG_EXIF, SIG_EXIF_ALT, SIG_XMP, SIG_EXTENDED_XMP),
    (SIG_ICC_PROFILE,),
    (SIG_META, SIG_META_LOWER),
    (),
    (),
    (),
    (),
    (),
    (),
    (),
    (),
    (SIG_DUCKY,),
    (SIG_PHOTOSHOP3, SIG_PHOTOSHOP2),
    (SIG_ADOBE,),
    (),
)


def match_signature(segment: Segment) -> Optional[Tuple[bytes, bytes]]:
    """Split an APPn payload into its known signature and the rest.

    Returns None when no registered signature matches. Raises
    WrongMarkerError if the segment isn't APP0-APP15.
    """
    if not is_app(segment.marker):
        raise WrongMarkerError(
            f"Wrong marker: {marker_name(segment.marker)} is not an APPn segment"
        )
    data = segment.data or b""
    for sig in APP_SIGNATURES[segment.marker - APP0]:
        if data.startswith(sig):
            return sig, data[len(sig):]
    return None


def clean_signature(sig: bytes) -> str:
    """Strip trailing NUL and 0xFF padding for display."""
    return sig.rstrip(b"\x00\xff").decode("latin-1")
