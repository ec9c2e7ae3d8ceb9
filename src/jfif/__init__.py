"""Read and rewrite the segment structure of JPEG/JFIF files."""
from .codec import encode_segment, load_segment, segment_bytes
from .editor import JFIFEditor, open_editable
from .errors import (
    InvalidFileError,
    JFIFError,
    OversizePayloadError,
    OversizeSegmentError,
    ShortSegmentError,
    StaleIndexError,
    TruncatedError,
    UnknownSegmentError,
    UnpaddableSegmentError,
    UnseekableStreamError,
    WrongMarkerError,
)
from .markers import marker_info, marker_name
from .primitives import ExtendedXMPHeader, Segment, SegmentPointer
from .reader import decode_segments, iter_segments, scan_segments
from .signatures import clean_signature, match_signature
from .splice import add_segment, append_segments, splice_file
from .xmp import extract_xmp, parse_extended_xmp

__version__ = "0.1.0"
