from __future__ import annotations


class JFIFError(Exception):
    """Base class for errors raised while reading or editing JPEG segments.

    Errors raised while scanning keep whatever segments were read before the
    failure in ``segments``.
    """

    def __init__(self, message: str = "", segments=None):
        super().__init__(message or self.__doc__.strip().splitlines()[0])
        self.segments = list(segments) if segments is not None else []


class InvalidFileError(JFIFError):
    """Invalid JPEG: stream does not start with a start of image marker."""


class ShortSegmentError(JFIFError):
    """Short segment: declared length is less than 2."""


class TruncatedError(JFIFError, EOFError):
    """Unexpected end of stream."""


class UnseekableStreamError(JFIFError):
    """Unseekable stream: only forward relative seeks are supported."""


class WrongMarkerError(JFIFError):
    """Wrong marker for the requested operation."""


class UnknownSegmentError(JFIFError):
    """Unknown segment: not present in the edit index."""


class StaleIndexError(UnknownSegmentError):
    """Stale index: the file changed on disk since it was scanned."""


class OversizePayloadError(JFIFError):
    """Oversize payload: not enough space to update the segment in place."""


class UnpaddableSegmentError(JFIFError):
    """No following segment to absorb fill bytes after a smaller payload."""


class OversizeSegmentError(JFIFError):
    """Oversize segment: payload does not fit in the 16 bit length field."""
