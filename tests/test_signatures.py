"""Unit tests for APPn signature matching."""
import io

import pytest

from jfif.errors import WrongMarkerError
from jfif.markers import APP0, APP1, APP2, APP4, APP13, APP14, COM, DQT
from jfif.primitives import Segment
from jfif.reader import decode_segments
from jfif.signatures import (
    APP_SIGNATURES,
    SIG_EXIF,
    SIG_EXTENDED_XMP,
    SIG_ICC_PROFILE,
    SIG_JFIF,
    SIG_PHOTOSHOP3,
    SIG_XMP,
    clean_signature,
    match_signature,
)


class TestMatchSignature:
    """Tests for match_signature."""

    def test_exif(self):
        """Test the signature is stripped from the returned payload."""
        seg = Segment.new(APP1, SIG_EXIF + b"MM\x00\x2A")
        assert match_signature(seg) == (SIG_EXIF, b"MM\x00\x2A")

    def test_xmp(self):
        seg = Segment.new(APP1, SIG_XMP + b"<x:xmpmeta/>")
        assert match_signature(seg) == (SIG_XMP, b"<x:xmpmeta/>")

    def test_extended_xmp_not_confused_with_xmp(self):
        seg = Segment.new(APP1, SIG_EXTENDED_XMP + b"A" * 40)
        assert match_signature(seg) == (SIG_EXTENDED_XMP, b"A" * 40)

    def test_exact_signature_only(self):
        """Test a payload consisting of only the signature leaves nothing."""
        assert match_signature(Segment.new(APP2, SIG_ICC_PROFILE)) == (SIG_ICC_PROFILE, b"")

    def test_photoshop(self):
        seg = Segment.new(APP13, SIG_PHOTOSHOP3 + b"8BIM")
        assert match_signature(seg) == (SIG_PHOTOSHOP3, b"8BIM")

    def test_slots_are_independent(self):
        """Test a signature registered for APP1 doesn't match in APP13."""
        assert match_signature(Segment.new(APP13, SIG_EXIF + b"data")) is None
        assert match_signature(Segment.new(APP0, SIG_XMP)) is None

    def test_unknown_prefix(self):
        """Test unregistered prefixes return None rather than a partial match."""
        assert match_signature(Segment.new(APP1, b"Exif\x00")) is None
        assert match_signature(Segment.new(APP1, b"http://ns.adobe.com/xap/1.0")) is None
        assert match_signature(Segment.new(APP4, b"anything")) is None

    def test_empty_payload(self):
        assert match_signature(Segment.new(APP14, b"")) is None

    def test_wrong_marker(self):
        """Test non-APPn markers are a distinct error."""
        with pytest.raises(WrongMarkerError):
            match_signature(Segment.new(COM, b"JFIF\x00"))
        with pytest.raises(WrongMarkerError):
            match_signature(Segment.new(DQT, b"\x00"))

    def test_baseline_fixture(self, baseline_bytes):
        matched = [
            match_signature(s)[0]
            for s in decode_segments(io.BytesIO(baseline_bytes))
            if APP0 <= s.marker <= APP1
        ]
        assert matched == [SIG_JFIF, SIG_EXIF, SIG_XMP]

    def test_sixteen_slots(self):
        assert len(APP_SIGNATURES) == 16


class TestCleanSignature:
    """Tests for clean_signature."""

    def test_strips_nul(self):
        assert clean_signature(SIG_JFIF) == "JFIF"
        assert clean_signature(SIG_EXIF) == "Exif"
        assert clean_signature(SIG_XMP) == "http://ns.adobe.com/xap/1.0/"

    def test_strips_ff(self):
        assert clean_signature(b"Exif\x00\xFF") == "Exif"

    def test_keeps_inner_characters(self):
        assert clean_signature(b"Adobe_Photoshop2.5:") == "Adobe_Photoshop2.5:"
