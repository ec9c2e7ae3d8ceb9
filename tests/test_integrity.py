"""Tests for the pixel level integrity check."""
import numpy as np
import pytest

from jfif.integrity import calculate_psnr, decode_pixels, pixels_unchanged
from jfif.markers import COM
from jfif.splice import add_segment

from helpers import real_jpeg


class TestCalculatePsnr:

    def test_identical(self):
        img = np.full((8, 8, 3), 128, dtype=np.uint8)
        assert calculate_psnr(img, img.copy()) == float("inf")

    def test_known_value(self):
        """Test an MSE of 1 gives 20*log10(255)."""
        a = np.zeros((4, 4), dtype=np.uint8)
        b = np.ones((4, 4), dtype=np.uint8)
        assert calculate_psnr(a, b) == pytest.approx(48.1308, abs=1e-4)

    def test_no_overflow(self):
        a = np.zeros((2, 2), dtype=np.uint8)
        b = np.full((2, 2), 255, dtype=np.uint8)
        assert calculate_psnr(a, b) == pytest.approx(0.0)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            calculate_psnr(np.zeros((2, 2)), np.zeros((2, 3)))


class TestPixelsUnchanged:

    def test_decode_bytes_and_path(self, real_path):
        from_path = decode_pixels(real_path)
        from_bytes = decode_pixels(real_path.read_bytes())
        assert from_path.shape == (32, 48, 3)
        assert np.array_equal(from_path, from_bytes)

    def test_undecodable(self):
        with pytest.raises(ValueError):
            decode_pixels(b"\x00" * 16)

    def test_comment_does_not_change_pixels(self, real_path):
        """Test inserting a segment before SOS leaves the image data alone."""
        before = real_path.read_bytes()
        add_segment(real_path, COM, b"hello")
        assert real_path.read_bytes() != before
        assert pixels_unchanged(before, real_path)

    def test_different_images(self):
        assert not pixels_unchanged(real_jpeg(seed=1), real_jpeg(seed=2))

    def test_different_sizes(self):
        assert not pixels_unchanged(real_jpeg(width=16), real_jpeg(width=32))
