"""Pixel level checks that segment edits left the image data alone.

Decoding is delegated to OpenCV; the images are compared with PSNR.
"""
from __future__ import annotations

import math
import os
from typing import Union

import cv2
import numpy as np


def decode_pixels(source: Union[str, os.PathLike, bytes]) -> np.ndarray:
    """Decode a JPEG from a path or from bytes into a BGR array."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        buf = np.frombuffer(source, dtype=np.uint8)
        label = f"{len(buf)} byte buffer"
    else:
        buf = np.fromfile(os.fspath(source), dtype=np.uint8)
        label = os.fspath(source)
    img = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValueError(f"OpenCV could not decode {label}")
    return img


def calculate_psnr(img1: np.ndarray, img2: np.ndarray) -> float:
    """
    Peak signal-to-noise ratio of two 8-bit images. inf when identical.
    """
    if img1.shape != img2.shape:
        raise ValueError(f"Shape mismatch: {img1.shape} vs {img2.shape}")

    # float64 so the squares can't overflow
    img1 = img1.astype(np.float64)
    img2 = img2.astype(np.float64)

    mse = np.mean((img1 - img2) ** 2)
    if mse == 0:
        return float("inf")

    return 20 * math.log10(255.0 / math.sqrt(mse))


def pixels_unchanged(before, after) -> bool:
    """True if both sources decode to exactly the same pixels."""
    img_before = decode_pixels(before)
    img_after = decode_pixels(after)
    if img_before.shape != img_after.shape:
        return False
    return calculate_psnr(img_before, img_after) == float("inf")
