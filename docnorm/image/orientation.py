"""EXIF orientation: reading the hint and applying it to a pixel array.

Two sources can carry the hint. The embedded EXIF block is parsed directly
from the raw bytes with piexif (primary IFD only); the decoder's own view comes
from Pillow's ``getexif()``. The EXIF block wins when both are present.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Optional

import cv2
import numpy as np
import piexif
from PIL import Image

ORIENTATION_TAG = piexif.ImageIFD.Orientation  # 0x0112

# piexif treats unknown input as a filename, so only hand it containers it parses.
_EXIF_SIGNATURES = (
    b"\xff\xd8",  # JPEG
    b"II*\x00",  # TIFF little-endian
    b"MM\x00*",  # TIFF big-endian
    b"Exif",  # bare APP1 payload
)


class Orientation(IntEnum):
    NONE = 0
    IDENTITY = 1
    FLIP_HORIZONTAL = 2
    ROTATE_180 = 3
    FLIP_VERTICAL = 4
    TRANSPOSE = 5
    ROTATE_90_CW = 6
    TRANSVERSE = 7
    ROTATE_270_CW = 8

    @classmethod
    def from_exif(cls, value: object) -> Optional["Orientation"]:
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        if 1 <= value <= 8:
            return cls(value)
        return None


def _has_exif_container(data: bytes) -> bool:
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return True
    return data.startswith(_EXIF_SIGNATURES)


def orientation_from_metadata(data: bytes) -> Optional[Orientation]:
    """Read the orientation tag of the primary IFD from raw image bytes.

    Doxygen:
    - @param data: Raw bytes of a JPEG, TIFF or WebP file (other containers yield None).
    - @return: Orientation when a valid tag (1..8) is present, otherwise None.

    Absent and corrupt EXIF blocks are treated the same: no hint.
    """
    if not data or not _has_exif_container(data):
        return None
    try:
        exif = piexif.load(data)
    except Exception:
        return None
    value = (exif.get("0th") or {}).get(ORIENTATION_TAG)
    return Orientation.from_exif(value)


def orientation_from_decoder(image: Image.Image) -> Optional[Orientation]:
    """Orientation as reported by the opened Pillow image, if any."""
    try:
        value = image.getexif().get(ORIENTATION_TAG)
    except Exception:
        return None
    return Orientation.from_exif(value)


def resolve_orientation(
    metadata: Optional[Orientation],
    decoder: Optional[Orientation],
) -> Orientation:
    if metadata is not None:
        return metadata
    if decoder is not None:
        return decoder
    return Orientation.NONE


def apply_orientation(pixels: np.ndarray, orientation: Orientation) -> np.ndarray:
    """Return an upright copy of ``pixels`` for the given EXIF orientation.

    Doxygen:
    - @param pixels: Image array of shape (height, width, channels).
    - @param orientation: Transform describing how the stored array must be re-oriented.
    - @return: New array; width and height are swapped for the 90/270 degree variants.
    """
    if orientation in (Orientation.NONE, Orientation.IDENTITY):
        return pixels.copy()
    if orientation == Orientation.FLIP_HORIZONTAL:
        return cv2.flip(pixels, 1)
    if orientation == Orientation.ROTATE_180:
        return cv2.rotate(pixels, cv2.ROTATE_180)
    if orientation == Orientation.FLIP_VERTICAL:
        return cv2.flip(pixels, 0)
    if orientation == Orientation.TRANSPOSE:
        return cv2.transpose(pixels)
    if orientation == Orientation.ROTATE_90_CW:
        return cv2.rotate(pixels, cv2.ROTATE_90_CLOCKWISE)
    if orientation == Orientation.TRANSVERSE:
        return cv2.flip(cv2.transpose(pixels), -1)
    if orientation == Orientation.ROTATE_270_CW:
        return cv2.rotate(pixels, cv2.ROTATE_90_COUNTERCLOCKWISE)
    raise ValueError(f"Unknown orientation: {orientation!r}")
