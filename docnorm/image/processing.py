"""Image decode, bounded resize and re-encode helpers.

Pixel buffers are numpy arrays (RGB or RGBA, uint8). Pillow handles the codecs;
OpenCV handles the geometry (orientation, Lanczos resampling).
"""

from __future__ import annotations

import io
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np
from PIL import Image

from docnorm.docs.model import EncodedImage, OutputFormat
from docnorm.docs.sources import base64_to_buffer, read_file_bytes
from docnorm.errors import DecodeFailed, EncodeFailed, InvalidInput

from .orientation import (
    apply_orientation,
    orientation_from_decoder,
    orientation_from_metadata,
    resolve_orientation,
)

DEFAULT_QUALITY = 80
MIN_QUALITY = 1
MAX_QUALITY = 100

# greyscale modes holding more than 8 bits per sample
WIDE_GREY_MODES = frozenset({"I;16", "I;16L", "I;16B", "I;16N", "I"})


def clamp_quality(value: object) -> int:
    """Clamp a codec quality factor into 1..100.

    Out-of-range integers are clamped silently; non-integers raise InvalidInput.
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidInput(f"Quality must be an integer, got {value!r}")
    return max(MIN_QUALITY, min(MAX_QUALITY, int(value)))


def _check_bound(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidInput(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidInput(f"{name} must be >= 0 (0 = unbounded), got {value}")
    return int(value)


@dataclass
class ImageOptimizeOptions:
    """Resize/re-encode settings for ``optimize_image``.

    ``max_width``/``max_height`` of 0 mean unbounded; ``quality`` is clamped
    into 1..100; ``format`` is one of jpeg|jpg|png|webp|auto.
    """

    max_width: int = 0
    max_height: int = 0
    quality: int = DEFAULT_QUALITY
    format: str = "auto"

    def __post_init__(self) -> None:
        self.max_width = _check_bound("max_width", self.max_width)
        self.max_height = _check_bound("max_height", self.max_height)
        self.quality = clamp_quality(self.quality)

    @property
    def output_format(self) -> OutputFormat:
        return OutputFormat.parse(self.format)


def _has_alpha(image: Image.Image) -> bool:
    return "A" in image.getbands() or "transparency" in image.info


def _wide_grey_to_rgb(image: Image.Image) -> np.ndarray:
    # convert() clips 16-bit samples at 255; scale them down instead
    samples = np.clip(np.asarray(image).astype(np.int64), 0, 65535)
    grey = (samples >> 8).astype(np.uint8)
    return cv2.cvtColor(grey, cv2.COLOR_GRAY2RGB)


def decode_image(data: bytes) -> np.ndarray:
    """Decode raw bytes into an upright pixel array.

    Doxygen:
    - @param data: Encoded image bytes; the format is sniffed from the content.
    - @return: Array of shape (height, width, 3|4), uint8, with EXIF orientation applied.
    - @throws DecodeFailed: If the bytes cannot be decoded.
    """
    metadata_hint = orientation_from_metadata(data)
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            decoder_hint = orientation_from_decoder(image)
            if image.mode in WIDE_GREY_MODES:
                pixels = _wide_grey_to_rgb(image)
            else:
                mode = "RGBA" if _has_alpha(image) else "RGB"
                pixels = np.asarray(image.convert(mode), dtype=np.uint8)
    except Exception as exc:
        raise DecodeFailed(f"Failed to process image: {exc}") from exc

    orientation = resolve_orientation(metadata_hint, decoder_hint)
    return np.ascontiguousarray(apply_orientation(pixels, orientation))


def decode_image_file(path: str) -> np.ndarray:
    return decode_image(read_file_bytes(path))


def target_size(orig_w: int, orig_h: int, max_side: int) -> Tuple[int, int]:
    """Fit (orig_w, orig_h) inside a square of ``max_side``, keeping the aspect ratio.

    Doxygen:
    - @param orig_w: Original width in pixels.
    - @param orig_h: Original height in pixels.
    - @param max_side: Upper bound for the longer side (> 0).
    - @return: (width, height); unchanged when both sides already fit, never 0.
    """
    if max_side <= 0:
        raise InvalidInput(f"max_side must be positive, got {max_side}")
    if orig_w <= max_side and orig_h <= max_side:
        return orig_w, orig_h

    if orig_w >= orig_h:
        ratio = max_side / orig_w
        h = max(1, int(math.floor(orig_h * ratio + 0.5)))
        return max_side, h
    ratio = max_side / orig_h
    w = max(1, int(math.floor(orig_w * ratio + 0.5)))
    return w, max_side


def _max_side_for(max_width: int, max_height: int) -> Optional[int]:
    if max_width > 0 and max_height > 0:
        return min(max_width, max_height)
    if max_width > 0:
        return max_width
    if max_height > 0:
        return max_height
    return None


def resize_image(pixels: np.ndarray, max_width: int = 0, max_height: int = 0) -> np.ndarray:
    """Downscale with Lanczos resampling when a bound is exceeded.

    A single bound acts as the limit for the longer side; with both bounds the
    smaller one does. Images that already fit are returned as-is (no upscaling).
    """
    height, width = pixels.shape[:2]
    exceeds = (max_width > 0 and width > max_width) or (max_height > 0 and height > max_height)
    max_side = _max_side_for(max_width, max_height)
    if not exceeds or max_side is None:
        return pixels

    new_w, new_h = target_size(width, height, max_side)
    if (new_w, new_h) == (width, height):
        return pixels
    return cv2.resize(pixels, (new_w, new_h), interpolation=cv2.INTER_LANCZOS4)


def encode_image(pixels: np.ndarray, fmt: OutputFormat, quality: int = DEFAULT_QUALITY) -> EncodedImage:
    """Encode a pixel array with Pillow.

    Doxygen:
    - @param pixels: RGB or RGBA uint8 array.
    - @param fmt: Target codec; JPEG drops alpha.
    - @param quality: 1..100 (clamped); used by JPEG and WebP, ignored by PNG.
    - @return: EncodedImage holding the bytes and the encoded dimensions.
    - @throws EncodeFailed: If Pillow cannot encode the array.
    """
    quality = clamp_quality(quality)
    height, width = pixels.shape[:2]
    out = io.BytesIO()
    try:
        image = Image.fromarray(pixels)
        if fmt == OutputFormat.JPEG:
            image.convert("RGB").save(out, format="JPEG", quality=quality)
        elif fmt == OutputFormat.WEBP:
            image.save(out, format="WEBP", quality=quality)
        elif fmt == OutputFormat.PNG:
            image.save(out, format="PNG", optimize=True)
        else:
            raise ValueError(f"Unsupported output format: {fmt!r}")
    except Exception as exc:
        raise EncodeFailed(f"Failed to encode image: {exc}") from exc
    return EncodedImage(data=out.getvalue(), width=width, height=height, format=fmt)


def optimize_pixels(pixels: np.ndarray, options: ImageOptimizeOptions) -> EncodedImage:
    resized = resize_image(pixels, options.max_width, options.max_height)
    return encode_image(resized, options.output_format, options.quality)


def optimize_image(data: bytes, options: Optional[ImageOptimizeOptions] = None) -> bytes:
    """Decode, optionally downscale, and re-encode an image held in memory."""
    opts = options or ImageOptimizeOptions()
    return optimize_pixels(decode_image(data), opts).data


def optimize_image_from_file(path: str, options: Optional[ImageOptimizeOptions] = None) -> bytes:
    return optimize_image(read_file_bytes(path), options)


def optimize_image_from_base64(text: str, options: Optional[ImageOptimizeOptions] = None) -> bytes:
    return optimize_image(base64_to_buffer(text), options)


def image_to_webp(data: bytes, quality: int = DEFAULT_QUALITY) -> bytes:
    return encode_image(decode_image(data), OutputFormat.WEBP, quality).data


def image_to_webp_from_file(path: str, quality: int = DEFAULT_QUALITY) -> bytes:
    return image_to_webp(read_file_bytes(path), quality)


def image_to_webp_from_base64(text: str, quality: int = DEFAULT_QUALITY) -> bytes:
    return image_to_webp(base64_to_buffer(text), quality)
