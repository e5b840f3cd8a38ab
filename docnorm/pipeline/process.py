"""Document normalization: any supported image becomes a one-page PDF.

Inputs whose content type is not a supported image are returned unchanged;
PDF inputs may additionally be shrunk by an optional optimizer.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from docnorm.docs.model import OutputFormat, RawDocument
from docnorm.docs.sources import document_from_base64, document_from_file
from docnorm.image.processing import decode_image, encode_image, resize_image
from docnorm.pdf.assemble import build_image_pdf

NORMALIZE_MAX_SIDE = 2000
NORMALIZE_JPEG_QUALITY = 75

SUPPORTED_IMAGE_MIMES = frozenset({"image/png", "image/jpeg", "image/jpg", "image/pjpeg"})
PDF_MIMES = frozenset({"application/pdf", "application/x-pdf"})

PdfOptimizer = Callable[[bytes], Optional[bytes]]


class Route(str, Enum):
    PASSTHROUGH = "passthrough"
    NORMALIZE = "normalize"


def _clean_mime(mime: str) -> str:
    return (mime or "").split(";", 1)[0].strip().lower()


def is_supported_image_mime(mime: str) -> bool:
    return _clean_mime(mime) in SUPPORTED_IMAGE_MIMES


def is_pdf_mime(mime: str) -> bool:
    return _clean_mime(mime) in PDF_MIMES


def route(mime: str) -> Route:
    return Route.NORMALIZE if is_supported_image_mime(mime) else Route.PASSTHROUGH


def _try_optimize(data: bytes, optimizer: Optional[PdfOptimizer]) -> bytes:
    if optimizer is None:
        return data
    try:
        optimized = optimizer(data)
    except Exception as e:
        print(f"Warning: PDF optimization failed, keeping original: {e}")
        return data
    if optimized and len(optimized) < len(data):
        return optimized
    return data


def image_to_pdf(data: bytes, max_side: int = NORMALIZE_MAX_SIDE, quality: int = NORMALIZE_JPEG_QUALITY) -> bytes:
    """Decode → cap the long side → JPEG → single-page PDF.

    Doxygen:
    - @param data: Encoded image bytes (format sniffed from content).
    - @param max_side: Long-side cap in pixels; also the page size bound.
    - @param quality: JPEG quality, clamped into 1..100.
    - @return: PDF bytes.
    - @throws DecodeFailed, EncodeFailed: From the image stages.
    """
    pixels = decode_image(data)
    resized = resize_image(pixels, max_side, max_side)
    encoded = encode_image(resized, OutputFormat.JPEG, quality)
    return build_image_pdf(encoded)


def normalize_to_pdf(
    data: bytes,
    mime: str,
    max_side: int = NORMALIZE_MAX_SIDE,
    quality: int = NORMALIZE_JPEG_QUALITY,
    optimizer: Optional[PdfOptimizer] = None,
) -> bytes:
    """Normalize a document to a viewer-friendly PDF.

    Doxygen:
    - @param data: Input bytes.
    - @param mime: Declared content type (case-insensitive, parameters ignored).
    - @param max_side: Long-side cap for images.
    - @param quality: JPEG quality for the embedded image.
    - @param optimizer: Optional callable returning smaller PDF bytes or None.
    - @return: PDF bytes for images; the input itself (or an optimized PDF) otherwise.
    """
    if route(mime) == Route.NORMALIZE:
        return _try_optimize(image_to_pdf(data, max_side=max_side, quality=quality), optimizer)
    if is_pdf_mime(mime):
        return _try_optimize(data, optimizer)
    return data


def normalize_document(document: RawDocument, **kwargs) -> bytes:
    return normalize_to_pdf(document.data, document.mime, **kwargs)


def normalize_file_to_pdf(path: str, mime: str | None = None, **kwargs) -> bytes:
    return normalize_document(document_from_file(path, mime), **kwargs)


def normalize_base64_to_pdf(text: str, mime: str, **kwargs) -> bytes:
    return normalize_document(document_from_base64(text, mime), **kwargs)
