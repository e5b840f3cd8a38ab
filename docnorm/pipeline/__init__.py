"""High-level orchestration: image → PDF normalization and batch WebP conversion."""

from .process import (
    Route,
    image_to_pdf,
    normalize_base64_to_pdf,
    normalize_document,
    normalize_file_to_pdf,
    normalize_to_pdf,
    route,
)
from .batch import (
    convert_images_to_webp_recursive,
    print_progress_bar,
)

__all__ = [
    "Route",
    "image_to_pdf",
    "normalize_base64_to_pdf",
    "normalize_document",
    "normalize_file_to_pdf",
    "normalize_to_pdf",
    "route",
    "convert_images_to_webp_recursive",
    "print_progress_bar",
]
