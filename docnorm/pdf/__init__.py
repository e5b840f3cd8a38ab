"""PDF layer.

Exposes:
- PdfWriter: staged writer with exact xref bookkeeping
- build_image_pdf: one-page PDF around a JPEG
- extract_text_from_pdf: text of an existing PDF (pdfminer.six)
- GhostscriptOptimizer: optional external shrinking step
"""

from .writer import PdfWriter
from .assemble import build_image_pdf
from .extract import extract_text_from_pdf
from .optimize import GhostscriptOptimizer

__all__ = [
    "PdfWriter",
    "build_image_pdf",
    "extract_text_from_pdf",
    "GhostscriptOptimizer",
]
