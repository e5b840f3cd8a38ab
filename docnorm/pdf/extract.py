from __future__ import annotations

import io

from pdfminer.high_level import extract_text

from docnorm.errors import ExtractionFailed


def extract_text_from_pdf(data: bytes) -> str:
    """Extract the text of every page of a PDF held in memory.

    Doxygen:
    - @param data: PDF bytes.
    - @return: Text of all pages; page breaks are rendered as newlines.
    - @throws ExtractionFailed: If pdfminer cannot parse the document.
    """
    try:
        text = extract_text(io.BytesIO(data))
    except Exception as exc:
        raise ExtractionFailed(f"Failed to extract text from PDF: {exc}") from exc
    return text.replace("\x0c", "\n")
