"""Document data model and input adapters.

Exposes:
- Data model: RawDocument, EncodedImage, OutputFormat, ConversionStats
- Adapters: file path and base64 text to bytes
"""

from .model import ConversionStats, EncodedImage, OutputFormat, RawDocument
from .sources import (
    base64_to_buffer,
    buffer_to_base64,
    document_from_base64,
    document_from_file,
    guess_mime,
    read_file_bytes,
    write_file_bytes,
)

__all__ = [
    "ConversionStats",
    "EncodedImage",
    "OutputFormat",
    "RawDocument",
    "base64_to_buffer",
    "buffer_to_base64",
    "document_from_base64",
    "document_from_file",
    "guess_mime",
    "read_file_bytes",
    "write_file_bytes",
]
