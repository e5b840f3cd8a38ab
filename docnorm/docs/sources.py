"""Input adapters: file paths and base64 text all end up as a byte buffer."""

from __future__ import annotations

import base64
import binascii
import os

from docnorm.errors import InvalidInput, IoFailure

from .model import RawDocument

_MIME_BY_EXT = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".pdf": "application/pdf",
}
DEFAULT_MIME = "application/octet-stream"


def guess_mime(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    return _MIME_BY_EXT.get(ext, DEFAULT_MIME)


def read_file_bytes(path: str) -> bytes:
    if not os.path.exists(path):
        raise InvalidInput(f"Failed to open file '{path}': file not found")
    if os.path.isdir(path):
        raise InvalidInput(f"Failed to open file '{path}': path is a directory")
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as exc:
        raise IoFailure(f"Failed to read file '{path}': {exc}") from exc


def write_file_bytes(path: str, data: bytes) -> str:
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise IoFailure(f"Failed to write file '{path}': {exc}") from exc
    return path


def base64_to_buffer(text: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise InvalidInput(f"Failed to decode Base64: {exc}") from exc


def buffer_to_base64(data: bytes) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")


def document_from_file(path: str, content_type: str | None = None) -> RawDocument:
    return RawDocument(data=read_file_bytes(path), content_type=content_type or guess_mime(path))


def document_from_base64(text: str, content_type: str) -> RawDocument:
    return RawDocument(data=base64_to_buffer(text), content_type=content_type)
