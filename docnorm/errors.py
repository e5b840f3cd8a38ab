"""Typed errors raised by the normalization pipeline.

Every error carries a short machine-readable ``code`` next to its message so
callers (CLI, services) can branch without parsing text.
"""


class DocNormError(Exception):
    code = "E_DOCNORM"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)


class InvalidInput(DocNormError):
    """Malformed base64, missing path, bad directory or bad option value."""

    code = "E_INVALID_INPUT"


class DecodeFailed(DocNormError):
    code = "E_DECODE_FAILED"


class EncodeFailed(DocNormError):
    code = "E_ENCODE_FAILED"


class IoFailure(DocNormError):
    code = "E_IO_FAILURE"


class ExtractionFailed(DocNormError):
    code = "E_EXTRACTION_FAILED"
