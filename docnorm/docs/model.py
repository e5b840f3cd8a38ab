from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class OutputFormat(str, Enum):
    """Codec an image is re-encoded to.

    ``parse`` resolves the user-facing format string once; "auto" and unknown
    names land on the fallback branch.
    """

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"

    @classmethod
    def parse(cls, name: str | None) -> "OutputFormat":
        key = (name or "auto").strip().lower()
        if key in ("jpeg", "jpg"):
            return cls.JPEG
        if key == "png":
            return cls.PNG
        if key == "webp":
            return cls.WEBP
        return FALLBACK_FORMAT


FALLBACK_FORMAT = OutputFormat.PNG


@dataclass(frozen=True)
class RawDocument:
    data: bytes
    content_type: str

    @property
    def mime(self) -> str:
        # "Image/JPEG; charset=binary" -> "image/jpeg"
        return (self.content_type or "").split(";", 1)[0].strip().lower()


@dataclass
class EncodedImage:
    data: bytes
    width: int
    height: int
    format: OutputFormat


@dataclass
class ConversionStats:
    converted: int = 0
    skipped: int = 0
    errors: int = 0
    error_messages: List[str] = field(default_factory=list)
