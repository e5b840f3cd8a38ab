"""Single-page PDF that shows one JPEG image at its pixel size.

Object layout is fixed: 1 Catalog, 2 Pages, 3 Page, 4 Image XObject,
5 content stream. The JPEG bytes are embedded verbatim under /DCTDecode.
"""

from __future__ import annotations

from docnorm.docs.model import EncodedImage, OutputFormat
from docnorm.errors import InvalidInput

from .writer import PdfWriter

IMAGE_RESOURCE_NAME = "Im0"


def image_content_stream(width: int, height: int, name: str = IMAGE_RESOURCE_NAME) -> bytes:
    """Drawing program: scale the unit square to (width, height) and paint the image."""
    return f"q\n{width} 0 0 {height} 0 0 cm\n/{name} Do\nQ\n".encode("ascii")


def build_image_pdf(image: EncodedImage) -> bytes:
    """Assemble a one-page PDF around a JPEG-encoded image.

    Doxygen:
    - @param image: JPEG bytes plus the pixel size they were encoded at.
    - @return: Complete PDF bytes; the page box is [0 0 width height].
    - @throws InvalidInput: If the image is not JPEG, empty, or has a non-positive size.
    """
    if image.format != OutputFormat.JPEG:
        raise InvalidInput(f"Only JPEG images can be embedded, got {image.format.value}")
    if not image.data:
        raise InvalidInput("Cannot embed an empty image")
    width, height = int(image.width), int(image.height)
    if width <= 0 or height <= 0:
        raise InvalidInput(f"Invalid image size {width}x{height}")

    w = PdfWriter()
    catalog = w.allocate()
    pages = w.allocate()
    page = w.allocate()
    xobject = w.allocate()
    content = w.allocate()

    w.write_object(catalog, f"<< /Type /Catalog /Pages {pages} 0 R >>")
    w.write_object(pages, f"<< /Type /Pages /Kids [{page} 0 R] /Count 1 >>")
    w.write_object(
        page,
        f"<< /Type /Page /Parent {pages} 0 R /MediaBox [0 0 {width} {height}] "
        f"/Resources << /XObject << /{IMAGE_RESOURCE_NAME} {xobject} 0 R >> >> "
        f"/Contents {content} 0 R >>",
    )
    w.write_stream(
        xobject,
        f"/Type /XObject /Subtype /Image /Width {width} /Height {height} "
        "/ColorSpace /DeviceRGB /BitsPerComponent 8 /Filter /DCTDecode",
        image.data,
    )
    w.write_stream(content, "", image_content_stream(width, height))
    return w.finish(root=catalog)
