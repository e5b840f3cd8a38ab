"""
Entry point and compatibility facade for the document normalization toolkit.

This module exposes a stable API and a CLI.

Packages:
- docnorm.image: EXIF orientation, decode, bounded resize, re-encode
- docnorm.pdf: Hand-assembled single-image PDF, text extraction, Ghostscript shrinking
- docnorm.docs: Data model and input adapters (path, base64)
- docnorm.pipeline: High-level orchestration (`normalize_to_pdf`, batch WebP conversion)
"""

from __future__ import annotations

import os
import time

from docnorm.docs import buffer_to_base64, base64_to_buffer, guess_mime, read_file_bytes, write_file_bytes
from docnorm.errors import DocNormError
from docnorm.image import (
    ImageOptimizeOptions,
    image_to_webp,
    image_to_webp_from_base64,
    image_to_webp_from_file,
    optimize_image,
    optimize_image_from_base64,
    optimize_image_from_file,
)
from docnorm.pdf import extract_text_from_pdf
from docnorm.pipeline import (
    convert_images_to_webp_recursive,
    normalize_base64_to_pdf,
    normalize_file_to_pdf,
    normalize_to_pdf,
)

__all__ = [
    # base64
    "buffer_to_base64",
    "base64_to_buffer",
    # images
    "ImageOptimizeOptions",
    "image_to_webp",
    "image_to_webp_from_base64",
    "image_to_webp_from_file",
    "optimize_image",
    "optimize_image_from_base64",
    "optimize_image_from_file",
    # pdf
    "extract_text_from_pdf",
    "normalize_to_pdf",
    "normalize_file_to_pdf",
    "normalize_base64_to_pdf",
    # batch
    "convert_images_to_webp_recursive",
]


def _default_output(path: str, suffix: str) -> str:
    base_dir = os.path.dirname(path)
    base_name = os.path.splitext(os.path.basename(path))[0]
    return os.path.join(base_dir, f"{base_name}{suffix}")


def _print_size_change(before: int, after: int) -> None:
    print(f"Original size: {before} bytes")
    print(f"Output size: {after} bytes")
    if before > 0:
        print(f"Size change: {(1 - after / before) * 100:.1f}%")


def _cli() -> None:
    """CLI for document normalization, image optimization and batch conversion.

    Normalize mode:
    --file / -f: Path to input document (png|jpg|jpeg|pdf|other)
    --mime: Declared content type (default: guessed from extension)
    --out / -o: Output path (default: <name>.normalized.pdf)
    --optimize-pdf: Shrink PDFs with Ghostscript when available

    Optimize mode:
    --image / -i: Path to input image
    --max-width / --max-height: Bounds in pixels (0 = unbounded)
    --quality / -q: Codec quality 1-100 (default: 80)
    --format: jpeg|jpg|png|webp|auto (default: auto)
    --out / -o: Output path (default: <name>.optimized.<ext>)

    Batch mode:
    --convert-dir: Directory to convert recursively to WebP
    --workers: Parallel conversions (default from config)

    Text mode:
    --extract-text: Path to a PDF whose text is printed
    """
    import argparse

    parser = argparse.ArgumentParser(description="Normalize documents to PDF, optimize images, convert folders to WebP.")
    # normalize mode
    parser.add_argument("--file", "-f", type=str, help="Path to input document to normalize into a PDF")
    parser.add_argument("--mime", type=str, default=None, help="Declared content type (default: guessed from extension)")
    parser.add_argument("--optimize-pdf", action="store_true", help="Shrink PDF output with Ghostscript if available")
    # optimize mode
    parser.add_argument("--image", "-i", type=str, help="Path to input image to optimize")
    parser.add_argument("--max-width", type=int, default=0, help="Maximum width in pixels (0 = no limit)")
    parser.add_argument("--max-height", type=int, default=0, help="Maximum height in pixels (0 = no limit)")
    parser.add_argument("--quality", "-q", type=int, default=80, help="Codec quality 1-100 (default: 80)")
    parser.add_argument("--format", type=str, default="auto", choices=["jpeg", "jpg", "png", "webp", "auto"], help="Output format (default: auto)")
    # batch mode
    parser.add_argument("--convert-dir", type=str, help="Directory whose images are converted to WebP recursively")
    parser.add_argument("--workers", type=int, default=None, help="Parallel conversions for --convert-dir")
    # text mode
    parser.add_argument("--extract-text", type=str, help="Path to a PDF to extract text from")
    # shared
    parser.add_argument("--out", "-o", type=str, default=None, help="Output path")

    args = parser.parse_args()

    from docnorm.config import configure_dependencies, load_settings
    settings = load_settings()

    try:
        if args.file:
            if args.optimize_pdf:
                settings.ghostscript_enabled = True
            optimizer = configure_dependencies(settings)
            mime = args.mime or guess_mime(args.file)
            input_size = os.path.getsize(args.file) if os.path.isfile(args.file) else 0
            print(f"Input: {args.file}")
            print(f"Mime: {mime}")
            out_bytes = normalize_file_to_pdf(
                args.file,
                mime,
                max_side=settings.max_side,
                quality=settings.jpeg_quality,
                optimizer=optimizer,
            )
            out_path = args.out or _default_output(args.file, ".normalized.pdf")
            write_file_bytes(out_path, out_bytes)
            print(f"Output written: {out_path}")
            _print_size_change(input_size, len(out_bytes))
            return

        if args.image:
            options = ImageOptimizeOptions(
                max_width=args.max_width,
                max_height=args.max_height,
                quality=args.quality,
                format=args.format,
            )
            out_bytes = optimize_image_from_file(args.image, options)
            ext = options.output_format.value
            out_path = args.out or _default_output(args.image, f".optimized.{'jpg' if ext == 'jpeg' else ext}")
            write_file_bytes(out_path, out_bytes)
            print(f"Output written: {out_path}")
            _print_size_change(os.path.getsize(args.image), len(out_bytes))
            return

        if args.convert_dir:
            workers = args.workers if args.workers is not None else settings.batch_workers
            print(f"Converting images to WebP in: {args.convert_dir}")
            start = time.time()
            stats = convert_images_to_webp_recursive(args.convert_dir, workers=workers, progress=True)
            print("Conversion completed")
            print(f"   - Converted: {stats.converted} file(s)")
            print(f"   - Skipped: {stats.skipped} file(s)")
            print(f"   - Errors: {stats.errors} file(s)")
            print(f"   - Duration: {time.time() - start:.2f}s")
            for idx, msg in enumerate(stats.error_messages, start=1):
                print(f"   {idx}. {msg}")
            return

        if args.extract_text:
            text = extract_text_from_pdf(read_file_bytes(args.extract_text))
            if args.out:
                write_file_bytes(args.out, text.encode("utf-8"))
                print(f"Output written: {args.out}")
            else:
                print(text)
            return
    except DocNormError as e:
        print(f"Error [{e.code}]: {e}")
        raise SystemExit(1)

    print("Please provide one of --file, --image, --convert-dir or --extract-text.")
    print("Examples:\n  python main.py --file scan.jpg\n  python main.py --image photo.jpg --max-width 800 --format webp\n  python main.py --convert-dir ./images --workers 4")
    raise SystemExit(2)


if __name__ == "__main__":
    _cli()
