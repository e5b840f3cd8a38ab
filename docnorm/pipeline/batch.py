"""Recursive batch conversion of a directory tree to WebP.

Each image gets a ``.webp`` sibling; originals are kept. One file failing
never stops the batch: the error is recorded and the walk continues.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional, Tuple

from PIL import Image

from docnorm.docs.model import ConversionStats, OutputFormat
from docnorm.docs.sources import read_file_bytes
from docnorm.errors import DecodeFailed, EncodeFailed, InvalidInput, IoFailure
from docnorm.image.processing import DEFAULT_QUALITY, decode_image, encode_image

TARGET_EXT = "webp"
EXTRA_IMAGE_EXTS = frozenset({"jpg", "jpeg", "png", "gif", "bmp", "ico", "tiff", "tif"})

CONVERTED = "converted"
SKIPPED = "skipped"
ERROR = "error"

Outcome = Tuple[str, Optional[str]]


def print_progress_bar(done: int, total: int, converted: int, errors: int, width: int = 10) -> None:
    """Render a colored one-line progress bar (fixed number of segments).

    Doxygen:
    - @param done: Files processed so far.
    - @param total: Total files to process.
    - @param converted: Files converted so far.
    - @param errors: Files that failed so far.
    - @param width: Number of bar segments (default 10).
    """
    total = max(1, total)
    done = max(0, min(done, total))
    segments = max(1, int(width))
    filled = segments if done >= total else int(done / total * segments)
    pending = max(0, segments - filled)
    GREEN = "\x1b[32m"
    RED = "\x1b[31m"
    RESET = "\x1b[0m"
    bar = f"{GREEN}{'█'*filled}{RESET}{RED}{'█'*pending}{RESET} [{done}/{total}] ok={converted} err={errors}"
    print(f"\r{bar}", end="", flush=True)


def is_potential_image(ext: str) -> bool:
    ext = ext.lower().lstrip(".")
    if ext in EXTRA_IMAGE_EXTS:
        return True
    fmt = Image.registered_extensions().get(f".{ext}")
    return fmt is not None and fmt in Image.OPEN


def webp_sibling(path: str) -> str:
    return f"{os.path.splitext(path)[0]}.{TARGET_EXT}"


def iter_files(root: str) -> Iterator[str]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            path = os.path.join(dirpath, name)
            if os.path.isfile(path):
                yield path


def classify(path: str) -> Optional[str]:
    """Return None when ``path`` should be converted, else the reason it is skipped."""
    ext = os.path.splitext(path)[1].lstrip(".").lower()
    if not ext:
        return "no extension"
    if ext == TARGET_EXT:
        return "already webp"
    if not is_potential_image(ext):
        return "not an image"
    if os.path.exists(webp_sibling(path)):
        return "webp exists"
    return None


def convert_file(path: str, quality: int = DEFAULT_QUALITY) -> Outcome:
    """Convert one file; never raises, reports the outcome instead."""
    target = webp_sibling(path)
    try:
        pixels = decode_image(read_file_bytes(path))
    except (DecodeFailed, InvalidInput, IoFailure) as e:
        return ERROR, f"Failed to open image '{path}': {e}"
    try:
        encoded = encode_image(pixels, OutputFormat.WEBP, quality)
    except EncodeFailed as e:
        return ERROR, f"Failed to encode WebP for '{path}': {e}"
    try:
        # exclusive create: another writer got there first -> skip, not overwrite
        with open(target, "xb") as f:
            f.write(encoded.data)
    except FileExistsError:
        return SKIPPED, None
    except OSError as e:
        return ERROR, f"Failed to write WebP file '{target}': {e}"
    return CONVERTED, None


def convert_images_to_webp_recursive(
    dir_path: str,
    workers: int = 1,
    quality: int = DEFAULT_QUALITY,
    progress: bool = False,
) -> ConversionStats:
    """Convert every image under ``dir_path`` to a WebP sibling.

    Doxygen:
    - @param dir_path: Root directory, walked recursively.
    - @param workers: Thread count; 1 converts sequentially.
    - @param quality: WebP quality, clamped into 1..100.
    - @param progress: Print a one-line progress bar while converting.
    - @return: ConversionStats with converted/skipped/errors and the error messages.
    - @throws InvalidInput: If the root does not exist or is not a directory.
    """
    if not os.path.exists(dir_path):
        raise InvalidInput(f"Directory does not exist: {dir_path}")
    if not os.path.isdir(dir_path):
        raise InvalidInput(f"Path is not a directory: {dir_path}")

    stats = ConversionStats()
    todo: List[str] = []
    for path in iter_files(dir_path):
        if classify(path) is None:
            todo.append(path)
        else:
            stats.skipped += 1

    def record(outcome: Outcome) -> None:
        status, message = outcome
        if status == CONVERTED:
            stats.converted += 1
        elif status == SKIPPED:
            stats.skipped += 1
        else:
            stats.errors += 1
            stats.error_messages.append(message or "")

    total = len(todo)
    workers = max(1, int(workers))
    if workers == 1:
        outcomes = (convert_file(p, quality) for p in todo)
        for i, outcome in enumerate(outcomes, start=1):
            record(outcome)
            if progress:
                print_progress_bar(i, total, stats.converted, stats.errors)
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # map() yields in submission (walk) order
            for i, outcome in enumerate(pool.map(lambda p: convert_file(p, quality), todo), start=1):
                record(outcome)
                if progress:
                    print_progress_bar(i, total, stats.converted, stats.errors)

    if progress and total:
        print()
    return stats
