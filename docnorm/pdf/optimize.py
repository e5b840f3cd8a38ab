"""Optional post-hoc PDF shrinking through Ghostscript.

The optimizer either returns a strictly smaller PDF or declines with None;
it never raises, so callers can always fall back to the bytes they had.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from typing import List, Optional

DEFAULT_PDF_SETTINGS = "/screen"


class GhostscriptOptimizer:
    """Recompress a PDF with ``gs -sDEVICE=pdfwrite``.

    Doxygen:
    - @param executable: Name on PATH or path to the gs binary.
    - @param pdf_settings: -dPDFSETTINGS preset (/screen, /ebook, /printer, ...).
    - @param timeout: Seconds before the subprocess is abandoned; None waits forever.
    """

    def __init__(
        self,
        executable: str = "gs",
        pdf_settings: str = DEFAULT_PDF_SETTINGS,
        timeout: float | None = 120.0,
    ) -> None:
        self.executable = executable
        self.pdf_settings = pdf_settings
        self.timeout = timeout

    def available(self) -> bool:
        return shutil.which(self.executable) is not None

    def command(self, in_path: str, out_path: str) -> List[str]:
        return [
            self.executable,
            "-sDEVICE=pdfwrite",
            "-dCompatibilityLevel=1.4",
            f"-dPDFSETTINGS={self.pdf_settings}",
            "-dNOPAUSE",
            "-dQUIET",
            "-dBATCH",
            f"-sOutputFile={out_path}",
            in_path,
        ]

    def __call__(self, data: bytes) -> Optional[bytes]:
        if not data or not self.available():
            return None
        with tempfile.TemporaryDirectory(prefix="docnorm-gs-") as tmp:
            in_path = os.path.join(tmp, "in.pdf")
            out_path = os.path.join(tmp, "out.pdf")
            try:
                with open(in_path, "wb") as f:
                    f.write(data)
                proc = subprocess.run(
                    self.command(in_path, out_path),
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    timeout=self.timeout,
                    check=False,
                )
                if proc.returncode != 0 or not os.path.isfile(out_path):
                    return None
                with open(out_path, "rb") as f:
                    optimized = f.read()
            except (OSError, subprocess.SubprocessError):
                return None

        if not optimized or len(optimized) >= len(data):
            return None
        return optimized
