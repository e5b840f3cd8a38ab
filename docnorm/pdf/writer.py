"""Minimal hand-rolled PDF writer.

Objects are appended to one growing byte buffer. The offset of every object is
taken from ``len(buffer)`` right before its ``"<id> 0 obj"`` line is written,
so the cross-reference table always matches the bytes actually emitted.
"""

from __future__ import annotations

from typing import Dict

PDF_HEADER = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n"
XREF_FREE_HEAD = b"0000000000 65535 f \n"


class PdfWriter:
    """Staged writer: allocate ids, write objects in id order, then finish.

    Ids are handed out by ``allocate`` so objects can reference each other
    before they are written. Objects must be written in ascending id order.
    """

    def __init__(self, header: bytes = PDF_HEADER) -> None:
        self._buf = bytearray(header)
        self._offsets: Dict[int, int] = {}
        self._allocated = 0
        self._finished = False

    def tell(self) -> int:
        return len(self._buf)

    def allocate(self) -> int:
        self._allocated += 1
        return self._allocated

    def _begin(self, obj_id: int) -> None:
        if self._finished:
            raise ValueError("Writer already finished")
        if obj_id < 1 or obj_id > self._allocated:
            raise ValueError(f"Object id {obj_id} was not allocated")
        expected = len(self._offsets) + 1
        if obj_id != expected:
            raise ValueError(f"Objects must be written in id order: expected {expected}, got {obj_id}")
        self._offsets[obj_id] = self.tell()
        self._buf += f"{obj_id} 0 obj\n".encode("ascii")

    def write_object(self, obj_id: int, body: str) -> int:
        """Write a non-stream object whose body is PDF syntax (e.g. a dictionary)."""
        self._begin(obj_id)
        self._buf += body.encode("ascii")
        self._buf += b"\nendobj\n"
        return obj_id

    def write_stream(self, obj_id: int, entries: str, data: bytes) -> int:
        """Write a stream object; ``/Length`` is appended to ``entries`` from ``data``.

        Doxygen:
        - @param obj_id: Allocated id, next in order.
        - @param entries: Dictionary entries without the surrounding << >> and without /Length.
        - @param data: Stream payload, copied verbatim.
        - @return: The object id.
        """
        self._begin(obj_id)
        head = f"<< {entries} /Length {len(data)} >>" if entries else f"<< /Length {len(data)} >>"
        self._buf += head.encode("ascii")
        self._buf += b"\nstream\n"
        self._buf += data
        self._buf += b"\nendstream\nendobj\n"
        return obj_id

    def finish(self, root: int) -> bytes:
        """Append xref, trailer and EOF marker and return the whole document."""
        if self._finished:
            raise ValueError("Writer already finished")
        if len(self._offsets) != self._allocated:
            raise ValueError(
                f"{self._allocated - len(self._offsets)} allocated object(s) were never written"
            )
        if root not in self._offsets:
            raise ValueError(f"Root object {root} was not written")

        size = self._allocated + 1
        xref_offset = self.tell()
        self._buf += f"xref\n0 {size}\n".encode("ascii")
        self._buf += XREF_FREE_HEAD
        for obj_id in range(1, size):
            self._buf += f"{self._offsets[obj_id]:010d} 00000 n \n".encode("ascii")
        self._buf += (
            f"trailer\n<< /Size {size} /Root {root} 0 R >>\n"
            f"startxref\n{xref_offset}\n%%EOF\n"
        ).encode("ascii")
        self._finished = True
        return bytes(self._buf)
