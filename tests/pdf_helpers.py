"""Tiny strict readers for the PDFs produced in tests (no repair, no fallback)."""

import re


def read_xref(pdf):
    """Return (startxref, entries, trailer) where entries are (offset, gen, flag) rows."""
    tail = pdf[-64:]
    m = re.search(rb"startxref\n(\d+)\n%%EOF\n?$", tail)
    assert m, "missing startxref/%%EOF footer"
    start = int(m.group(1))
    assert pdf[start:start + 5] == b"xref\n"
    header_end = pdf.index(b"\n", start + 5)
    first, count = (int(x) for x in pdf[start + 5:header_end].split())
    assert first == 0
    rows = []
    pos = header_end + 1
    for _ in range(count):
        row = pdf[pos:pos + 20]
        assert len(row) == 20 and row.endswith(b" \n"), row
        offset, gen, flag = row[:10], row[11:16], row[17:18]
        rows.append((int(offset), gen.decode(), flag.decode()))
        pos += 20
    trailer = pdf[pos:pdf.index(b"startxref", pos)]
    return start, rows, trailer


def object_body(pdf, obj_id):
    _, rows, _ = read_xref(pdf)
    offset = rows[obj_id][0]
    end = pdf.index(b"endobj", offset)
    return pdf[offset:end]


def stream_data(pdf, obj_id):
    _, rows, _ = read_xref(pdf)
    offset = rows[obj_id][0]
    start = pdf.index(b"stream\n", offset) + len(b"stream\n")
    length = int(re.search(rb"/Length (\d+)", pdf[offset:start]).group(1))
    assert pdf[start + length:start + length + 10] == b"\nendstream"
    return pdf[start:start + length]
