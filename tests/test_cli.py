import sys

import pytest
from PIL import Image

import main


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["main.py", *argv])
    main._cli()


def test_normalize_file(tmp_path, monkeypatch, capsys):
    src = tmp_path / "scan.png"
    Image.new("RGB", (50, 40), (255, 255, 255)).save(src, "PNG")
    _run(monkeypatch, "--file", str(src))
    out_path = tmp_path / "scan.normalized.pdf"
    assert out_path.read_bytes().startswith(b"%PDF-1.4")
    assert "Output written" in capsys.readouterr().out


def test_optimize_image_webp(tmp_path, monkeypatch):
    src = tmp_path / "photo.jpg"
    Image.new("RGB", (400, 300)).save(src, "JPEG")
    _run(monkeypatch, "--image", str(src), "--max-width", "100", "--format", "webp")
    with Image.open(tmp_path / "photo.optimized.webp") as img:
        assert img.size == (100, 75)


def test_convert_dir(tmp_path, monkeypatch, capsys):
    Image.new("RGB", (8, 8)).save(tmp_path / "a.png", "PNG")
    _run(monkeypatch, "--convert-dir", str(tmp_path))
    assert (tmp_path / "a.webp").exists()
    assert "Converted: 1 file(s)" in capsys.readouterr().out


def test_error_exit_code(tmp_path, monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, "--convert-dir", str(tmp_path / "missing"))
    assert exc_info.value.code == 1
    assert "Error [E_INVALID_INPUT]" in capsys.readouterr().out


def test_no_mode(monkeypatch):
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch)
    assert exc_info.value.code == 2


def _image_pdf(tmp_path):
    src = tmp_path / "page.png"
    Image.new("RGB", (20, 20), (255, 255, 255)).save(src, "PNG")
    pdf = tmp_path / "page.pdf"
    pdf.write_bytes(main.normalize_file_to_pdf(str(src)))
    return pdf


def test_extract_text_to_file(tmp_path, monkeypatch):
    pdf = _image_pdf(tmp_path)
    out = tmp_path / "page.txt"
    _run(monkeypatch, "--extract-text", str(pdf), "--out", str(out))
    assert out.exists()


def test_extract_text_unwritable_output(tmp_path, monkeypatch, capsys):
    pdf = _image_pdf(tmp_path)
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, "--extract-text", str(pdf), "--out", str(tmp_path / "no" / "such" / "dir.txt"))
    assert exc_info.value.code == 1
    assert "Error [E_IO_FAILURE]" in capsys.readouterr().out
