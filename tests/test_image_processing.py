import base64
import io

import numpy as np
import pytest
from PIL import Image

from docnorm.docs.model import OutputFormat
from docnorm.errors import DecodeFailed, InvalidInput
from docnorm.image import processing
from docnorm.image.orientation import Orientation
from docnorm.image.processing import (
    ImageOptimizeOptions,
    clamp_quality,
    decode_image,
    encode_image,
    image_to_webp,
    image_to_webp_from_base64,
    optimize_image,
    optimize_image_from_file,
    resize_image,
    target_size,
)


def _jpeg(w, h, orientation=None):
    img = Image.new("RGB", (w, h), (180, 90, 40))
    buf = io.BytesIO()
    kwargs = {}
    if orientation is not None:
        exif = Image.Exif()
        exif[0x0112] = orientation
        kwargs["exif"] = exif
    img.save(buf, "JPEG", **kwargs)
    return buf.getvalue()


def _size_of(data):
    with Image.open(io.BytesIO(data)) as img:
        return img.size


@pytest.mark.parametrize(
    "orig, max_side, expected",
    [
        ((4000, 3000), 800, (800, 600)),
        ((3000, 4000), 2000, (1500, 2000)),
        ((1000, 333), 100, (100, 33)),
        ((100, 50), 200, (100, 50)),
        ((200, 200), 200, (200, 200)),
        ((10000, 1), 100, (100, 1)),
        ((1, 10000), 100, (1, 100)),
        ((1000, 3), 200, (200, 1)),
    ],
)
def test_target_size(orig, max_side, expected):
    assert target_size(orig[0], orig[1], max_side) == expected


def test_target_size_keeps_aspect_and_bound():
    for w, h in [(4032, 3024), (3024, 4032), (1920, 1080), (517, 2311), (7000, 13)]:
        for max_side in (64, 500, 1000):
            tw, th = target_size(w, h, max_side)
            assert max(tw, th) == max_side
            assert tw >= 1 and th >= 1
            # short side is off by at most half a pixel, unless floored at 1
            if w >= h:
                assert th == 1 or abs(th - h * max_side / w) <= 0.5
            else:
                assert tw == 1 or abs(tw - w * max_side / h) <= 0.5


def test_target_size_rejects_non_positive_bound():
    with pytest.raises(InvalidInput):
        target_size(10, 10, 0)


@pytest.mark.parametrize("value, expected", [(0, 1), (101, 100), (255, 100), (-7, 1), (1, 1), (80, 80), (100, 100)])
def test_clamp_quality(value, expected):
    assert clamp_quality(value) == expected


def test_options_clamp_and_validate():
    assert ImageOptimizeOptions(quality=255).quality == 100
    assert ImageOptimizeOptions(quality=0).quality == 1
    with pytest.raises(InvalidInput):
        ImageOptimizeOptions(quality="high")
    with pytest.raises(InvalidInput):
        ImageOptimizeOptions(max_width=-1)
    with pytest.raises(InvalidInput):
        ImageOptimizeOptions(max_height=True)


def test_output_format_parse():
    assert OutputFormat.parse("jpg") == OutputFormat.JPEG
    assert OutputFormat.parse("JPEG") == OutputFormat.JPEG
    assert OutputFormat.parse("webp") == OutputFormat.WEBP
    assert OutputFormat.parse("png") == OutputFormat.PNG
    # auto and unknown names share the fallback
    assert OutputFormat.parse("auto") == OutputFormat.parse("tiff") == OutputFormat.parse(None)


def test_decode_image_applies_exif_rotation():
    pixels = decode_image(_jpeg(40, 20, orientation=6))
    assert pixels.shape == (40, 20, 3)
    assert pixels.dtype == np.uint8


def test_decode_image_keeps_alpha():
    img = Image.new("RGBA", (6, 4), (0, 0, 255, 128))
    buf = io.BytesIO()
    img.save(buf, "PNG")
    assert decode_image(buf.getvalue()).shape == (4, 6, 4)


def test_decode_image_tolerates_wrong_extension_semantics():
    # PNG bytes decode regardless of any label the caller had
    img = Image.new("L", (5, 3), 128)
    buf = io.BytesIO()
    img.save(buf, "PNG")
    assert decode_image(buf.getvalue()).shape == (3, 5, 3)


def _png16(samples):
    buf = io.BytesIO()
    Image.fromarray(np.asarray(samples, dtype=np.uint16)).save(buf, "PNG")
    return buf.getvalue()


def test_decode_image_scales_16bit_grey():
    pixels = decode_image(_png16(np.full((4, 4), 32768)))
    assert pixels.shape == (4, 4, 3)
    assert pixels.dtype == np.uint8
    assert np.all(pixels == 128)


def test_decode_image_16bit_keeps_full_range():
    pixels = decode_image(_png16([[0, 255, 65535]]))
    assert pixels[0, :, 0].tolist() == [0, 0, 255]


def test_decode_image_metadata_beats_decoder(monkeypatch):
    monkeypatch.setattr(processing, "orientation_from_decoder", lambda image: Orientation.ROTATE_180)
    pixels = decode_image(_jpeg(40, 20, orientation=6))
    # metadata says rotate 90, so axes swap
    assert pixels.shape == (40, 20, 3)


def test_decode_image_invalid_raises():
    with pytest.raises(DecodeFailed) as exc_info:
        decode_image(b"Not an image")
    assert "Failed to process image" in str(exc_info.value)


def test_resize_image_width_bound():
    pixels = np.zeros((300, 400, 3), dtype=np.uint8)
    out = resize_image(pixels, max_width=80)
    assert out.shape == (60, 80, 3)


def test_resize_image_height_bound_on_portrait():
    pixels = np.zeros((1000, 500, 3), dtype=np.uint8)
    out = resize_image(pixels, max_height=200)
    assert out.shape == (200, 100, 3)


def test_resize_image_both_bounds_use_smaller():
    pixels = np.zeros((500, 1000, 3), dtype=np.uint8)
    out = resize_image(pixels, max_width=800, max_height=400)
    assert out.shape == (200, 400, 3)


def test_resize_image_never_upscales():
    pixels = np.zeros((50, 100, 3), dtype=np.uint8)
    assert resize_image(pixels, max_width=800, max_height=800) is pixels
    assert resize_image(pixels) is pixels


def test_encode_image_formats():
    pixels = np.full((10, 20, 3), 200, dtype=np.uint8)
    jpeg = encode_image(pixels, OutputFormat.JPEG, 70)
    assert jpeg.data[:2] == b"\xff\xd8"
    assert (jpeg.width, jpeg.height) == (20, 10)
    png = encode_image(pixels, OutputFormat.PNG)
    assert png.data[:8] == b"\x89PNG\r\n\x1a\n"
    webp = encode_image(pixels, OutputFormat.WEBP, 50)
    assert webp.data[:4] == b"RIFF" and webp.data[8:12] == b"WEBP"


def test_encode_jpeg_drops_alpha():
    pixels = np.zeros((4, 4, 4), dtype=np.uint8)
    out = encode_image(pixels, OutputFormat.JPEG, 90)
    with Image.open(io.BytesIO(out.data)) as img:
        assert img.mode == "RGB"


def test_optimize_image_end_to_end_webp():
    data = _jpeg(4000, 3000, orientation=1)
    out = optimize_image(data, ImageOptimizeOptions(max_width=800, max_height=0, quality=70, format="webp"))
    assert out
    assert out[:4] == b"RIFF" and out[8:12] == b"WEBP"
    assert _size_of(out) == (800, 600)


def test_optimize_image_defaults_to_png_fallback():
    out = optimize_image(_jpeg(30, 20))
    assert out[:8] == b"\x89PNG\r\n\x1a\n"
    assert _size_of(out) == (30, 20)


def test_optimize_image_jpg_alias():
    out = optimize_image(_jpeg(300, 200), ImageOptimizeOptions(max_height=100, format="jpg"))
    assert out[:2] == b"\xff\xd8"
    assert _size_of(out) == (100, 67)


def test_optimize_image_out_of_range_quality_is_not_an_error():
    for q in (0, 101, 255):
        assert optimize_image(_jpeg(20, 20), ImageOptimizeOptions(quality=q, format="jpeg"))


def test_optimize_image_invalid_raises():
    with pytest.raises(DecodeFailed):
        optimize_image(b"Not an image")


def test_optimize_image_from_file(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(_jpeg(100, 50))
    out = optimize_image_from_file(str(path), ImageOptimizeOptions(max_width=10, format="png"))
    assert _size_of(out) == (10, 5)


def test_optimize_image_from_missing_file():
    with pytest.raises(InvalidInput):
        optimize_image_from_file("/definitely/not/here.jpg")


def test_image_to_webp_rotates():
    out = image_to_webp(_jpeg(40, 20, orientation=8))
    assert out[:4] == b"RIFF"
    assert _size_of(out) == (20, 40)


def test_image_to_webp_from_base64():
    text = base64.b64encode(_jpeg(12, 8)).decode("ascii")
    assert _size_of(image_to_webp_from_base64(text)) == (12, 8)
    with pytest.raises(InvalidInput):
        image_to_webp_from_base64("Invalid!@#Base64")
