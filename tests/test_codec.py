from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from panelpress.config import ImageFormat, PngCompression
from panelpress.errors import DecodeError, EncodeError
from panelpress.imaging.decode import decode
from panelpress.imaging.encode import encode, encode_page, page_file_name
from panelpress.imaging.models import ArchiveEntry


@pytest.fixture
def gradient() -> np.ndarray:
    return np.tile(np.arange(0, 256, 4, dtype=np.uint8), (48, 1))


def test_decode_converts_color_to_grayscale():
    buffer = BytesIO()
    Image.new("RGB", (7, 5), color=(255, 0, 0)).save(buffer, format="PNG")
    pixels = decode(buffer.getvalue(), "red.png")
    assert pixels.shape == (5, 7)
    assert pixels.dtype == np.uint8


def test_decode_scales_16bit_grayscale():
    wide = np.tile(np.linspace(0, 65535, 256).astype(np.uint16), (4, 1))
    buffer = BytesIO()
    Image.fromarray(wide).save(buffer, format="PNG")

    pixels = decode(buffer.getvalue(), "deep.png")

    assert pixels.shape == (4, 256)
    assert pixels.dtype == np.uint8
    expected = np.rint(wide / 257.0)
    assert np.abs(pixels.astype(int) - expected).max() <= 1
    assert pixels[0, 0] == 0 and pixels[0, -1] == 255
    assert 126 <= pixels[0, 128] <= 132


@pytest.mark.parametrize("data", [b"", b"definitely not an image"])
def test_decode_rejects_unreadable_bytes(data):
    with pytest.raises(DecodeError) as excinfo:
        decode(data, "bad.png")
    assert str(excinfo.value).startswith("bad.png: ")
    assert excinfo.value.entry_name == "bad.png"


def test_decode_rejects_truncated_image(gradient, png_bytes):
    data = png_bytes(gradient)
    with pytest.raises(DecodeError):
        decode(data[: len(data) // 2], "truncated.png")


def test_encoded_formats_have_expected_signatures(gradient):
    assert encode(gradient, ImageFormat.jpeg(85)).startswith(b"\xff\xd8")
    assert encode(gradient, ImageFormat.png()).startswith(b"\x89PNG\r\n\x1a\n")
    webp = encode(gradient, ImageFormat.webp(80))
    assert webp[:4] == b"RIFF" and webp[8:12] == b"WEBP"


@pytest.mark.parametrize("compression", list(PngCompression))
def test_png_is_lossless_at_every_level(gradient, compression):
    data = encode(gradient, ImageFormat.png(compression))
    assert np.array_equal(decode(data), gradient)


def test_jpeg_quality_changes_size(gradient):
    noisy = np.random.default_rng(1).integers(0, 256, size=(64, 64), dtype=np.uint8)
    assert len(encode(noisy, ImageFormat.jpeg(20))) < len(encode(noisy, ImageFormat.jpeg(95)))


def test_encoder_failure_is_wrapped(gradient, monkeypatch):
    def broken_save(self, fp, format=None, **params):
        raise OSError("encoder unavailable")

    monkeypatch.setattr(Image.Image, "save", broken_save)
    with pytest.raises(EncodeError) as excinfo:
        encode(gradient, ImageFormat.jpeg(), "page.png")
    assert "encoder unavailable" in str(excinfo.value)


def test_page_file_names_include_folder_and_index():
    nested = ArchiveEntry("vol1/page01.png", b"")
    top_level = ArchiveEntry("cover.jpg", b"")
    assert page_file_name(nested, 2, ImageFormat.jpeg()) == "vol1_page01_002.jpg"
    assert page_file_name(top_level, 0, ImageFormat.webp()) == "_cover_000.webp"
    assert page_file_name(ArchiveEntry("a/b/c.tiff", b""), 1, ImageFormat.png()) == "a/b_c_001.png"


def test_encode_page_reports_width_and_height(gradient):
    page = encode_page(ArchiveEntry("ch1/p.png", b""), gradient, 0, ImageFormat.png())
    assert page.file_name == "ch1_p_000.png"
    assert page.dimensions == (64, 48)
    assert page.image_format == ImageFormat.png()
