from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from panelpress.services import run_auto_crop, run_encode, run_spread, run_tone


@pytest.fixture
def page_path(tmp_path: Path, make_page) -> Path:
    path = tmp_path / "page.png"
    Image.fromarray(make_page(200, 300, (20, 15, 30, 25))).save(path)
    return path


@pytest.fixture
def spread_path(tmp_path: Path, make_page) -> Path:
    path = tmp_path / "spread.png"
    Image.fromarray(make_page(400, 300, (20, 20, 20, 20))).save(path)
    return path


def test_tone_service(page_path: Path, tmp_path: Path):
    result = run_tone(
        {"image_path": str(page_path), "params": {"gamma": 1.0, "brightness": -20}, "output_dir": str(tmp_path / "out")}
    )
    assert result["step"] == "tone"
    assert result["applied"] is True
    output = np.array(Image.open(result["output_path"]))
    assert output.max() == 235


def test_auto_crop_service(page_path: Path):
    result = run_auto_crop({"image_path": str(page_path)})
    assert result["applied"] is True
    assert result["crop"] == {"left": 18, "top": 13, "width": 154, "height": 264}
    assert result["box"] == [18, 13, 172, 277]
    with Image.open(result["output_path"]) as cropped:
        assert cropped.size == (154, 264)


def test_spread_service_splits_landscape_page(spread_path: Path):
    result = run_spread(
        {
            "image_path": str(spread_path),
            "params": {"device": "custom", "width": 60, "height": 80, "split": "split"},
        }
    )
    assert len(result["output_paths"]) == 2
    assert result["dimensions"] == [[53, 80], [53, 80]]
    assert all(Path(path).exists() for path in result["output_paths"])


@pytest.mark.parametrize("image_format,signature", [("jpeg", b"\xff\xd8"), ("png", b"\x89PNG"), ("webp", b"RIFF")])
def test_encode_service(page_path: Path, image_format, signature):
    result = run_encode({"image_path": str(page_path), "params": {"image_format": image_format, "quality": 60}})
    output_path = Path(result["output_path"])
    assert output_path.read_bytes().startswith(signature)
    assert result["size_bytes"] == output_path.stat().st_size


def test_payload_requires_image_path():
    with pytest.raises(ValueError):
        run_tone({"params": {}})
