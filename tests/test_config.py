from pathlib import Path

import pytest

from panelpress.config import (
    ComicConfig,
    ImageFormat,
    ImageKind,
    MarginColor,
    PngCompression,
    SplitStrategy,
    config_from_mapping,
    load_config,
    validate_config,
)
from panelpress.devices import PRESETS, resolve_device
from panelpress.errors import ConfigError


def test_defaults_match_kindle_paperwhite():
    config = ComicConfig()
    assert config.device_dimensions == (1236, 1648)
    assert config.split is SplitStrategy.ROTATE_AND_SPLIT
    assert config.right_to_left is True
    assert config.image_format == ImageFormat.jpeg(85)
    assert validate_config(config) is config


@pytest.mark.parametrize(
    "overrides",
    [
        {"brightness": 101},
        {"brightness": -101},
        {"gamma": 0.05},
        {"gamma": 3.5},
        {"device_width": 0},
        {"image_format": ImageFormat.jpeg(101)},
    ],
)
def test_validate_rejects_out_of_range(overrides):
    with pytest.raises(ConfigError):
        validate_config(ComicConfig(**overrides))


def test_clamped_forces_numeric_ranges():
    config = ComicConfig(brightness=-400, gamma=9.0, image_format=ImageFormat.webp(300)).clamped()
    assert config.brightness == -100
    assert config.gamma == 3.0
    assert config.image_format.quality == 100


def test_config_from_mapping_parses_names():
    config = config_from_mapping(
        {
            "device": "Kobo Sage",
            "split": "rotate-split",
            "margin_color": "white",
            "image_format": "png",
            "png_compression": "best",
            "right_to_left": False,
        }
    )
    assert config.device_dimensions == (1440, 1920)
    assert config.split is SplitStrategy.ROTATE_AND_SPLIT
    assert config.margin_color.value_u8 == 255
    assert config.image_format.kind is ImageKind.PNG
    assert config.image_format.compression is PngCompression.BEST
    assert config.right_to_left is False


def test_config_from_mapping_rejects_unknown_values():
    with pytest.raises(ConfigError):
        config_from_mapping({"split": "diagonal"})
    with pytest.raises(ConfigError):
        config_from_mapping({"gamma": "bright"})
    with pytest.raises(ConfigError):
        config_from_mapping({"device": "etch-a-sketch"})


@pytest.mark.parametrize("key", ["auto_crop", "right_to_left"])
@pytest.mark.parametrize("value", ["false", "no", 0, None])
def test_config_from_mapping_requires_real_booleans(key, value):
    with pytest.raises(ConfigError):
        config_from_mapping({key: value})


def test_quoted_yaml_boolean_is_rejected(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text('auto_crop: "false"\n', encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_load_config_from_yaml(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "device: custom\nwidth: 800\nheight: 1000\ngamma: 1.2\nbrightness: 5\n"
        "auto_crop: false\nmargin_color: black\nimage_format: webp\nquality: 70\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.device_dimensions == (800, 1000)
    assert config.gamma == pytest.approx(1.2)
    assert config.brightness == 5
    assert config.auto_crop is False
    assert config.margin_color is MarginColor.BLACK
    assert config.image_format == ImageFormat.webp(70)


def test_load_config_rejects_non_mapping(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_resolve_device_presets_and_custom():
    assert len(PRESETS) == 18
    assert resolve_device("kindle_scribe").dimensions == (1860, 2480)
    assert resolve_device("custom", 640, 960).dimensions == (640, 960)
    with pytest.raises(ConfigError):
        resolve_device("custom", 640, None)
    with pytest.raises(ConfigError):
        resolve_device("custom", -1, 960)


def test_image_format_cycle_and_quality_steps():
    assert ImageFormat.jpeg(70).cycle() == ImageFormat.png(PngCompression.DEFAULT)
    assert ImageFormat.png().cycle() == ImageFormat.webp(85)
    assert ImageFormat.webp(10).cycle() == ImageFormat.jpeg(85)

    assert ImageFormat.jpeg(98).adjust_quality(increase=True).quality == 100
    assert ImageFormat.jpeg(3).adjust_quality(increase=False).quality == 0
    assert ImageFormat.webp(50).adjust_quality(increase=True, fine=True).quality == 51
    assert ImageFormat.png(PngCompression.BEST).adjust_quality(increase=True).compression is PngCompression.BEST
    assert ImageFormat.png(PngCompression.DEFAULT).adjust_quality(increase=False).compression is PngCompression.FAST
    assert ImageFormat.jpeg().extension == "jpg"
