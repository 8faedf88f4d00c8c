"""Configuration helpers for the comic page converter."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import logging

import yaml

from .devices import DEFAULT_DEVICE, PRESETS, resolve_device
from .errors import ConfigError

LOGGER = logging.getLogger(__name__)

BRIGHTNESS_RANGE = (-100, 100)
GAMMA_RANGE = (0.1, 3.0)
QUALITY_RANGE = (0, 100)


class SplitStrategy(Enum):
    NONE = "none"
    SPLIT = "split"
    ROTATE = "rotate"
    ROTATE_AND_SPLIT = "rotate_and_split"

    @classmethod
    def parse(cls, value: "str | SplitStrategy") -> "SplitStrategy":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_")
        if normalized == "rotate_split":
            normalized = cls.ROTATE_AND_SPLIT.value
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ConfigError(f"Unknown split strategy: {value}") from exc


class MarginColor(Enum):
    NONE = "none"
    BLACK = "black"
    WHITE = "white"

    @property
    def value_u8(self) -> Optional[int]:
        return {MarginColor.NONE: None, MarginColor.BLACK: 0, MarginColor.WHITE: 255}[self]

    @classmethod
    def parse(cls, value: "str | MarginColor | None") -> "MarginColor":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ConfigError(f"Unknown margin color: {value}") from exc


class PngCompression(Enum):
    FAST = "fast"
    DEFAULT = "default"
    BEST = "best"

    @property
    def zlib_level(self) -> int:
        return {PngCompression.FAST: 1, PngCompression.DEFAULT: 6, PngCompression.BEST: 9}[self]

    def cycle(self) -> "PngCompression":
        order = list(PngCompression)
        return order[(order.index(self) + 1) % len(order)]

    @classmethod
    def parse(cls, value: "str | PngCompression") -> "PngCompression":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ConfigError(f"Unknown PNG compression: {value}") from exc


class ImageKind(Enum):
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"

    @classmethod
    def parse(cls, value: "str | ImageKind") -> "ImageKind":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        if normalized == "jpg":
            normalized = cls.JPEG.value
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ConfigError(f"Unknown image format: {value}") from exc


_EXTENSIONS = {ImageKind.JPEG: "jpg", ImageKind.PNG: "png", ImageKind.WEBP: "webp"}


@dataclass(frozen=True, slots=True)
class ImageFormat:
    """Target page encoding. `quality` applies to JPEG/WebP, `compression` to PNG."""

    kind: ImageKind = ImageKind.JPEG
    quality: int = 85
    compression: PngCompression = PngCompression.DEFAULT

    @classmethod
    def jpeg(cls, quality: int = 85) -> "ImageFormat":
        return cls(ImageKind.JPEG, quality=quality)

    @classmethod
    def png(cls, compression: PngCompression = PngCompression.DEFAULT) -> "ImageFormat":
        return cls(ImageKind.PNG, compression=compression)

    @classmethod
    def webp(cls, quality: int = 85) -> "ImageFormat":
        return cls(ImageKind.WEBP, quality=quality)

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self.kind]

    def cycle(self) -> "ImageFormat":
        if self.kind is ImageKind.JPEG:
            return ImageFormat.png(PngCompression.DEFAULT)
        if self.kind is ImageKind.PNG:
            return ImageFormat.webp(85)
        return ImageFormat.jpeg(85)

    def adjust_quality(self, increase: bool, fine: bool = False) -> "ImageFormat":
        if self.kind is ImageKind.PNG:
            order = list(PngCompression)
            index = order.index(self.compression) + (1 if increase else -1)
            index = max(0, min(len(order) - 1, index))
            return replace(self, compression=order[index])
        step = 1 if fine else 5
        quality = self.quality + step if increase else self.quality - step
        return replace(self, quality=_clamp(quality, *QUALITY_RANGE))


@dataclass(frozen=True, slots=True)
class ComicConfig:
    device_width: int = PRESETS[DEFAULT_DEVICE].width
    device_height: int = PRESETS[DEFAULT_DEVICE].height
    brightness: int = -10
    gamma: float = 1.8
    auto_crop: bool = True
    margin_color: MarginColor = MarginColor.NONE
    split: SplitStrategy = SplitStrategy.ROTATE_AND_SPLIT
    right_to_left: bool = True
    image_format: ImageFormat = field(default_factory=ImageFormat)

    @property
    def device_dimensions(self) -> Tuple[int, int]:
        return (self.device_width, self.device_height)

    def clamped(self) -> "ComicConfig":
        """Copy with every numeric field forced into its valid range."""
        image_format = replace(
            self.image_format, quality=_clamp(int(self.image_format.quality), *QUALITY_RANGE)
        )
        return replace(
            self,
            device_width=max(1, int(self.device_width)),
            device_height=max(1, int(self.device_height)),
            brightness=_clamp(int(self.brightness), *BRIGHTNESS_RANGE),
            gamma=_clamp(float(self.gamma), *GAMMA_RANGE),
            image_format=image_format,
        )


def _clamp(value, low, high):
    return max(low, min(high, value))


def validate_config(config: ComicConfig) -> ComicConfig:
    """Reject out-of-range values before a batch starts."""
    if config.device_width <= 0 or config.device_height <= 0:
        raise ConfigError(
            f"Device dimensions must be positive, got {config.device_width}x{config.device_height}"
        )
    low, high = BRIGHTNESS_RANGE
    if not low <= config.brightness <= high:
        raise ConfigError(f"Brightness must be between {low} and {high}, got {config.brightness}")
    low, high = GAMMA_RANGE
    if not low <= config.gamma <= high:
        raise ConfigError(f"Gamma must be between {low} and {high}, got {config.gamma}")
    low, high = QUALITY_RANGE
    if not low <= config.image_format.quality <= high:
        raise ConfigError(
            f"Quality must be between {low} and {high}, got {config.image_format.quality}"
        )
    return config


def config_from_mapping(raw: Mapping[str, Any]) -> ComicConfig:
    """Build and validate a ComicConfig from a plain mapping (parsed YAML, CLI overrides)."""
    defaults = ComicConfig()
    device = resolve_device(
        str(raw.get("device", DEFAULT_DEVICE)),
        width=raw.get("width"),
        height=raw.get("height"),
    )
    kind = ImageKind.parse(raw.get("image_format", defaults.image_format.kind))
    image_format = ImageFormat(
        kind=kind,
        quality=_as_int(raw.get("quality", defaults.image_format.quality), "quality"),
        compression=PngCompression.parse(raw.get("png_compression", defaults.image_format.compression)),
    )
    config = ComicConfig(
        device_width=device.width,
        device_height=device.height,
        brightness=_as_int(raw.get("brightness", defaults.brightness), "brightness"),
        gamma=_as_float(raw.get("gamma", defaults.gamma), "gamma"),
        auto_crop=_as_bool(raw.get("auto_crop", defaults.auto_crop), "auto_crop"),
        margin_color=MarginColor.parse(raw.get("margin_color", defaults.margin_color)),
        split=SplitStrategy.parse(raw.get("split", defaults.split)),
        right_to_left=_as_bool(raw.get("right_to_left", defaults.right_to_left), "right_to_left"),
        image_format=image_format,
    )
    return validate_config(config)


def load_config(path: Path) -> ComicConfig:
    """Load and validate configuration from the YAML file."""
    raw_config = load_raw_config(path)
    config = config_from_mapping(raw_config)
    LOGGER.debug("Loaded configuration: %s", config)
    return config


def load_raw_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    LOGGER.debug("Using PyYAML to parse %s", path)
    raw = yaml.safe_load(text) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Top level of {path} must be a mapping")
    return raw


def _as_int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{key}' must be an integer, got {value!r}") from exc


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"'{key}' must be true or false, got {value!r}")


def _as_float(value: Any, key: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{key}' must be a number, got {value!r}") from exc
