"""E-reader device presets and their screen resolutions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import logging

from .errors import ConfigError

LOGGER = logging.getLogger(__name__)

CUSTOM_DEVICE = "custom"


@dataclass(frozen=True, slots=True)
class Device:
    slug: str
    name: str
    width: int
    height: int

    @property
    def dimensions(self) -> Tuple[int, int]:
        return (self.width, self.height)


PRESETS: Dict[str, Device] = {
    device.slug: device
    for device in (
        Device("kindle-pw-11", "Kindle PW 11", 1236, 1648),
        Device("kindle-pw-12", "Kindle PW 12", 1264, 1680),
        Device("kindle-oasis", "Kindle Oasis", 1264, 1680),
        Device("kindle-scribe", "Kindle Scribe", 1860, 2480),
        Device("kindle-basic", "Kindle Basic", 600, 800),
        Device("kindle-11", "Kindle 11", 1072, 1448),
        Device("kobo-clara-hd", "Kobo Clara HD", 1072, 1448),
        Device("kobo-clara-2e", "Kobo Clara 2E", 1072, 1448),
        Device("kobo-libra-2", "Kobo Libra 2", 1264, 1680),
        Device("kobo-sage", "Kobo Sage", 1440, 1920),
        Device("kobo-elipsa", "Kobo Elipsa", 1404, 1872),
        Device("remarkable-2", "reMarkable 2", 1404, 1872),
        Device("ipad-mini", "iPad Mini", 1488, 2266),
        Device("ipad-109", "iPad 10.9", 1640, 2360),
        Device("ipad-pro-11", "iPad Pro 11", 1668, 2388),
        Device("onyx-boox-nova", "Onyx Boox Nova", 1200, 1600),
        Device("onyx-boox-note", "Onyx Boox Note", 1404, 1872),
        Device("pocketbook-era", "PocketBook Era", 1200, 1600),
    )
}

DEFAULT_DEVICE = "kindle-pw-11"


def normalize_slug(name: str) -> str:
    return name.strip().lower().replace(" ", "-").replace("_", "-")


def resolve_device(name: str, width: Optional[int] = None, height: Optional[int] = None) -> Device:
    """Return the preset called `name`, or a custom device when name is 'custom'.

    Raises:
        ConfigError: unknown preset, or custom without positive width/height.
    """
    slug = normalize_slug(name)
    if slug == CUSTOM_DEVICE:
        if width is None or height is None:
            raise ConfigError("Custom device requires both width and height")
        if int(width) <= 0 or int(height) <= 0:
            raise ConfigError(f"Custom device dimensions must be positive, got {width}x{height}")
        return Device(CUSTOM_DEVICE, "Custom", int(width), int(height))

    device = PRESETS.get(slug)
    if device is None:
        raise ConfigError(f"Invalid device preset: {name}")
    LOGGER.debug("Resolved device %s -> %sx%s", name, device.width, device.height)
    return device
