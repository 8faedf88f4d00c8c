"""Tone correction on grayscale pages: gamma, autocontrast, brightness."""
from __future__ import annotations

from typing import Dict

import logging
import threading

import numpy as np

from ..config import BRIGHTNESS_RANGE, GAMMA_RANGE

LOGGER = logging.getLogger(__name__)

# Gamma values this close to 1.0 are treated as neutral
GAMMA_EPSILON = 0.01

_GAMMA_LUTS: Dict[float, np.ndarray] = {}
_GAMMA_LOCK = threading.Lock()


def gamma_lut(gamma: float) -> np.ndarray:
    """Return the shared, read-only 256-entry lookup table for `gamma`.

    Each table is computed once per process (keyed by gamma rounded to two
    decimals) and never modified afterwards.
    """
    key = round(float(gamma), 2)
    lut = _GAMMA_LUTS.get(key)
    if lut is not None:
        return lut
    with _GAMMA_LOCK:
        lut = _GAMMA_LUTS.get(key)
        if lut is None:
            normalized = np.arange(256, dtype=np.float64) / 255.0
            corrected = np.clip(np.power(normalized, key), 0.0, 1.0)
            lut = np.rint(corrected * 255.0).astype(np.uint8)
            lut.flags.writeable = False
            _GAMMA_LUTS[key] = lut
            LOGGER.debug("Computed gamma LUT for %.2f", key)
    return lut


def apply_gamma(pixels: np.ndarray, gamma: float) -> np.ndarray:
    gamma = max(GAMMA_RANGE[0], min(GAMMA_RANGE[1], float(gamma)))
    if abs(gamma - 1.0) <= GAMMA_EPSILON:
        return pixels
    return gamma_lut(gamma)[pixels]


def autocontrast(pixels: np.ndarray) -> np.ndarray:
    """Stretch the occupied intensity range [min, max] to [0, 255]."""
    if pixels.size == 0:
        return pixels
    histogram = np.bincount(pixels.ravel(), minlength=256)
    occupied = np.flatnonzero(histogram)
    low, high = int(occupied[0]), int(occupied[-1])
    if high <= low:
        return pixels
    levels = (np.arange(256, dtype=np.float64) - low) * (255.0 / (high - low))
    # truncating conversion, same as a plain float -> u8 cast
    lut = np.clip(levels, 0.0, 255.0).astype(np.uint8)
    return lut[pixels]


def apply_brightness(pixels: np.ndarray, brightness: int) -> np.ndarray:
    brightness = max(BRIGHTNESS_RANGE[0], min(BRIGHTNESS_RANGE[1], int(brightness)))
    if brightness == 0:
        return pixels
    shifted = pixels.astype(np.int16) + brightness
    return np.clip(shifted, 0, 255).astype(np.uint8)


def transform(pixels: np.ndarray, brightness: int, gamma: float) -> np.ndarray:
    """Gamma, then autocontrast on the corrected histogram, then the brightness override."""
    pixels = apply_gamma(pixels, gamma)
    pixels = autocontrast(pixels)
    return apply_brightness(pixels, brightness)
