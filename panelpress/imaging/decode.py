"""Decode compressed archive images into grayscale pixel grids."""
from __future__ import annotations

from io import BytesIO
from typing import Optional

import logging

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..errors import DecodeError

LOGGER = logging.getLogger(__name__)


def _is_wide_gray(mode: str) -> bool:
    return mode == "I" or mode.startswith("I;16")


def _scale_to_8bit(wide: np.ndarray) -> np.ndarray:
    # 16-bit samples: 0..65535 -> 0..255
    clipped = np.clip(wide.astype(np.int64), 0, 65535)
    return np.rint(clipped / 257.0).astype(np.uint8)


def decode(data: bytes, name: Optional[str] = None) -> np.ndarray:
    """Decode `data` and reduce it to an 8-bit grayscale array of shape (height, width).

    Raises:
        DecodeError: the bytes are empty, not a known raster format, or truncated.
    """
    if not data:
        raise DecodeError("empty image buffer", name)
    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            if _is_wide_gray(image.mode):
                pixels = _scale_to_8bit(np.array(image))
            else:
                pixels = np.array(image.convert("L"), dtype=np.uint8)
    except UnidentifiedImageError as exc:
        raise DecodeError("not a recognized image format", name) from exc
    except Image.DecompressionBombError as exc:
        raise DecodeError(f"image too large: {exc}", name) from exc
    except (OSError, ValueError, SyntaxError) as exc:
        raise DecodeError(f"corrupt image data: {exc}", name) from exc

    LOGGER.debug("Decoded %s: %sx%s", name or "<bytes>", pixels.shape[1], pixels.shape[0])
    return pixels
