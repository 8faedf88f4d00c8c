"""Aspect-preserving fit of a page into the device resolution."""
from __future__ import annotations

from typing import Optional, Tuple

import logging

import numpy as np
from PIL import Image

LOGGER = logging.getLogger(__name__)


def choose_filter(ratio: float) -> Image.Resampling:
    """Lanczos when shrinking keeps detail; Catmull-Rom (bicubic, a=-0.5) when enlarging avoids ringing."""
    if ratio < 1.0:
        return Image.Resampling.LANCZOS
    return Image.Resampling.BICUBIC


def fit_dimensions(size: Tuple[int, int], target: Tuple[int, int]) -> Tuple[Tuple[int, int], float]:
    """Scaled (width, height) that fits inside `target`, and the scale ratio used.

    The constrained axis lands exactly on the target; the other axis is
    truncated. Integer arithmetic keeps float error from losing a pixel.
    """
    width, height = size
    target_width, target_height = target
    if target_width * height <= target_height * width:
        ratio = target_width / width
        new_size = (target_width, height * target_width // width)
    else:
        ratio = target_height / height
        new_size = (width * target_height // height, target_height)
    return (max(1, new_size[0]), max(1, new_size[1])), ratio


def resize_image(
    pixels: np.ndarray,
    target_dims: Tuple[int, int],
    margin_color: Optional[int] = None,
) -> np.ndarray:
    height, width = pixels.shape
    target_width, target_height = target_dims
    (new_width, new_height), ratio = fit_dimensions((width, height), target_dims)
    resample = choose_filter(ratio)

    source = Image.fromarray(np.ascontiguousarray(pixels))
    if (new_width, new_height) == (width, height):
        resized = source
    else:
        resized = source.resize((new_width, new_height), resample)
    LOGGER.debug(
        "Resize %sx%s -> %sx%s (ratio=%.3f, filter=%s)",
        width,
        height,
        new_width,
        new_height,
        ratio,
        resample.name,
    )

    if (new_width, new_height) == (target_width, target_height) or margin_color is None:
        return np.array(resized, dtype=np.uint8)

    canvas = Image.new("L", (target_width, target_height), color=int(margin_color))
    offset = ((target_width - new_width) // 2, (target_height - new_height) // 2)
    canvas.paste(resized, offset)
    return np.array(canvas, dtype=np.uint8)
