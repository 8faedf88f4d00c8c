"""Double-page spread handling: split, rotate, or both."""
from __future__ import annotations

from concurrent.futures import Executor
from functools import partial
from typing import Callable, List, Optional, Tuple

import logging
import os

import numpy as np

from ..config import ComicConfig, SplitStrategy
from .resize import resize_image
from .split import Split

LOGGER = logging.getLogger(__name__)


def is_spread(pixels: np.ndarray) -> bool:
    height, width = pixels.shape
    return width > height


def split_double_page(pixels: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Left and right halves, each `width // 2` wide (an odd last column is dropped)."""
    half = pixels.shape[1] // 2
    return pixels[:, :half], pixels[:, half : 2 * half]


def rotate_90(pixels: np.ndarray, clockwise: bool) -> np.ndarray:
    """Rotate a quarter turn by remapping indices into a new (width, height) buffer.

    clockwise:         dst[x, height - 1 - y] = src[y, x]
    counter-clockwise: dst[width - 1 - x, y] = src[y, x]
    """
    height, width = pixels.shape
    rotated = np.empty((width, height), dtype=pixels.dtype)
    if clockwise:
        rotated[:, :] = pixels[::-1, :].T
    else:
        rotated[:, :] = pixels[:, ::-1].T
    return rotated


def _join(executor: Optional[Executor], calls: List[Callable[[], np.ndarray]]) -> List[np.ndarray]:
    """Run independent branches, concurrently when an executor and spare CPUs exist."""
    if executor is None or len(calls) < 2 or (os.cpu_count() or 1) < 2:
        return [call() for call in calls]
    futures = [executor.submit(call) for call in calls]
    return [future.result() for future in futures]


def _reading_order(left: np.ndarray, right: np.ndarray, right_to_left: bool) -> Tuple[np.ndarray, np.ndarray]:
    return (right, left) if right_to_left else (left, right)


def process_image_view(
    pixels: np.ndarray,
    config: ComicConfig,
    executor: Optional[Executor] = None,
) -> Split[np.ndarray]:
    """Apply the configured spread strategy and resize every resulting page."""
    fit = partial(
        resize_image,
        target_dims=config.device_dimensions,
        margin_color=config.margin_color.value_u8,
    )
    strategy = config.split
    spread = is_spread(pixels)

    if strategy is SplitStrategy.NONE or not spread:
        return Split.one(fit(pixels))

    LOGGER.debug("Spread %sx%s handled with %s", pixels.shape[1], pixels.shape[0], strategy.value)
    clockwise = config.right_to_left

    if strategy is SplitStrategy.ROTATE:
        return Split.one(fit(rotate_90(pixels, clockwise)))

    left, right = split_double_page(pixels)
    if strategy is SplitStrategy.SPLIT:
        left_page, right_page = _join(executor, [partial(fit, left), partial(fit, right)])
        return Split.two(*_reading_order(left_page, right_page, config.right_to_left))

    rotated_page, left_page, right_page = _join(
        executor,
        [
            lambda: fit(rotate_90(pixels, clockwise)),
            partial(fit, left),
            partial(fit, right),
        ],
    )
    first, second = _reading_order(left_page, right_page, config.right_to_left)
    return Split.three(rotated_page, first, second)
