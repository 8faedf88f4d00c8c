"""Content-aware margin detection for scanned comic pages.

A pixel counts as content only when it is darker than `WHITE_THRESHOLD`
and at least `REQUIRED_NEIGHBORS` other dark pixels lie within
`NOISE_DISTANCE` (Chebyshev) of it. Isolated specks and JPEG ringing
near the page edge therefore do not stop the margin scan.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import logging

import numpy as np

LOGGER = logging.getLogger(__name__)

WHITE_THRESHOLD = 230
NOISE_DISTANCE = 4
REQUIRED_NEIGHBORS = 3
MIN_MARGIN_WIDTH = 10
SAFETY_MARGIN = 2


@dataclass(frozen=True, slots=True)
class CropRect:
    left: int
    top: int
    width: int
    height: int

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """Pillow-style (left, upper, right, lower) box."""
        return (self.left, self.top, self.left + self.width, self.top + self.height)

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        return pixels[self.top : self.top + self.height, self.left : self.left + self.width]


def is_not_noise(pixels: np.ndarray, x: int, y: int) -> bool:
    """True when enough dark neighbours surround (x, y) for it to be real content."""
    height, width = pixels.shape
    dark_neighbors = 0
    for dy in range(-NOISE_DISTANCE, NOISE_DISTANCE + 1):
        ny = y + dy
        if ny < 0 or ny >= height:
            continue
        for dx in range(-NOISE_DISTANCE, NOISE_DISTANCE + 1):
            nx = x + dx
            if (dx == 0 and dy == 0) or nx < 0 or nx >= width:
                continue
            if pixels[ny, nx] < WHITE_THRESHOLD:
                dark_neighbors += 1
                if dark_neighbors >= REQUIRED_NEIGHBORS:
                    return True
    return False


def content_mask(pixels: np.ndarray) -> np.ndarray:
    """Boolean mask of pixels that are dark and pass the noise test.

    Same result as calling `is_not_noise` on every dark pixel, computed with
    a summed-area table over the dark mask.
    """
    dark = pixels < WHITE_THRESHOLD
    size = 2 * NOISE_DISTANCE + 1
    padded = np.pad(dark.astype(np.int32), NOISE_DISTANCE)
    integral = np.zeros((padded.shape[0] + 1, padded.shape[1] + 1), dtype=np.int32)
    integral[1:, 1:] = padded.cumsum(axis=0).cumsum(axis=1)
    window = (
        integral[size:, size:]
        - integral[:-size, size:]
        - integral[size:, :-size]
        + integral[:-size, :-size]
    )
    neighbors = window - dark
    return dark & (neighbors >= REQUIRED_NEIGHBORS)


def find_margins(pixels: np.ndarray) -> Optional[Tuple[int, int, int, int]]:
    """First content column/row seen from each edge as (left, top, right, bottom), inclusive."""
    if pixels.size == 0:
        return None
    mask = content_mask(pixels)
    columns = mask.any(axis=0)
    rows = mask.any(axis=1)
    if not columns.any():
        return None
    height, width = pixels.shape
    left = int(np.argmax(columns))
    right = width - 1 - int(np.argmax(columns[::-1]))
    top = int(np.argmax(rows))
    bottom = height - 1 - int(np.argmax(rows[::-1]))
    return left, top, right, bottom


def auto_crop(pixels: np.ndarray) -> Optional[CropRect]:
    """Crop rectangle that removes blank margins, or None if no safe crop exists."""
    margins = find_margins(pixels)
    if margins is None:
        LOGGER.debug("Auto-crop: no content found")
        return None
    left, top, right, bottom = margins
    if left >= right or top >= bottom:
        LOGGER.debug("Auto-crop: no valid interior (margins=%s)", margins)
        return None

    height, width = pixels.shape
    left = max(left - SAFETY_MARGIN, 0)
    top = max(top - SAFETY_MARGIN, 0)
    right = min(right + SAFETY_MARGIN, width - 1)
    bottom = min(bottom + SAFETY_MARGIN, height - 1)

    crop_width = right - left + 1
    crop_height = bottom - top + 1
    crop_horizontal = (
        (left >= MIN_MARGIN_WIDTH or width - right - 1 >= MIN_MARGIN_WIDTH)
        and 0 < crop_width < width
    )
    crop_vertical = (
        (top >= MIN_MARGIN_WIDTH or height - bottom - 1 >= MIN_MARGIN_WIDTH)
        and 0 < crop_height < height
    )
    if not (crop_horizontal or crop_vertical):
        return None

    if not crop_horizontal:
        left, crop_width = 0, width
    if not crop_vertical:
        top, crop_height = 0, height
    rect = CropRect(left=left, top=top, width=crop_width, height=crop_height)
    LOGGER.debug("Auto-crop %sx%s -> %s", width, height, rect)
    return rect
