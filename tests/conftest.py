"""Shared fixtures: synthetic comic pages built with numpy."""
from __future__ import annotations

from io import BytesIO
from typing import Callable, Tuple

import numpy as np
import pytest
from PIL import Image


def _make_page(
    width: int,
    height: int,
    margins: Tuple[int, int, int, int] = (0, 0, 0, 0),
    ink: int = 0,
    paper: int = 255,
) -> np.ndarray:
    """White page with a solid block of ink inset by (left, top, right, bottom) margins."""
    left, top, right, bottom = margins
    page = np.full((height, width), paper, dtype=np.uint8)
    page[top : height - bottom, left : width - right] = ink
    return page


def _png_bytes(pixels: np.ndarray) -> bytes:
    buffer = BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def make_page() -> Callable[..., np.ndarray]:
    return _make_page


@pytest.fixture
def png_bytes() -> Callable[[np.ndarray], bytes]:
    return _png_bytes


@pytest.fixture
def comic_page() -> np.ndarray:
    """Portrait page with a horizontal gradient panel and uneven blank margins."""
    page = np.full((400, 300), 250, dtype=np.uint8)
    gradient = np.linspace(10, 200, 240).astype(np.uint8)
    page[30:370, 25:265] = gradient[np.newaxis, :]
    return page
