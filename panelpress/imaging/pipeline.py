"""Per-page pipeline: decode -> tone -> auto-crop -> spread handling -> resize -> encode."""
from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import List, Optional

import logging
import time

import numpy as np

from ..config import ComicConfig, SplitStrategy
from . import crop, tone
from .decode import decode
from .encode import encode_page
from .models import ArchiveEntry, EncodedPage
from .spread import is_spread, process_image_view
from .split import Split

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class PageResult:
    entry_name: str
    pages: List[EncodedPage] = field(default_factory=list)
    steps_applied: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0


def process(
    pixels: np.ndarray,
    config: ComicConfig,
    executor: Optional[Executor] = None,
    steps_applied: Optional[List[str]] = None,
) -> Split[np.ndarray]:
    """Tone-correct, crop and lay out one decoded page; returns 1 to 3 device-sized pages."""
    steps = steps_applied if steps_applied is not None else []
    config = config.clamped()

    pixels = tone.transform(pixels, config.brightness, config.gamma)
    steps.append("tone")

    if config.auto_crop:
        rect = crop.auto_crop(pixels)
        if rect is not None:
            pixels = rect.apply(pixels)
            steps.append("auto_crop")

    if is_spread(pixels) and config.split is not SplitStrategy.NONE:
        steps.append(config.split.value)
    pages = process_image_view(pixels, config, executor)
    steps.append("resize")
    return pages


class PagePipeline:
    """Runs the whole per-entry pipeline, keeping the page in one worker from bytes to bytes."""

    def __init__(self, config: ComicConfig, executor: Optional[Executor] = None) -> None:
        self.config = config.clamped()
        self.executor = executor

    def run(self, entry: ArchiveEntry) -> PageResult:
        """Process one archive entry.

        Raises:
            DecodeError: the entry is not a readable image.
            EncodeError: a produced page could not be encoded.
        """
        start = time.perf_counter()
        result = PageResult(entry_name=entry.display_path)

        pixels = decode(entry.data, entry.display_path)
        variants = process(pixels, self.config, self.executor, result.steps_applied)
        for index, variant in enumerate(variants):
            result.pages.append(encode_page(entry, variant, index, self.config.image_format))
        result.steps_applied.append("encode")

        result.elapsed_seconds = time.perf_counter() - start
        LOGGER.debug(
            "Processed %s in %.3fs (steps=%s, pages=%d)",
            entry.display_path,
            result.elapsed_seconds,
            ", ".join(result.steps_applied),
            len(result.pages),
        )
        return result
