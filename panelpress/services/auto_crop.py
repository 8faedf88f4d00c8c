"""Standalone auto-crop step."""
from __future__ import annotations

from dataclasses import asdict
from typing import Dict
import logging
import time

from ..imaging.crop import auto_crop
from ._payload import load_pixels, parse_payload, save_png

LOGGER = logging.getLogger(__name__)


def run(payload: Dict[str, object]) -> Dict[str, object]:
    image_path, _, output_dir = parse_payload(payload)

    pixels = load_pixels(image_path)
    start = time.perf_counter()
    rect = auto_crop(pixels)
    elapsed = time.perf_counter() - start

    cropped = rect.apply(pixels) if rect is not None else pixels
    output_path = save_png(cropped, output_dir / f"{image_path.stem}__auto_crop.png")
    LOGGER.info("auto_crop applied=%s elapsed=%.2fs rect=%s output=%s", rect is not None, elapsed, rect, output_path)
    return {
        "step": "auto_crop",
        "applied": rect is not None,
        "crop": asdict(rect) if rect is not None else None,
        "box": list(rect.box) if rect is not None else None,
        "elapsed_seconds": elapsed,
        "output_path": str(output_path),
    }
