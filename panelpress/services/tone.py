"""Standalone tone-correction step."""
from __future__ import annotations

from typing import Dict
import logging
import time

import numpy as np

from ..imaging import tone
from ._payload import load_pixels, parse_payload, save_png

LOGGER = logging.getLogger(__name__)


def run(payload: Dict[str, object]) -> Dict[str, object]:
    image_path, params, output_dir = parse_payload(payload)
    brightness = int(params.get("brightness", -10))
    gamma = float(params.get("gamma", 1.8))

    pixels = load_pixels(image_path)
    start = time.perf_counter()
    corrected = tone.transform(pixels, brightness, gamma)
    elapsed = time.perf_counter() - start

    output_path = save_png(corrected, output_dir / f"{image_path.stem}__tone.png")
    applied = not np.array_equal(pixels, corrected)
    LOGGER.info("tone applied=%s elapsed=%.2fs output=%s", applied, elapsed, output_path)
    return {
        "step": "tone",
        "applied": applied,
        "elapsed_seconds": elapsed,
        "output_path": str(output_path),
    }
