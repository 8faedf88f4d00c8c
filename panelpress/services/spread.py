"""Standalone spread split/rotate + resize step."""
from __future__ import annotations

from typing import Dict
import logging
import time

from ..config import config_from_mapping
from ..imaging.spread import process_image_view
from ._payload import load_pixels, parse_payload, save_png

LOGGER = logging.getLogger(__name__)


def run(payload: Dict[str, object]) -> Dict[str, object]:
    image_path, params, output_dir = parse_payload(payload)
    config = config_from_mapping(params)

    pixels = load_pixels(image_path)
    start = time.perf_counter()
    pages = process_image_view(pixels, config)
    elapsed = time.perf_counter() - start

    output_paths = [
        str(save_png(page, output_dir / f"{image_path.stem}__spread_{index}.png"))
        for index, page in enumerate(pages)
    ]
    LOGGER.info(
        "spread strategy=%s pages=%d elapsed=%.2fs", config.split.value, len(output_paths), elapsed
    )
    return {
        "step": "spread",
        "applied": len(output_paths) > 1 or pages[0].shape != pixels.shape,
        "elapsed_seconds": elapsed,
        "output_paths": output_paths,
        "dimensions": [[page.shape[1], page.shape[0]] for page in pages],
    }
