"""Standalone encode step."""
from __future__ import annotations

from typing import Dict
import logging
import time

from ..config import config_from_mapping
from ..imaging.encode import encode
from ._payload import load_pixels, parse_payload

LOGGER = logging.getLogger(__name__)


def run(payload: Dict[str, object]) -> Dict[str, object]:
    image_path, params, output_dir = parse_payload(payload)
    image_format = config_from_mapping(params).image_format

    pixels = load_pixels(image_path)
    start = time.perf_counter()
    data = encode(pixels, image_format, image_path.name)
    elapsed = time.perf_counter() - start

    output_path = output_dir / f"{image_path.stem}__encode.{image_format.extension}"
    output_path.write_bytes(data)
    LOGGER.info("encode format=%s bytes=%d elapsed=%.2fs output=%s", image_format.extension, len(data), elapsed, output_path)
    return {
        "step": "encode",
        "applied": True,
        "size_bytes": len(data),
        "elapsed_seconds": elapsed,
        "output_path": str(output_path),
    }
