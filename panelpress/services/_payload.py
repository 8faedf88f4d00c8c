"""Payload handling shared by the step services."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Tuple

import numpy as np
from PIL import Image

from ..imaging.decode import decode


def parse_payload(payload: Dict[str, Any]) -> Tuple[Path, Dict[str, Any], Path]:
    image_path_raw = payload.get("image_path")
    if not image_path_raw:
        raise ValueError("payload must include 'image_path'")
    params = payload.get("params") or {}
    image_path = Path(str(image_path_raw))
    output_dir = Path(payload.get("output_dir") or image_path.parent)
    output_dir.mkdir(parents=True, exist_ok=True)
    return image_path, params, output_dir


def load_pixels(image_path: Path) -> np.ndarray:
    return decode(image_path.read_bytes(), image_path.name)


def save_png(pixels: np.ndarray, output_path: Path) -> Path:
    Image.fromarray(np.ascontiguousarray(pixels)).save(output_path, format="PNG")
    return output_path
