"""Ready-to-use wrappers for individual page steps.

Each module exposes `run(payload: dict)` which accepts:
{
    "image_path": "<path>",
    "params": {...},
    "output_dir": "<optional>"
}
and returns a JSON-friendly dict with step result metadata.
"""

from .tone import run as run_tone
from .auto_crop import run as run_auto_crop
from .spread import run as run_spread
from .encode import run as run_encode

__all__ = [
    "run_tone",
    "run_auto_crop",
    "run_spread",
    "run_encode",
]
