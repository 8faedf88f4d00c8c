"""Batch CLI entry point: convert a folder of comic page images for an e-reader."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import argparse
import json
import logging
import sys

from tqdm import tqdm

from .batch import BatchResult, process_archive_images
from .config import ComicConfig, ConfigError, config_from_mapping, load_raw_config
from .devices import DEFAULT_DEVICE, PRESETS
from .imaging.models import ArchiveEntry

LOGGER = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp", ".tif", ".tiff"}


def _iter_image_files(input_path: Path) -> Iterable[Path]:
    if input_path.is_file():
        yield input_path
        return
    if not input_path.exists():
        raise FileNotFoundError(f"Input path not found: {input_path}")
    for path in sorted(p for p in input_path.rglob("*") if p.is_file()):
        if path.suffix.lower() in IMAGE_EXTENSIONS:
            yield path


def load_entries(input_path: Path) -> List[ArchiveEntry | Exception]:
    """Read page images into archive entries named relative to `input_path`."""
    root = input_path.parent if input_path.is_file() else input_path
    entries: List[ArchiveEntry | Exception] = []
    for path in _iter_image_files(input_path):
        try:
            data = path.read_bytes()
        except OSError as exc:
            entries.append(exc)
            continue
        entries.append(ArchiveEntry(display_path=path.relative_to(root).as_posix(), data=data))
    return entries


def build_config(args: argparse.Namespace) -> ComicConfig:
    raw: Dict[str, Any] = load_raw_config(args.config) if args.config else {}
    overrides = {
        "device": args.device,
        "width": args.width,
        "height": args.height,
        "image_format": args.image_format,
        "quality": args.quality,
        "png_compression": args.png_compression,
        "brightness": args.brightness,
        "gamma": args.gamma,
        "margin_color": args.margin_color,
        "split": args.split,
        "right_to_left": args.right_to_left,
    }
    raw.update({key: value for key, value in overrides.items() if value is not None})
    if args.no_auto_crop:
        raw["auto_crop"] = False
    return config_from_mapping(raw)


def write_pages(result: BatchResult, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    rows = []
    for page in result.pages:
        target = output_dir / page.file_name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(page.data)
        rows.append(
            {
                "file_name": page.file_name,
                "width": page.dimensions[0],
                "height": page.dimensions[1],
                "format": page.image_format.extension,
                "size_bytes": len(page.data),
            }
        )
    summary_path = output_dir / "summary.json"
    summary = {
        "processed": result.processed,
        "skipped": result.skipped,
        "page_count": len(result.pages),
        "elapsed_seconds": round(result.elapsed_seconds, 3),
        "pages": rows,
    }
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")
    LOGGER.info("Summary written to %s", summary_path)
    return summary_path


def _setup_logging(verbose: bool, quiet: bool) -> None:
    level = logging.WARNING if quiet else logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert comic page images into e-reader-ready pages.")
    parser.add_argument("input", type=Path, help="Image file or directory of page images")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("output"), help="Output directory")
    parser.add_argument("--config", type=Path, default=None, help="Optional YAML config file")
    parser.add_argument(
        "-d",
        "--device",
        default=None,
        help=f"Device preset ({', '.join(PRESETS)}, custom); default {DEFAULT_DEVICE}",
    )
    parser.add_argument("--width", type=int, default=None, help="Custom device width (with --device custom)")
    parser.add_argument("--height", type=int, default=None, help="Custom device height (with --device custom)")
    parser.add_argument("--image-format", choices=["jpeg", "png", "webp"], default=None)
    parser.add_argument("--quality", type=int, default=None, help="JPEG/WebP quality (0-100)")
    parser.add_argument("--png-compression", choices=["fast", "default", "best"], default=None)
    parser.add_argument("--brightness", type=int, default=None, help="Brightness offset (-100 to 100)")
    parser.add_argument("--gamma", type=float, default=None, help="Gamma correction (0.1 to 3.0)")
    parser.add_argument("--margin-color", choices=["none", "black", "white"], default=None)
    parser.add_argument(
        "--split",
        choices=["none", "split", "rotate", "rotate-split"],
        default=None,
        help="Double-page spread strategy",
    )
    direction = parser.add_mutually_exclusive_group()
    direction.add_argument("--rtl", dest="right_to_left", action="store_const", const=True, default=None)
    direction.add_argument("--ltr", dest="right_to_left", action="store_const", const=False)
    parser.add_argument("--no-auto-crop", action="store_true", help="Disable automatic margin cropping")
    parser.add_argument("--workers", type=int, default=None, help="Worker threads (default: CPU count)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose, args.quiet)
    try:
        config = build_config(args)
    except ConfigError as exc:
        parser.error(str(exc))

    if not args.input.exists():
        parser.error(f"Input path not found: {args.input}")

    entries = load_entries(args.input)
    readable = sum(1 for entry in entries if isinstance(entry, ArchiveEntry))
    LOGGER.info("Found %d images in %s", readable, args.input)

    with tqdm(total=readable, desc="Pages", unit="img", disable=args.quiet) as bar:
        result = process_archive_images(
            entries,
            config,
            progress=lambda completed, total, name: bar.update(1),
            max_workers=args.workers,
        )

    write_pages(result, args.output_dir)
    LOGGER.info("Processed %d images, skipped %d", result.processed, result.skipped)
    return 0 if result.processed else 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
