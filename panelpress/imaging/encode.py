"""Serialize finished pages to JPEG, PNG or WebP bytes."""
from __future__ import annotations

from io import BytesIO
from typing import Any, Dict, Optional

import logging

import numpy as np
from PIL import Image

from ..config import QUALITY_RANGE, ImageFormat, ImageKind, PngCompression
from ..errors import EncodeError
from .models import ArchiveEntry, EncodedPage

LOGGER = logging.getLogger(__name__)


def _quality(value: int) -> int:
    return max(QUALITY_RANGE[0], min(QUALITY_RANGE[1], int(value)))


def _save(image: "Image.Image", pil_format: str, name: Optional[str], **save_kwargs: Any) -> bytes:
    buffer = BytesIO()
    try:
        image.save(buffer, format=pil_format, **save_kwargs)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"failed to encode {pil_format}: {exc}", name) from exc
    return buffer.getvalue()


def encode_jpeg(pixels: np.ndarray, quality: int, name: Optional[str] = None) -> bytes:
    image = Image.fromarray(np.ascontiguousarray(pixels))
    return _save(image, "JPEG", name, quality=_quality(quality))


def encode_png(pixels: np.ndarray, compression: PngCompression, name: Optional[str] = None) -> bytes:
    image = Image.fromarray(np.ascontiguousarray(pixels))
    save_kwargs: Dict[str, Any] = {"compress_level": compression.zlib_level}
    if compression is PngCompression.BEST:
        save_kwargs["optimize"] = True
    return _save(image, "PNG", name, **save_kwargs)


def encode_webp(pixels: np.ndarray, quality: int, name: Optional[str] = None) -> bytes:
    # the WebP encoder takes 3-channel input only
    image = Image.fromarray(np.ascontiguousarray(pixels)).convert("RGB")
    return _save(image, "WEBP", name, quality=_quality(quality))


def encode(pixels: np.ndarray, image_format: ImageFormat, name: Optional[str] = None) -> bytes:
    """Encode a grayscale page in the requested format.

    Raises:
        EncodeError: Pillow rejected the buffer or the format is unavailable.
    """
    if image_format.kind is ImageKind.JPEG:
        return encode_jpeg(pixels, image_format.quality, name)
    if image_format.kind is ImageKind.PNG:
        return encode_png(pixels, image_format.compression, name)
    if image_format.kind is ImageKind.WEBP:
        return encode_webp(pixels, image_format.quality, name)
    raise EncodeError(f"unsupported image format: {image_format.kind}", name)


def page_file_name(entry: ArchiveEntry, index: int, image_format: ImageFormat) -> str:
    return f"{entry.parent}_{entry.stem}_{index:03d}.{image_format.extension}"


def encode_page(
    entry: ArchiveEntry,
    pixels: np.ndarray,
    index: int,
    image_format: ImageFormat,
) -> EncodedPage:
    file_name = page_file_name(entry, index, image_format)
    data = encode(pixels, image_format, entry.display_path)
    height, width = pixels.shape
    page = EncodedPage(
        file_name=file_name,
        data=data,
        dimensions=(width, height),
        image_format=image_format,
    )
    LOGGER.debug("Encoded %s (%d bytes)", file_name, len(data))
    return page
