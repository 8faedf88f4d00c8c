"""Convert comic page images into e-reader-ready pages."""

from .batch import BatchResult, process_archive_images
from .config import (
    ComicConfig,
    ImageFormat,
    ImageKind,
    MarginColor,
    PngCompression,
    SplitStrategy,
    load_config,
    validate_config,
)
from .errors import ConfigError, DecodeError, EncodeError, PageError
from .imaging import ArchiveEntry, EncodedPage, Split

__all__ = [
    "ArchiveEntry",
    "BatchResult",
    "ComicConfig",
    "ConfigError",
    "DecodeError",
    "EncodeError",
    "EncodedPage",
    "ImageFormat",
    "ImageKind",
    "MarginColor",
    "PageError",
    "PngCompression",
    "Split",
    "SplitStrategy",
    "load_config",
    "process_archive_images",
    "validate_config",
]
