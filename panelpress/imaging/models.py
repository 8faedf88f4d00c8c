"""Data carried into and out of the page pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Tuple

from ..config import ImageFormat


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    """One raw image read from a comic archive.

    Fields:
        display_path: Path of the entry inside the archive, '/'-separated.
        data: Compressed image bytes as stored in the archive.
    """

    display_path: str
    data: bytes

    @property
    def _path(self) -> PurePosixPath:
        return PurePosixPath(self.display_path.replace("\\", "/"))

    @property
    def parent(self) -> str:
        parent = str(self._path.parent)
        return "" if parent == "." else parent

    @property
    def stem(self) -> str:
        return self._path.stem

    def __repr__(self) -> str:
        return f"ArchiveEntry(display_path={self.display_path!r}, size={len(self.data)})"


@dataclass(frozen=True, slots=True)
class EncodedPage:
    """An encoded output page, ready to be stored in a container."""

    file_name: str
    data: bytes
    dimensions: Tuple[int, int]
    image_format: ImageFormat

    def __repr__(self) -> str:
        width, height = self.dimensions
        return (
            f"EncodedPage(file_name={self.file_name!r}, {width}x{height}, "
            f"{self.image_format.extension}, {len(self.data)} bytes)"
        )
