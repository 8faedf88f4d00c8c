"""Exception types shared across the page pipeline."""
from __future__ import annotations

from typing import Optional


class ConfigError(ValueError):
    """Raised when a configuration value is outside its valid range."""


class PageError(Exception):
    """Base class for failures confined to a single archive entry."""

    def __init__(self, message: str, entry_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.entry_name = entry_name

    def __str__(self) -> str:
        message = super().__str__()
        if self.entry_name:
            return f"{self.entry_name}: {message}"
        return message


class DecodeError(PageError):
    """Raised when the input bytes are not a readable raster image."""


class EncodeError(PageError):
    """Raised when the encoder rejects an in-memory page."""
