"""Bounded container for the one to three pages produced from a source page."""
from __future__ import annotations

from typing import Callable, Generic, Iterator, Tuple, TypeVar

T = TypeVar("T")
U = TypeVar("U")

MAX_PARTS = 3


class Split(Generic[T]):
    """Ordered, immutable sequence of 1, 2 or 3 page variants.

    Order is reading order. Instances are built only through `one`, `two`
    and `three`, so an empty or oversized Split cannot exist.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Tuple[T, ...]) -> None:
        if not 1 <= len(items) <= MAX_PARTS:
            raise ValueError(f"Split holds 1 to {MAX_PARTS} items, got {len(items)}")
        self._items = items

    @classmethod
    def one(cls, first: T) -> "Split[T]":
        return cls((first,))

    @classmethod
    def two(cls, first: T, second: T) -> "Split[T]":
        return cls((first, second))

    @classmethod
    def three(cls, first: T, second: T, third: T) -> "Split[T]":
        return cls((first, second, third))

    def map(self, fn: Callable[[T], U]) -> "Split[U]":
        return Split(tuple(fn(item) for item in self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __repr__(self) -> str:
        return f"Split({len(self._items)} items)"
