"""Parallel conversion of a whole archive's pages.

Entries are cut into contiguous chunks, one chunk per worker, and each
worker runs the full decode -> transform -> encode pipeline for an entry
before moving to the next, so no list of decoded images is ever built.
Results are sorted by file name at the end, which makes the output order
independent of thread scheduling.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

import logging
import os
import threading
import time

from .config import ComicConfig, validate_config
from .errors import PageError
from .imaging.models import ArchiveEntry, EncodedPage
from .imaging.pipeline import PagePipeline

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


@dataclass(slots=True)
class BatchResult:
    pages: List[EncodedPage] = field(default_factory=list)
    processed: int = 0
    skipped: int = 0
    elapsed_seconds: float = 0.0


class _Progress:
    def __init__(self, total: int, callback: Optional[ProgressCallback]) -> None:
        self.total = total
        self.callback = callback
        self.completed = 0
        self._lock = threading.Lock()

    def advance(self, entry_name: str) -> None:
        if self.callback is None:
            return
        with self._lock:
            self.completed += 1
            self.callback(self.completed, self.total, entry_name)


def chunk_entries(entries: Sequence[ArchiveEntry], workers: int) -> List[Sequence[ArchiveEntry]]:
    chunk_size = max(len(entries) // max(workers, 1), 1)
    return [entries[i : i + chunk_size] for i in range(0, len(entries), chunk_size)]


def _collect_entries(entries: Iterable[Union[ArchiveEntry, Exception]]) -> Tuple[List[ArchiveEntry], int]:
    files: List[ArchiveEntry] = []
    failed = 0
    for item in entries:
        if isinstance(item, Exception):
            LOGGER.warning("Failed to load archive file: %s", item)
            failed += 1
            continue
        files.append(item)
    return files, failed


def _process_chunk(
    chunk: Sequence[ArchiveEntry],
    pipeline: PagePipeline,
    progress: _Progress,
) -> Tuple[List[EncodedPage], int, int]:
    pages: List[EncodedPage] = []
    processed = 0
    skipped = 0
    for entry in chunk:
        try:
            result = pipeline.run(entry)
        except PageError as exc:
            LOGGER.warning("Skipping %s: %s", entry.display_path, exc)
            skipped += 1
        else:
            pages.extend(result.pages)
            processed += 1
        progress.advance(entry.display_path)
    return pages, processed, skipped


def _sort_and_dedup(pages: List[EncodedPage]) -> List[EncodedPage]:
    pages.sort(key=lambda page: page.file_name)
    unique: List[EncodedPage] = []
    for page in pages:
        if unique and unique[-1].file_name == page.file_name:
            LOGGER.debug("Dropping duplicate page %s", page.file_name)
            continue
        unique.append(page)
    return unique


def process_archive_images(
    entries: Iterable[Union[ArchiveEntry, Exception]],
    config: ComicConfig,
    progress: Optional[ProgressCallback] = None,
    max_workers: Optional[int] = None,
) -> BatchResult:
    """Convert every archive entry into encoded e-reader pages.

    `entries` may contain Exception instances for entries the archive reader
    could not extract; they are logged and counted as skipped. Entries that
    fail to decode or encode contribute no pages and never abort the batch.

    Raises:
        ConfigError: the configuration is out of range.
    """
    validate_config(config)
    start = time.perf_counter()
    LOGGER.info("Processing archive images")

    files, read_failures = _collect_entries(entries)
    workers = max_workers or os.cpu_count() or 1
    chunks = chunk_entries(files, workers)
    LOGGER.debug(
        "Processing %d files with %d threads, chunk size: %d",
        len(files),
        workers,
        len(chunks[0]) if chunks else 0,
    )

    tracker = _Progress(len(files), progress)
    result = BatchResult(skipped=read_failures)
    collected: List[EncodedPage] = []

    # branch work gets its own pool so chunk workers never wait on themselves
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="page-branch") as branch_pool:
        pipeline = PagePipeline(config, executor=branch_pool if workers > 1 else None)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="page-chunk") as chunk_pool:
            futures = [chunk_pool.submit(_process_chunk, chunk, pipeline, tracker) for chunk in chunks]
            for future in futures:
                pages, processed, skipped = future.result()
                collected.extend(pages)
                result.processed += processed
                result.skipped += skipped

    result.pages = _sort_and_dedup(collected)
    result.elapsed_seconds = time.perf_counter() - start
    LOGGER.info(
        "Processed %d images (%d skipped) into %d pages in %.2fs",
        result.processed,
        result.skipped,
        len(result.pages),
        result.elapsed_seconds,
    )
    return result

