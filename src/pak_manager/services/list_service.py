"""Listing and pipe extraction of .pak archives."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from pak_manager.archive.reader import open_pak
from pak_manager.config import settings
from pak_manager.schemas.archive import EntryInfo, ListingResult, PakOptions, StreamResult

logger = logging.getLogger(__name__)


def list_pak(archive_path: str | Path, options: PakOptions | None = None) -> ListingResult:
    """Return the directory entries matching *options*, in table order."""
    options = options or PakOptions()
    with open_pak(archive_path) as reader:
        entries = [
            EntryInfo.from_entry(e)
            for e in reader.iter_entries(options.path_filter, fold_case=options.case_fold)
        ]
    return ListingResult(
        archive=str(archive_path),
        entries=entries,
        file_count=len(entries),
        total_size=sum(e.size for e in entries),
    )


def stream_to(
    archive_path: str | Path,
    options: PakOptions | None,
    sink: BinaryIO,
    *,
    chunk_size: int | None = None,
) -> StreamResult:
    """Write the contents of every matching entry to *sink*, back to back."""
    options = options or PakOptions()
    chunk_size = chunk_size or settings.chunk_size
    files = 0
    written = 0
    with open_pak(archive_path) as reader:
        for entry in reader.iter_entries(options.path_filter, fold_case=options.case_fold):
            for chunk in reader.stream_bytes(entry, chunk_size):
                sink.write(chunk)
                written += len(chunk)
            files += 1
            logger.debug("Piped %s (%d bytes)", entry.path, entry.size)
    sink.flush()
    return StreamResult(archive=str(archive_path), files_written=files, bytes_written=written)
