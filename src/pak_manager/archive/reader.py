"""Read-only access to .pak archives.

Only the header is read on open.  The directory table is decoded lazily on
every call to ``iter_entries`` and entry contents are streamed in chunks,
so listing a large archive never loads file data into memory.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from pak_manager.archive.errors import (
    ArchiveNotFoundError,
    NotAFileError,
    NotAnArchiveError,
    TruncatedArchiveError,
)
from pak_manager.archive.pak_format import (
    ENTRY_SIZE,
    HEADER_SIZE,
    PakEntry,
    PakHeader,
    decode_entry,
    decode_header,
)
from pak_manager.config import settings

logger = logging.getLogger(__name__)

PathPattern = str | re.Pattern[str]


class PakReader:
    """An open .pak archive.  Use ``open_pak`` or the constructor as a context manager."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        if not self.path.exists():
            raise ArchiveNotFoundError(self.path)
        if not self.path.is_file():
            raise NotAFileError(self.path)
        self._fh: BinaryIO = self.path.open("rb")
        try:
            self.header = self._read_header()
        except BaseException:
            self._fh.close()
            raise

    def _read_header(self) -> PakHeader:
        data = self._fh.read(HEADER_SIZE)
        try:
            header = decode_header(data)
        except NotAnArchiveError as exc:
            raise NotAnArchiveError(self.path, exc.magic) from None
        if header.table_size % ENTRY_SIZE:
            logger.warning(
                "%s: table size %d is not a multiple of %d, trailing bytes ignored",
                self.path,
                header.table_size,
                ENTRY_SIZE,
            )
        return header

    @property
    def num_entries(self) -> int:
        return self.header.num_entries

    def iter_entries(
        self,
        pattern: PathPattern | None = None,
        *,
        fold_case: bool = False,
    ) -> Iterator[PakEntry]:
        """Yield directory entries in table order.

        Paths are lower-cased before *pattern* is applied when *fold_case* is
        set.  *pattern* is searched for anywhere in the path, not anchored.
        """
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        for index in range(self.header.num_entries):
            # re-seek per record: callers may stream entry bytes between iterations
            self._fh.seek(self.header.table_offset + index * ENTRY_SIZE)
            record = self._fh.read(ENTRY_SIZE)
            if len(record) < ENTRY_SIZE:
                raise TruncatedArchiveError(
                    f"{self.path}: directory table truncated at entry {index} "
                    f"of {self.header.num_entries}"
                )
            entry = decode_entry(record)
            if fold_case:
                entry = PakEntry(path=entry.path.lower(), offset=entry.offset, size=entry.size)
            if regex is not None and not regex.search(entry.path):
                continue
            yield entry

    def list_entries(
        self,
        pattern: PathPattern | None = None,
        *,
        fold_case: bool = False,
    ) -> list[PakEntry]:
        return list(self.iter_entries(pattern, fold_case=fold_case))

    def stream_bytes(self, entry: PakEntry, chunk_size: int | None = None) -> Iterator[bytes]:
        """Yield the contents of *entry* in chunks of at most *chunk_size* bytes."""
        chunk_size = chunk_size or settings.chunk_size
        self._fh.seek(entry.offset)
        remaining = entry.size
        while remaining > 0:
            want = min(chunk_size, remaining)
            chunk = self._fh.read(want)
            if len(chunk) < want:
                raise TruncatedArchiveError(
                    f"{self.path}: {entry.path} truncated, expected {entry.size} bytes "
                    f"at offset {entry.offset}, got {entry.size - remaining + len(chunk)}"
                )
            remaining -= len(chunk)
            yield chunk

    def read_bytes(self, entry: PakEntry) -> bytes:
        return b"".join(self.stream_bytes(entry))

    def close(self) -> None:
        self._fh.close()

    def __enter__(self) -> PakReader:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()


def open_pak(path: str | Path) -> PakReader:
    """Open *path* for reading, validating that it is a regular file with PAK magic."""
    return PakReader(path)
