"""Streaming .pak archive writer.

Files are appended to the body one at a time.  The directory table is kept in
memory and written after the body on close, then the header is rewritten at
offset 0 with the final table position.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from pak_manager.archive.errors import (
    ArchiveTooLargeError,
    DestinationExistsError,
    DuplicateCaseInsensitivePathError,
    UnsafePathError,
)
from pak_manager.archive.pak_format import (
    ENTRY_SIZE,
    HEADER_SIZE,
    MAX_U32,
    PAK_MAGIC,
    PakEntry,
    PakHeader,
    encode_entry,
    encode_header,
    encode_path,
)
from pak_manager.config import settings
from pak_manager.utils.paths import canonicalize_path, is_safe_relative

logger = logging.getLogger(__name__)


class PakWriter:
    """Write a new archive at *destination*.

    With *dry_run* every validation and all offset bookkeeping still happen,
    but nothing is opened or written.  The table and header are only written
    when the ``with`` block exits without an exception.
    """

    def __init__(
        self,
        destination: str | Path,
        *,
        dry_run: bool = False,
        chunk_size: int | None = None,
    ) -> None:
        self.destination = Path(destination)
        self.dry_run = dry_run
        self.chunk_size = chunk_size or settings.chunk_size
        self.entries: list[PakEntry] = []
        self._folded: dict[str, str] = {}
        self._next_offset = HEADER_SIZE
        self._fh: BinaryIO | None = None

    def __enter__(self) -> PakWriter:
        if self.destination.exists():
            raise DestinationExistsError(self.destination)
        if not self.dry_run:
            try:
                self._fh = self.destination.open("xb")
            except FileExistsError:
                raise DestinationExistsError(self.destination) from None
            # placeholder, rewritten once the table position is known
            self._fh.write(b"\x00" * HEADER_SIZE)
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        try:
            if exc_type is None:
                self.finish()
        finally:
            self.close()

    @property
    def body_size(self) -> int:
        return self._next_offset - HEADER_SIZE

    def register(self, rel_path: str) -> str:
        """Validate *rel_path* and reserve it; returns the canonical archive path."""
        path = canonicalize_path(rel_path)
        if not is_safe_relative(path):
            raise UnsafePathError(path)
        folded = path.lower()
        existing = self._folded.get(folded)
        if existing is not None:
            raise DuplicateCaseInsensitivePathError(path, existing)
        encode_path(path)
        self._folded[folded] = path
        return path

    def add_file(self, rel_path: str, source: str | Path) -> PakEntry:
        """Append the file at *source* under the archive path *rel_path*."""
        path = self.register(rel_path)
        source = Path(source)
        offset = self._next_offset

        if self._fh is None:
            size = source.stat().st_size
        else:
            size = 0
            with source.open("rb") as src:
                while chunk := src.read(self.chunk_size):
                    self._fh.write(chunk)
                    size += len(chunk)

        if offset + size > MAX_U32:
            raise ArchiveTooLargeError(
                f"Archive body exceeds {MAX_U32} bytes while adding {path}"
            )
        entry = PakEntry(path=path, offset=offset, size=size)
        self.entries.append(entry)
        self._next_offset = offset + size
        logger.debug("Archived %s (%d bytes at %d)", path, size, offset)
        return entry

    def finish(self) -> PakHeader:
        """Write the directory table and the final header."""
        header = PakHeader(
            magic=PAK_MAGIC,
            table_offset=self._next_offset,
            table_size=len(self.entries) * ENTRY_SIZE,
        )
        if header.table_offset + header.table_size > MAX_U32:
            raise ArchiveTooLargeError(f"Directory table of {self.destination} exceeds 4 GiB")
        if self._fh is not None:
            for entry in self.entries:
                self._fh.write(encode_entry(entry))
            self._fh.seek(0)
            self._fh.write(encode_header(header))
        logger.info(
            "%s %s: %d files, %d bytes",
            "Planned" if self.dry_run else "Wrote",
            self.destination,
            len(self.entries),
            self.body_size,
        )
        return header

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
