"""Codec for Quake-style .pak archives.

Layout (little-endian, no padding):
  header  : 4-byte magic "PACK", uint32 table_offset, uint32 table_size
  body    : raw file contents addressed by each entry's offset/size
  table   : table_size / 64 directory records of
            56-byte NUL-terminated path, uint32 offset, uint32 size

Format reference:
  https://quakewiki.org/wiki/.pak
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from pak_manager.archive.errors import (
    NonAsciiPathError,
    NotAnArchiveError,
    PathTooLongError,
    TruncatedArchiveError,
)

PAK_MAGIC = b"PACK"
HEADER_SIZE = 12
ENTRY_SIZE = 64
PATH_FIELD_SIZE = 56
MAX_PATH_LENGTH = PATH_FIELD_SIZE - 1  # room for the NUL terminator
MAX_U32 = 0xFFFFFFFF

_HEADER_FMT = "<4sII"
_ENTRY_FMT = f"<{PATH_FIELD_SIZE}sII"


@dataclass(frozen=True, slots=True)
class PakHeader:
    magic: bytes
    table_offset: int
    table_size: int

    @property
    def num_entries(self) -> int:
        return self.table_size // ENTRY_SIZE


@dataclass(frozen=True, slots=True)
class PakEntry:
    path: str
    offset: int
    size: int


def decode_header(data: bytes) -> PakHeader:
    """Parse the 12-byte header; the magic is checked before anything else."""
    magic = bytes(data[0:4])
    if magic != PAK_MAGIC:
        raise NotAnArchiveError(None, magic)
    if len(data) < HEADER_SIZE:
        raise TruncatedArchiveError(f"Header too short: {len(data)} bytes, need {HEADER_SIZE}")
    _, table_offset, table_size = struct.unpack_from(_HEADER_FMT, data, 0)
    return PakHeader(magic=magic, table_offset=table_offset, table_size=table_size)


def encode_header(header: PakHeader) -> bytes:
    return struct.pack(_HEADER_FMT, header.magic, header.table_offset, header.table_size)


def decode_entry(data: bytes) -> PakEntry:
    """Parse one 64-byte directory record.

    Only the bytes before the first NUL are significant.  Historical archives
    (e.g. id1/pak0.pak) carry leftover garbage after the terminator, so the
    padding is never validated.  A field without any NUL yields all 56 bytes.
    """
    if len(data) < ENTRY_SIZE:
        raise TruncatedArchiveError(f"Directory record too short: {len(data)} bytes")
    raw_path, offset, size = struct.unpack_from(_ENTRY_FMT, data, 0)
    nul = raw_path.find(b"\x00")
    if nul != -1:
        raw_path = raw_path[:nul]
    return PakEntry(path=raw_path.decode("latin-1"), offset=offset, size=size)


def encode_path(path: str) -> bytes:
    """Return the ASCII bytes for *path*, rejecting anything the table can't hold."""
    try:
        raw = path.encode("ascii")
    except UnicodeEncodeError as exc:
        raise NonAsciiPathError(path) from exc
    if len(raw) > MAX_PATH_LENGTH:
        raise PathTooLongError(path, MAX_PATH_LENGTH)
    return raw


def encode_entry(entry: PakEntry) -> bytes:
    # struct pads the 56s field with zeros, which also supplies the terminator
    return struct.pack(_ENTRY_FMT, encode_path(entry.path), entry.offset, entry.size)
