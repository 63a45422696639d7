"""Options and result models for listing, piping and creating archives."""

from __future__ import annotations

from pydantic import BaseModel, Field

from pak_manager.archive.pak_format import PakEntry


class PakOptions(BaseModel):
    case_fold: bool = False
    path_filter: str | None = None
    dry_run: bool = False
    exclude_archives: set[str] = Field(default_factory=set)
    use_checksum: bool = False


class EntryInfo(BaseModel):
    path: str
    offset: int
    size: int

    @classmethod
    def from_entry(cls, entry: PakEntry) -> EntryInfo:
        return cls(path=entry.path, offset=entry.offset, size=entry.size)


class ListingResult(BaseModel):
    archive: str
    entries: list[EntryInfo]
    file_count: int
    total_size: int


class StreamResult(BaseModel):
    archive: str
    files_written: int
    bytes_written: int


class CreateResult(BaseModel):
    archive: str
    entries: list[EntryInfo]
    file_count: int
    total_size: int
    dry_run: bool = False
