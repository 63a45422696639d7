from pak_manager.archive.errors import (
    AncestorIsFileConflict,
    ArchiveNotFoundError,
    ArchiveTooLargeError,
    BrokenLinkConflict,
    DestinationConflictError,
    DestinationExistsError,
    DuplicateCaseInsensitivePathError,
    FileIsDirectoryConflict,
    NonAsciiPathError,
    NotAFileError,
    NotAnArchiveError,
    PakError,
    PathTooLongError,
    TruncatedArchiveError,
    UnsafePathError,
)
from pak_manager.archive.pak_format import PakEntry, PakHeader
from pak_manager.archive.reader import PakReader, open_pak
from pak_manager.archive.writer import PakWriter

__all__ = [
    "AncestorIsFileConflict",
    "ArchiveNotFoundError",
    "ArchiveTooLargeError",
    "BrokenLinkConflict",
    "DestinationConflictError",
    "DestinationExistsError",
    "DuplicateCaseInsensitivePathError",
    "FileIsDirectoryConflict",
    "NonAsciiPathError",
    "NotAFileError",
    "NotAnArchiveError",
    "PakEntry",
    "PakError",
    "PakHeader",
    "PakReader",
    "PakWriter",
    "PathTooLongError",
    "TruncatedArchiveError",
    "UnsafePathError",
    "open_pak",
]
