"""Exception hierarchy for .pak archive operations.

Every error derives from ``PakError`` and from the closest builtin exception,
so callers can catch either ``PakError`` or e.g. ``FileNotFoundError``.
"""

from __future__ import annotations

from pathlib import Path


class PakError(Exception):
    pass


class ArchiveNotFoundError(PakError, FileNotFoundError):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Archive not found: {path}")


class NotAFileError(PakError, OSError):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Not a file: {path}")


class NotAnArchiveError(PakError, ValueError):
    def __init__(self, path: str | Path | None, magic: bytes) -> None:
        self.path = Path(path) if path is not None else None
        self.magic = magic
        where = f"{path}: " if path is not None else ""
        super().__init__(f"{where}not a PAK archive (magic {magic!r})")


class TruncatedArchiveError(PakError, ValueError):
    pass


class ArchiveTooLargeError(PakError, ValueError):
    pass


class PathTooLongError(PakError, ValueError):
    def __init__(self, path: str, limit: int) -> None:
        self.path = path
        self.limit = limit
        super().__init__(f"Path more than {limit} characters: {path}")


class NonAsciiPathError(PakError, ValueError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path contains non-ASCII characters: {path}")


class UnsafePathError(PakError, ValueError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path is not relative to the archive root: {path!r}")


class DuplicateCaseInsensitivePathError(PakError, ValueError):
    def __init__(self, path: str, existing: str) -> None:
        self.path = path
        self.existing = existing
        super().__init__(f"Path {path} collides with {existing} when case is ignored")


class DestinationExistsError(PakError, FileExistsError):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Destination already exists: {path}")


class DestinationConflictError(PakError):
    """An extraction target cannot be written because of what is already on disk."""

    def __init__(self, occupied: Path, entry_path: str, message: str) -> None:
        self.occupied = occupied
        self.entry_path = entry_path
        super().__init__(message)


class FileIsDirectoryConflict(DestinationConflictError):
    def __init__(self, occupied: Path, entry_path: str) -> None:
        super().__init__(occupied, entry_path, f"{occupied}/ exists but is not a file")


class AncestorIsFileConflict(DestinationConflictError):
    def __init__(self, occupied: Path, entry_path: str) -> None:
        super().__init__(occupied, entry_path, f"{occupied} exists but is not a directory")


class BrokenLinkConflict(DestinationConflictError):
    def __init__(self, occupied: Path, entry_path: str) -> None:
        super().__init__(occupied, entry_path, f"{occupied} is a broken symbolic link")
