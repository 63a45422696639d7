"""Path helpers shared by archive creation and extraction.

Archive paths are always forward-slash separated and relative.  Paths coming
from a Windows file walker use backslashes and must be normalised first.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path, PurePosixPath


def canonicalize_path(path: str | os.PathLike[str]) -> str:
    """Convert *path* to the forward-slash relative form stored in a PAK table.

    >>> canonicalize_path("maps\\\\e1m1.bsp")
    'maps/e1m1.bsp'
    >>> canonicalize_path("./progs/player.mdl")
    'progs/player.mdl'
    >>> canonicalize_path("/etc/passwd")
    '/etc/passwd'
    """
    text = os.fspath(path).replace("\\", "/")
    parts = [p for p in text.split("/") if p not in ("", ".")]
    # a leading slash survives so absolute paths can still be rejected
    root = "/" if text.startswith("/") else ""
    return root + "/".join(parts)


def is_safe_relative(path: str) -> bool:
    """True if *path* stays beneath the directory it is joined to."""
    pure = PurePosixPath(path)
    return bool(path) and not pure.is_absolute() and ".." not in pure.parts


def walk_files(root: str | Path, exclude: Iterable[str | Path] = ()) -> list[str]:
    """Return every regular file below *root* as a canonical relative path.

    Results are sorted by their full archive path, so ``testdir/a.txt`` comes
    before ``testfile``.  Directories are never returned, so empty directories
    do not end up in an archive.  Anything in *exclude* (e.g. the archive being
    written) is skipped.
    """
    root = Path(root)
    excluded = {Path(p).resolve() for p in exclude}
    found: list[str] = []
    for dirpath, _dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        for name in filenames:
            full = base / name
            if not full.is_file() or full.resolve() in excluded:
                continue
            found.append(canonicalize_path(full.relative_to(root)))
    return sorted(found)
