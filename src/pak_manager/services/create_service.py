"""Build a .pak archive from a directory tree.

Validation failures (path length, non-ASCII names, paths outside the root,
case-insensitive collisions) abort the whole run, as do I/O errors on a
source file.  A partially written archive is removed before the error
propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pak_manager.archive.errors import DestinationExistsError, NotAFileError
from pak_manager.archive.writer import PakWriter
from pak_manager.schemas.archive import CreateResult, EntryInfo, PakOptions
from pak_manager.services.progress import ReportCallback, noop_report
from pak_manager.utils.paths import walk_files

logger = logging.getLogger(__name__)


def create_pak(
    root_path: str | Path,
    destination_path: str | Path,
    options: PakOptions | None = None,
    *,
    paths: Iterable[str] | None = None,
    on_report: ReportCallback = noop_report,
    chunk_size: int | None = None,
) -> CreateResult:
    """Archive the files below *root_path* into *destination_path*.

    *paths* are relative to *root_path* and are archived in the order given;
    by default the tree is walked with ``walk_files``.

    Raises:
        FileNotFoundError: If *root_path* is not a directory.
        DestinationExistsError: If *destination_path* already exists.
        PathTooLongError, NonAsciiPathError, UnsafePathError,
        DuplicateCaseInsensitivePathError:
            If a path cannot be stored in the archive.
    """
    options = options or PakOptions()
    root = Path(root_path)
    destination = Path(destination_path)
    if not root.is_dir():
        raise FileNotFoundError(f"Source directory not found: {root}")
    if destination.exists():
        raise DestinationExistsError(destination)

    if paths is None:
        paths = walk_files(root, exclude=[destination])

    writer = PakWriter(destination, dry_run=options.dry_run, chunk_size=chunk_size)
    try:
        with writer:
            for rel_path in paths:
                source = root / rel_path
                if not source.is_file():
                    raise NotAFileError(source)
                entry = writer.add_file(rel_path, source)
                on_report("archive", entry.path)
    except DestinationExistsError:
        raise
    except Exception:
        if not options.dry_run:
            destination.unlink(missing_ok=True)
            logger.warning("Removed incomplete archive %s", destination)
        raise

    return CreateResult(
        archive=str(destination),
        entries=[EntryInfo.from_entry(e) for e in writer.entries],
        file_count=len(writer.entries),
        total_size=writer.body_size,
        dry_run=options.dry_run,
    )
