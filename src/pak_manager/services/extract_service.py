"""Extract .pak archives to disk.

Every entry is checked against what already exists at its destination before
anything is written:

* a directory where the file should go is a conflict and the entry is skipped;
* an existing file is only overwritten after confirmation (``yes``/``all``);
* a file (or a broken symlink) sitting where one of the parent directories
  must be is a conflict and the entry is skipped;
* a broken symlink at the destination itself is a conflict.

Conflicts and write failures never abort the run.  Dry runs perform the same
probes against a ``PlannedTree`` of what earlier entries would have created,
so they produce the same outcomes without creating directories or files.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path

from pak_manager.archive.errors import (
    AncestorIsFileConflict,
    BrokenLinkConflict,
    DestinationConflictError,
    FileIsDirectoryConflict,
)
from pak_manager.archive.pak_format import PakEntry
from pak_manager.archive.reader import PakReader, open_pak
from pak_manager.config import settings
from pak_manager.schemas.archive import PakOptions
from pak_manager.schemas.extract import ExtractAction, ExtractOutcome, ExtractResult
from pak_manager.services.progress import ReportCallback, noop_report
from pak_manager.utils.paths import is_safe_relative

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], str]


class ConflictDecision(StrEnum):
    unset = "unset"
    yes = "yes"
    no = "no"
    all = "all"
    none = "none"


_ANSWERS: dict[str, ConflictDecision] = {
    "y": ConflictDecision.yes,
    "yes": ConflictDecision.yes,
    "n": ConflictDecision.no,
    "no": ConflictDecision.no,
    "a": ConflictDecision.all,
    "all": ConflictDecision.all,
    "s": ConflictDecision.none,
    "none": ConflictDecision.none,
}

_PROMPT = "Overwrite {path}? [y]es, [n]o, [a]ll, [s]kip all (none): "


def ask_overwrite(destination: Path, confirm: ConfirmCallback) -> ConflictDecision:
    """Prompt until *confirm* returns a recognised answer."""
    while True:
        answer = confirm(_PROMPT.format(path=destination)).strip().lower()
        decision = _ANSWERS.get(answer)
        if decision is not None:
            return decision
        logger.debug("Unrecognised overwrite answer %r", answer)


def resolve_overwrite(
    state: ConflictDecision,
    destination: Path,
    confirm: ConfirmCallback,
) -> tuple[bool, ConflictDecision]:
    """Decide whether an existing file may be overwritten.

    Returns ``(overwrite, new_state)``.  Once the run-wide state is ``all`` or
    ``none`` no further prompts are issued.
    """
    if state in (ConflictDecision.all, ConflictDecision.none):
        return state is ConflictDecision.all, state
    decision = ask_overwrite(destination, confirm)
    if decision in (ConflictDecision.all, ConflictDecision.none):
        state = decision
    return decision in (ConflictDecision.yes, ConflictDecision.all), state


class PlannedTree:
    """Files and directories a dry run would have created so far.

    Dry runs write nothing, so later entries are probed against this overlay
    on top of the real filesystem to get the same outcome a real run would.
    """

    def __init__(self) -> None:
        self.files: set[Path] = set()
        self.dirs: set[Path] = set()

    def add(self, destination: Path) -> None:
        self.files.add(destination)
        self.dirs.update(destination.parents)

    def is_dir(self, path: Path) -> bool:
        if path in self.dirs:
            return True
        return path not in self.files and path.is_dir()

    def exists(self, path: Path) -> bool:
        # lexists so a broken symlink still counts as occupying the path
        return path in self.files or path in self.dirs or os.path.lexists(path)

    def is_broken_link(self, path: Path) -> bool:
        return path not in self.files and path.is_symlink() and not path.exists()


def _nearest_existing_ancestor(path: Path, view: PlannedTree) -> Path | None:
    current = path
    while not view.exists(current):
        parent = current.parent
        if parent == current:
            return None
        current = parent
    return current


def check_destination(
    destination: Path,
    entry_path: str,
    planned: PlannedTree | None = None,
) -> bool:
    """Probe the filesystem for *destination*.

    Returns ``True`` if a regular file already exists there, ``False`` if the
    path is free.  Raises a ``DestinationConflictError`` if the file cannot be
    placed at all.  *planned* overlays what an in-progress dry run would have
    written.
    """
    view = planned if planned is not None else PlannedTree()
    if view.is_dir(destination):
        raise FileIsDirectoryConflict(destination, entry_path)
    if view.is_broken_link(destination):
        raise BrokenLinkConflict(destination, entry_path)
    if view.exists(destination):
        return True
    ancestor = _nearest_existing_ancestor(destination.parent, view)
    if ancestor is not None and not view.is_dir(ancestor):
        raise AncestorIsFileConflict(ancestor, entry_path)
    return False


def _write_entry(
    reader: PakReader,
    entry: PakEntry,
    destination: Path,
    *,
    overwrite: bool,
    chunk_size: int,
) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("wb" if overwrite else "xb") as out:
        for chunk in reader.stream_bytes(entry, chunk_size):
            out.write(chunk)


def extract_pak(
    archive_path: str | Path,
    destination_root: str | Path,
    options: PakOptions | None = None,
    *,
    confirm: ConfirmCallback = input,
    on_report: ReportCallback = noop_report,
    chunk_size: int | None = None,
) -> ExtractResult:
    """Extract every entry matching *options* below *destination_root*.

    Raises:
        ArchiveNotFoundError, NotAFileError, NotAnArchiveError: if the archive
            cannot be opened.
        TruncatedArchiveError: if an entry's data runs past the end of the file.
    """
    options = options or PakOptions()
    chunk_size = chunk_size or settings.chunk_size
    root = Path(destination_root)
    state = ConflictDecision.unset
    planned = PlannedTree() if options.dry_run else None
    outcomes: list[ExtractOutcome] = []

    def _record(
        entry: PakEntry, dest: Path, action: ExtractAction, msg: str | None = None
    ) -> None:
        outcomes.append(
            ExtractOutcome(path=entry.path, destination=str(dest), action=action, message=msg)
        )

    def _fail(entry: PakEntry, dest: Path, message: str) -> None:
        logger.warning("%s, skipping %s", message, entry.path)
        on_report("error", message)
        on_report("error", f"-> skipping {entry.path}")
        _record(entry, dest, ExtractAction.error, message)

    with open_pak(archive_path) as reader:
        entries = reader.iter_entries(options.path_filter, fold_case=options.case_fold)
        for entry in entries:
            dest = root / entry.path

            if not is_safe_relative(entry.path):
                logger.warning("Skipping path traversal entry: %s", entry.path)
                _fail(entry, dest, f"{entry.path} escapes {root}")
                continue

            try:
                exists = check_destination(dest, entry.path, planned)
            except DestinationConflictError as exc:
                _fail(entry, dest, str(exc))
                continue

            if exists:
                overwrite, state = resolve_overwrite(state, dest, confirm)
                if not overwrite:
                    on_report("skip", entry.path)
                    _record(entry, dest, ExtractAction.skipped)
                    continue
                action = ExtractAction.overwrote
                on_report("overwrite", entry.path)
            else:
                action = ExtractAction.extracted
                on_report("extract", entry.path)

            if planned is not None:
                planned.add(dest)
            else:
                try:
                    _write_entry(reader, entry, dest, overwrite=exists, chunk_size=chunk_size)
                except OSError as exc:
                    _fail(entry, dest, f"{dest}: {exc.strerror or exc}")
                    continue
            logger.debug("%s %s -> %s", action, entry.path, dest)
            _record(entry, dest, action)

    result = ExtractResult(
        archive=str(archive_path),
        destination_root=str(root),
        outcomes=outcomes,
        extracted=sum(1 for o in outcomes if o.action == ExtractAction.extracted),
        overwritten=sum(1 for o in outcomes if o.action == ExtractAction.overwrote),
        skipped=sum(1 for o in outcomes if o.action == ExtractAction.skipped),
        errors=sum(1 for o in outcomes if o.action == ExtractAction.error),
        dry_run=options.dry_run,
    )
    logger.info(
        "Extracted %s to %s (%d new, %d overwritten, %d skipped, %d errors)%s",
        archive_path,
        root,
        result.extracted,
        result.overwritten,
        result.skipped,
        result.errors,
        " [dry run]" if options.dry_run else "",
    )
    return result
