"""Duplicate path detection across numbered .pak archives.

Quake-engine games load ``pak0.pak``, ``pak1.pak``, ... from each game
directory in ascending order, stopping at the first missing number.  A file in
a later pak shadows the same path in an earlier one, and game directories
searched first shadow those searched later.  This module reproduces that
search order and reports every path provided by more than one archive.
"""

from __future__ import annotations

import logging
import zlib
from collections import defaultdict
from collections.abc import Iterable
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path

from pak_manager.archive.pak_format import PakEntry
from pak_manager.archive.reader import PakReader, open_pak
from pak_manager.config import settings
from pak_manager.schemas.archive import PakOptions
from pak_manager.schemas.duplicates import DuplicateOwner, DuplicateRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Owner:
    archive: Path
    entry: PakEntry

    @property
    def archive_id(self) -> str:
        return str(self.archive)


# ---------------------------------------------------------------------------
# Load order
# ---------------------------------------------------------------------------


def discover_archives(location: str | Path, name_template: str | None = None) -> list[Path]:
    """Return ``pak0.pak``, ``pak1.pak``, ... in *location* up to the first gap."""
    template = name_template or settings.archive_name_template
    location = Path(location)
    found: list[Path] = []
    index = 0
    while (candidate := location / template.format(index=index)).is_file():
        found.append(candidate)
        index += 1
    logger.debug("Discovered %d archives in %s", len(found), location)
    return found


def build_load_order(
    locations: Iterable[str | Path],
    name_template: str | None = None,
) -> list[Path]:
    """Return every discovered archive, highest load priority first.

    Within a location the last-loaded (highest numbered) archive wins, so each
    location's list is reversed; locations keep the caller's order.
    """
    order: list[Path] = []
    for location in locations:
        found = discover_archives(location, name_template)
        found.reverse()
        order.extend(found)
    return order


def _is_excluded(archive: Path, excluded: set[str]) -> bool:
    return not excluded.isdisjoint({str(archive), archive.name, archive.stem})


def _should_report(owners: list[_Owner], excluded: set[str]) -> bool:
    archives = {o.archive for o in owners}
    if len(archives) < 2:
        return False
    return any(not _is_excluded(a, excluded) for a in archives)


def _to_record(
    path: str,
    owners: list[_Owner],
    *,
    identical: bool = False,
    checksum: int | None = None,
) -> DuplicateRecord:
    return DuplicateRecord(
        path=path,
        owners=[
            DuplicateOwner(archive=o.archive_id, offset=o.entry.offset, size=o.entry.size)
            for o in owners
        ],
        identical=identical,
        checksum=checksum,
    )


# ---------------------------------------------------------------------------
# Checksums
# ---------------------------------------------------------------------------


def entry_checksum(reader: PakReader, entry: PakEntry, chunk_size: int | None = None) -> int:
    """CRC-32 of an entry's contents, computed in streaming fashion."""
    crc = 0
    for chunk in reader.stream_bytes(entry, chunk_size):
        crc = zlib.crc32(chunk, crc)
    return crc


def _identical_groups(
    path: str,
    owners: list[_Owner],
    readers: dict[Path, PakReader],
    stack: ExitStack,
    excluded: set[str],
) -> list[DuplicateRecord]:
    by_size: dict[int, list[_Owner]] = defaultdict(list)
    for owner in owners:
        by_size[owner.entry.size].append(owner)

    records: list[DuplicateRecord] = []
    for members in by_size.values():
        if len(members) < 2:
            continue
        by_crc: dict[int, list[_Owner]] = defaultdict(list)
        for owner in members:
            reader = readers.get(owner.archive)
            if reader is None:
                reader = readers[owner.archive] = stack.enter_context(open_pak(owner.archive))
            by_crc[entry_checksum(reader, owner.entry)].append(owner)
        # mismatching checksums are dropped: same name, different content
        for crc, group in by_crc.items():
            if _should_report(group, excluded):
                records.append(_to_record(path, group, identical=True, checksum=crc))
    return records


# ---------------------------------------------------------------------------
# Core API
# ---------------------------------------------------------------------------


def _collect_owners(
    archives: Iterable[Path],
    options: PakOptions,
) -> dict[str, list[_Owner]]:
    """Map each (optionally case-folded) path to its owners in priority order."""
    owners: dict[str, list[_Owner]] = defaultdict(list)
    for archive in archives:
        with open_pak(archive) as reader:
            for entry in reader.iter_entries(options.path_filter, fold_case=options.case_fold):
                owners[entry.path].append(_Owner(archive=archive, entry=entry))
    return owners


def find_duplicates(
    search_locations: Iterable[str | Path] | None = None,
    options: PakOptions | None = None,
) -> list[DuplicateRecord]:
    """Report paths present in more than one archive across *search_locations*.

    Paths are returned in the order they are first met while walking the load
    order, owners highest priority first.  With ``options.use_checksum`` only
    groups of byte-identical entries are returned, flagged ``identical``.
    """
    options = options or PakOptions()
    locations = list(search_locations) if search_locations is not None else settings.search_paths
    excluded = set(options.exclude_archives)

    load_order = build_load_order(locations)
    logger.info(
        "Checking %d archives in %d locations for duplicates", len(load_order), len(locations)
    )
    owners_by_path = _collect_owners(load_order, options)

    duplicates = {
        path: owners
        for path, owners in owners_by_path.items()
        if _should_report(owners, excluded)
    }
    if not options.use_checksum:
        return [_to_record(path, owners) for path, owners in duplicates.items()]

    records: list[DuplicateRecord] = []
    readers: dict[Path, PakReader] = {}
    with ExitStack() as stack:
        for path, owners in duplicates.items():
            records.extend(_identical_groups(path, owners, readers, stack, excluded))
    logger.info("Found %d identical duplicate groups", len(records))
    return records
