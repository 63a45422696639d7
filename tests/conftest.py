import struct
from pathlib import Path

import pytest

from pak_manager.archive.pak_format import ENTRY_SIZE, HEADER_SIZE, PAK_MAGIC


def build_pak(files: list[tuple[str | bytes, bytes]]) -> bytes:
    """Assemble a PAK binary by hand: header, contiguous body, then table.

    Paths may be given as raw 56-byte fields to exercise odd padding.
    """
    body = b""
    table = b""
    offset = HEADER_SIZE
    for path, data in files:
        raw_path = path.encode("ascii") if isinstance(path, str) else path
        table += struct.pack("<56sII", raw_path, offset, len(data))
        body += data
        offset += len(data)
    header = struct.pack("<4sII", PAK_MAGIC, offset, len(files) * ENTRY_SIZE)
    return header + body + table


@pytest.fixture
def make_pak(tmp_path):
    def _make(files: list[tuple[str | bytes, bytes]], name: str = "test.pak") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(build_pak(files))
        return path

    return _make


@pytest.fixture
def make_tree(tmp_path):
    def _make(files: dict[str, bytes], name: str = "src") -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        for rel, data in files.items():
            full = root / rel
            full.parent.mkdir(parents=True, exist_ok=True)
            full.write_bytes(data)
        return root

    return _make


@pytest.fixture
def sample_files() -> list[tuple[str, bytes]]:
    return [
        ("emptyfile", b""),
        ("testdir/a.txt", b"a\n"),
        ("testdir/b.txt", b"b\n"),
        ("testdir/c.txt", b"c\n"),
        ("testfile", b"test file\n"),
    ]


@pytest.fixture
def write_paks():
    """Write numbered ``pak<N>.pak`` archives into a search location."""

    def _write(location: Path, paks: dict[int, list[tuple[str | bytes, bytes]]]) -> Path:
        location.mkdir(parents=True, exist_ok=True)
        for index, files in paks.items():
            (location / f"pak{index}.pak").write_bytes(build_pak(files))
        return location

    return _write
