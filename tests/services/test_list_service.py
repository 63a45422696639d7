import io

import pytest

from pak_manager.archive.errors import ArchiveNotFoundError
from pak_manager.schemas.archive import PakOptions
from pak_manager.services.list_service import list_pak, stream_to


class TestListPak:
    def test_listing_totals(self, make_pak, sample_files):
        result = list_pak(make_pak(sample_files))
        assert result.file_count == 5
        assert result.total_size == 16
        assert [(e.size, e.offset, e.path) for e in result.entries] == [
            (0, 12, "emptyfile"),
            (2, 12, "testdir/a.txt"),
            (2, 14, "testdir/b.txt"),
            (2, 16, "testdir/c.txt"),
            (10, 18, "testfile"),
        ]

    def test_idempotent(self, make_pak, sample_files):
        pak = make_pak(sample_files)
        assert list_pak(pak) == list_pak(pak)

    def test_filtered_totals(self, make_pak, sample_files):
        result = list_pak(make_pak(sample_files), PakOptions(path_filter="testdir"))
        assert result.file_count == 3
        assert result.total_size == 6

    def test_case_fold(self, make_pak):
        result = list_pak(make_pak([("GFX/Conback.lmp", b"")]), PakOptions(case_fold=True))
        assert result.entries[0].path == "gfx/conback.lmp"

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveNotFoundError):
            list_pak(tmp_path / "missing.pak")


class TestStreamTo:
    def test_single_file(self, make_pak, sample_files):
        sink = io.BytesIO()
        result = stream_to(make_pak(sample_files), PakOptions(path_filter="testfile"), sink)
        assert sink.getvalue() == b"test file\n"
        assert result.files_written == 1

    def test_multiple_files_in_table_order(self, make_pak, sample_files):
        sink = io.BytesIO()
        result = stream_to(make_pak(sample_files), PakOptions(path_filter=r"\.txt$"), sink)
        assert sink.getvalue() == b"a\nb\nc\n"
        assert result.files_written == 3
        assert result.bytes_written == 6

    def test_small_chunks(self, make_pak):
        payload = b"0123456789" * 50
        sink = io.BytesIO()
        stream_to(make_pak([("big", payload)]), None, sink, chunk_size=7)
        assert sink.getvalue() == payload
