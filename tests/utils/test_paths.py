from pak_manager.utils.paths import canonicalize_path, is_safe_relative, walk_files


class TestCanonicalizePath:
    def test_backslashes(self):
        assert canonicalize_path("maps\\e1m1.bsp") == "maps/e1m1.bsp"

    def test_dot_and_empty_segments(self):
        assert canonicalize_path("./progs//player.mdl") == "progs/player.mdl"

    def test_already_canonical(self):
        assert canonicalize_path("gfx/palette.lmp") == "gfx/palette.lmp"

    def test_leading_slash_kept(self):
        assert canonicalize_path("//etc/passwd") == "/etc/passwd"
        assert not is_safe_relative(canonicalize_path("/etc/passwd"))


class TestIsSafeRelative:
    def test_plain(self):
        assert is_safe_relative("sound/items/r_item1.wav")

    def test_parent_reference(self):
        assert not is_safe_relative("../outside")
        assert not is_safe_relative("maps/../../outside")

    def test_absolute(self):
        assert not is_safe_relative("/etc/passwd")

    def test_empty(self):
        assert not is_safe_relative("")


class TestWalkFiles:
    def test_sorted_by_full_path(self, make_tree):
        root = make_tree(
            {"testfile": b"", "testdir/b.txt": b"", "testdir/a.txt": b"", "emptyfile": b""}
        )
        assert walk_files(root) == ["emptyfile", "testdir/a.txt", "testdir/b.txt", "testfile"]

    def test_skips_directories(self, make_tree):
        root = make_tree({"a": b""})
        (root / "emptydir").mkdir()
        assert walk_files(root) == ["a"]

    def test_exclude(self, make_tree):
        root = make_tree({"a": b"", "out.pak": b""})
        assert walk_files(root, exclude=[root / "out.pak"]) == ["a"]
