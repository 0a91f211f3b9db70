"""Unit tests for RefStore."""

import pytest

from cndl.errors import (
    InvalidRefNameError,
    RefConflictError,
    RefCorruptedError,
    RefNotFoundError,
)
from cndl.storage.ref_store import RefStore, normalize_ref_name

HASH_A = "a" * 64
HASH_B = "b" * 64


class TestNormalizeRefName:
    """Test ref name normalization."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("heads/main", "heads/main"),
            ("fetch/AAPL", "fetch/aapl"),
            ("  Fetch//MSFT/ ", "fetch/msft"),
            ("fetch\\brk.b", "fetch/brk.b"),
        ],
    )
    def test_normalize(self, name: str, expected: str) -> None:
        assert normalize_ref_name(name) == expected

    @pytest.mark.parametrize("name", ["", "   ", "/", "/etc/passwd", "fetch/../x", "./x", "fetch/.tmp_x"])
    def test_reject_invalid(self, name: str) -> None:
        with pytest.raises(InvalidRefNameError):
            normalize_ref_name(name)


class TestWriteReadRef:
    """Test writing and reading refs."""

    def test_write_then_read(self, refs: RefStore) -> None:
        refs.write_ref("heads/main", HASH_A)
        assert refs.read_ref("heads/main") == HASH_A

    def test_file_content_is_bare_hash(self, refs: RefStore) -> None:
        """Test that the ref file holds exactly the hash."""
        refs.write_ref("fetch/AAPL", HASH_A)
        assert (refs.refs_dir / "fetch" / "aapl").read_text() == HASH_A

    def test_case_insensitive_lookup(self, refs: RefStore) -> None:
        """Test that names differing only in case are the same ref."""
        refs.write_ref("fetch/AAPL", HASH_A)
        assert refs.read_ref("fetch/aapl") == HASH_A
        assert refs.read_ref("FETCH/Aapl") == HASH_A

    def test_overwrite_keeps_latest(self, refs: RefStore) -> None:
        refs.write_ref("heads/main", HASH_A)
        refs.write_ref("heads/main", HASH_B)
        assert refs.read_ref("heads/main") == HASH_B

    def test_creates_namespace_dirs(self, refs: RefStore) -> None:
        refs.write_ref("fetch/nyse/ibm", HASH_A)
        assert (refs.refs_dir / "fetch" / "nyse").is_dir()

    def test_read_missing(self, refs: RefStore) -> None:
        with pytest.raises(RefNotFoundError, match="heads/main"):
            refs.read_ref("heads/main")

    def test_read_namespace_dir_is_missing(self, refs: RefStore) -> None:
        """Test that a directory is not mistaken for a ref."""
        refs.write_ref("fetch/aapl", HASH_A)
        with pytest.raises(RefNotFoundError):
            refs.read_ref("fetch")

    def test_read_ref_or_none(self, refs: RefStore) -> None:
        assert refs.read_ref_or_none("heads/main") is None

    def test_read_strips_trailing_newline(self, refs: RefStore) -> None:
        path = refs.refs_dir / "heads" / "main"
        path.parent.mkdir(parents=True)
        path.write_text(HASH_A + "\n")
        assert refs.read_ref("heads/main") == HASH_A


class TestDeleteAndList:
    """Test ref deletion and listing."""

    def test_delete(self, refs: RefStore) -> None:
        refs.write_ref("fetch/aapl", HASH_A)
        refs.delete_ref("fetch/AAPL")
        assert not refs.ref_exists("fetch/aapl")

    def test_delete_missing(self, refs: RefStore) -> None:
        with pytest.raises(RefNotFoundError):
            refs.delete_ref("fetch/none")

    def test_list_namespace(self, refs: RefStore) -> None:
        refs.write_ref("fetch/MSFT", HASH_B)
        refs.write_ref("fetch/AAPL", HASH_A)
        refs.write_ref("heads/main", HASH_A)

        assert refs.list_refs("fetch") == ["fetch/aapl", "fetch/msft"]
        assert refs.list_refs() == ["fetch/aapl", "fetch/msft", "heads/main"]

    def test_list_missing_namespace(self, refs: RefStore) -> None:
        assert refs.list_refs("fetch") == []

    def test_list_skips_temp_files(self, refs: RefStore) -> None:
        refs.write_ref("fetch/aapl", HASH_A)
        (refs.refs_dir / "fetch" / ".tmp_x").write_text("partial")
        assert refs.list_refs("fetch") == ["fetch/aapl"]


class TestCompareAndSwap:
    """Test conditional ref updates."""

    def test_create_when_absent(self, refs: RefStore) -> None:
        refs.compare_and_swap("heads/main", None, HASH_A)
        assert refs.read_ref("heads/main") == HASH_A

    def test_swap_when_expected(self, refs: RefStore) -> None:
        refs.write_ref("heads/main", HASH_A)
        refs.compare_and_swap("heads/main", HASH_A, HASH_B)
        assert refs.read_ref("heads/main") == HASH_B

    def test_conflict_leaves_ref_untouched(self, refs: RefStore) -> None:
        refs.write_ref("heads/main", HASH_B)

        with pytest.raises(RefConflictError):
            refs.compare_and_swap("heads/main", HASH_A, "c" * 64)

        assert refs.read_ref("heads/main") == HASH_B

    def test_conflict_when_unexpectedly_present(self, refs: RefStore) -> None:
        refs.write_ref("heads/main", HASH_A)
        with pytest.raises(RefConflictError):
            refs.compare_and_swap("heads/main", None, HASH_B)


class TestCorruptRefs:
    """Test ref files with unexpected content."""

    def test_non_ascii_ref(self, refs: RefStore) -> None:
        path = refs.refs_dir / "heads" / "main"
        path.parent.mkdir(parents=True)
        path.write_bytes(b"\xff\xfe garbage")

        with pytest.raises(RefCorruptedError, match="heads/main"):
            refs.read_ref("heads/main")

    def test_cas_treats_empty_ref_as_absent(self, refs: RefStore) -> None:
        path = refs.refs_dir / "heads" / "main"
        path.parent.mkdir(parents=True)
        path.write_text("")

        refs.compare_and_swap("heads/main", None, HASH_A)
        assert refs.read_ref("heads/main") == HASH_A

    def test_cas_empty_expected_matches_missing(self, refs: RefStore) -> None:
        refs.compare_and_swap("heads/main", "", HASH_A)
        assert refs.read_ref("heads/main") == HASH_A
