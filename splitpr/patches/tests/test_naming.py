from pathlib import Path

import pytest

from splitpr.exceptions import NameExhaustedError
from splitpr.patches.models import NULL_DEVICE, PatchRecord
from splitpr.patches.naming import (
    allocate_path,
    base_identity,
    candidate_names,
    create_patch_file,
    sanitize_name,
)


def _record(old: str = "foo", new: str = "bar", contents: str = "nothing") -> PatchRecord:
    return PatchRecord(old_path=old, new_path=new, contents=contents)


class TestBaseIdentity:
    """Tests for base_identity."""

    def test_prefers_new_path(self):
        """The new path names the output normally."""
        assert base_identity(_record("foo", "bar")) == "bar"

    def test_deleted_file_uses_old_path(self):
        """A /dev/null new path falls back to the old path."""
        assert base_identity(_record("foo", NULL_DEVICE)) == "foo"

    def test_created_file_uses_new_path(self):
        """A /dev/null old path does not matter."""
        assert base_identity(_record(NULL_DEVICE, "bar")) == "bar"

    def test_custom_null_device(self):
        """The sentinel can be configured."""
        assert base_identity(_record("foo", "NUL"), null_device="NUL") == "foo"


class TestSanitizeName:
    """Tests for sanitize_name."""

    def test_example_identity(self):
        """Separators, brackets and dots all become underscores."""
        assert sanitize_name("a/b<c>.txt") == "a_b_c__txt"

    def test_every_forbidden_character(self):
        """Each forbidden character maps to one underscore."""
        assert sanitize_name('/<>:"\\|?*.') == "_" * 10

    def test_plain_name_unchanged(self):
        """Names without forbidden characters pass through."""
        assert sanitize_name("Makefile-2_x") == "Makefile-2_x"

    def test_directory_structure_flattened(self):
        """Nested paths become one file name."""
        assert sanitize_name("src/util/git.py") == "src_util_git_py"


class TestCandidateNames:
    """Tests for candidate_names."""

    def test_sequence(self):
        """Unnumbered name first, then -1, -2, ..."""
        names = list(candidate_names("base", ".diff", max_attempts=4))
        assert names == ["base.diff", "base-1.diff", "base-2.diff", "base-3.diff"]

    def test_single_attempt(self):
        """max_attempts=1 offers only the plain name."""
        assert list(candidate_names("base", ".diff", max_attempts=1)) == ["base.diff"]


class TestAllocatePath:
    """Tests for allocate_path."""

    def test_simple_filename(self, tmp_path: Path):
        """An empty directory gives the plain name."""
        assert allocate_path(_record(), tmp_path) == tmp_path / "bar.diff"

    def test_dev_null(self, tmp_path: Path):
        """Deleted files are named after the old path."""
        record = _record("foo", NULL_DEVICE)
        assert allocate_path(record, tmp_path) == tmp_path / "foo.diff"

    def test_file_with_extension(self, tmp_path: Path):
        """A dot in the name does not clash with the extension."""
        record = _record("foo.diff", "bar.diff")
        assert allocate_path(record, tmp_path) == tmp_path / "bar_diff.diff"

    def test_existing_file_gets_suffix(self, tmp_path: Path):
        """A taken name moves on to -1."""
        (tmp_path / "bar.diff").write_text("taken")
        assert allocate_path(_record(), tmp_path) == tmp_path / "bar-1.diff"

    def test_counts_up_until_free(self, tmp_path: Path):
        """-1 taken as well gives -2."""
        (tmp_path / "bar.diff").write_text("taken")
        (tmp_path / "bar-1.diff").write_text("taken")
        assert allocate_path(_record(), tmp_path) == tmp_path / "bar-2.diff"

    def test_directory_counts_as_taken(self, tmp_path: Path):
        """Any existing entry blocks the name, not just files."""
        (tmp_path / "bar.diff").mkdir()
        assert allocate_path(_record(), tmp_path) == tmp_path / "bar-1.diff"

    def test_reserved_paths_skipped(self, tmp_path: Path):
        """Reserved paths are treated as taken."""
        reserved = {tmp_path / "bar.diff"}
        assert allocate_path(_record(), tmp_path, reserved=reserved) == tmp_path / "bar-1.diff"

    def test_gives_up_after_max_attempts(self, tmp_path: Path):
        """Exhausting the bound raises NameExhaustedError."""
        (tmp_path / "bar.diff").write_text("taken")
        (tmp_path / "bar-1.diff").write_text("taken")

        with pytest.raises(NameExhaustedError) as exc_info:
            allocate_path(_record(), tmp_path, max_attempts=2)

        assert exc_info.value.base_name == "bar"
        assert exc_info.value.attempts == 2

    def test_does_not_create_file(self, tmp_path: Path):
        """Allocation only probes."""
        path = allocate_path(_record(), tmp_path)
        assert not path.exists()

    def test_defaults_to_current_directory(self, tmp_path: Path, monkeypatch):
        """Without out_dir the name is relative to the working directory."""
        monkeypatch.chdir(tmp_path)
        assert allocate_path(_record()) == Path("bar.diff")


class TestCreatePatchFile:
    """Tests for create_patch_file."""

    def test_creates_file(self, tmp_path: Path):
        """The returned handle writes to the returned path."""
        path, fh = create_patch_file(_record(), tmp_path)
        with fh:
            fh.write(b"data")

        assert path == tmp_path / "bar.diff"
        assert path.read_bytes() == b"data"

    def test_existing_file_untouched(self, tmp_path: Path):
        """A taken name is skipped and its content left alone."""
        existing = tmp_path / "bar.diff"
        existing.write_text("keep me")

        path, fh = create_patch_file(_record(), tmp_path)
        fh.close()

        assert path == tmp_path / "bar-1.diff"
        assert existing.read_text() == "keep me"

    def test_repeated_calls_never_collide(self, tmp_path: Path):
        """Each call claims a new name."""
        paths = []
        for _ in range(3):
            path, fh = create_patch_file(_record(), tmp_path)
            fh.close()
            paths.append(path.name)

        assert paths == ["bar.diff", "bar-1.diff", "bar-2.diff"]

    def test_gives_up_after_max_attempts(self, tmp_path: Path):
        """Exhausting the bound raises NameExhaustedError."""
        (tmp_path / "bar.diff").write_text("taken")

        with pytest.raises(NameExhaustedError):
            create_patch_file(_record(), tmp_path, max_attempts=1)

    def test_missing_directory_raises_oserror(self, tmp_path: Path):
        """Errors other than an existing name propagate."""
        with pytest.raises(FileNotFoundError):
            create_patch_file(_record(), tmp_path / "missing")

    def test_custom_extension(self, tmp_path: Path):
        """The extension is configurable."""
        path, fh = create_patch_file(_record(), tmp_path, extension=".patch")
        fh.close()
        assert path.name == "bar.patch"
