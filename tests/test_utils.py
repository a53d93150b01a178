"""
Unit tests for filetool.utils module.

Tests utility functions in isolation.
"""

import hashlib
import os
from datetime import datetime
from pathlib import Path

import pytest

from filetool.utils import (
    compute_file_hash,
    delete_file,
    format_date_iso,
    format_file_size,
    get_extension,
    get_file_created,
    get_file_size_bytes,
    get_stem,
    list_files,
    month_folder,
    move_file,
    read_file_record,
    rename_file,
)


class TestFormatFileSize:
    """Tests for format_file_size function."""

    def test_bytes(self):
        assert format_file_size(0) == "0 B"
        assert format_file_size(100) == "100 B"
        assert format_file_size(1023) == "1023 B"

    def test_kilobytes(self):
        assert format_file_size(1024) == "1.00 KB"
        assert format_file_size(1536) == "1.50 KB"

    def test_megabytes(self):
        assert format_file_size(1024 * 1024 * 5) == "5.00 MB"

    def test_gigabytes(self):
        assert format_file_size(1024 ** 3 * 2) == "2.00 GB"


class TestPathHelpers:
    """Tests for extension and stem helpers."""

    def test_get_extension(self):
        assert get_extension("photo.JPG") == ".jpg"
        assert get_extension(Path("/a/b/archive.tar.gz")) == ".gz"
        assert get_extension("README") == ""
        assert get_extension(".bashrc") == ""

    def test_get_stem(self):
        assert get_stem("photo.JPG") == "photo"
        assert get_stem("archive.tar.gz") == "archive.tar"
        assert get_stem("README") == "README"


class TestDates:
    """Tests for date formatting helpers."""

    def test_format_date_iso(self):
        assert format_date_iso(datetime(2024, 1, 5, 23, 59)) == "2024-01-05"

    def test_month_folder(self):
        assert month_folder(datetime(2024, 2, 29)) == Path("2024") / "February"
        assert month_folder(datetime(999, 12, 1)) == Path("0999") / "December"

    def test_get_file_created_matches_record(self, temp_dir: Path):
        f = temp_dir / "a.txt"
        f.write_text("hello")

        assert read_file_record(f).created_at == get_file_created(f)


class TestReadFileRecord:
    """Tests for read_file_record function."""

    def test_fields(self, temp_dir: Path):
        f = temp_dir / "Report.PDF"
        f.write_bytes(b"12345")

        record = read_file_record(f)

        assert record.path == f
        assert record.extension == ".pdf"
        assert record.size_bytes == 5
        assert record.stem == "Report"

    def test_injected_created_at(self, temp_dir: Path, fixed_created):
        f = temp_dir / "a.txt"
        f.write_text("x")

        assert read_file_record(f, fixed_created).created_at == datetime(2024, 1, 1, 12, 0, 0)

    def test_missing_file_raises(self, temp_dir: Path):
        with pytest.raises(OSError):
            read_file_record(temp_dir / "missing.txt")


class TestComputeFileHash:
    """Tests for compute_file_hash function."""

    def test_sha256_of_content(self, temp_dir: Path):
        f = temp_dir / "a.bin"
        f.write_bytes(b"abc" * 1000)

        assert compute_file_hash(f, buffer_size=7) == hashlib.sha256(b"abc" * 1000).hexdigest()

    def test_identical_content_same_hash(self, temp_dir: Path):
        a = temp_dir / "a.txt"
        b = temp_dir / "b.dat"
        a.write_text("same")
        b.write_text("same")

        assert compute_file_hash(a) == compute_file_hash(b)

    def test_different_content_different_hash(self, temp_dir: Path):
        a = temp_dir / "a.txt"
        b = temp_dir / "b.txt"
        a.write_text("one")
        b.write_text("two")

        assert compute_file_hash(a) != compute_file_hash(b)


class TestListFiles:
    """Tests for list_files function."""

    @pytest.fixture
    def tree(self, temp_dir: Path) -> Path:
        (temp_dir / "b.txt").write_text("b")
        (temp_dir / "a.txt").write_text("a")
        sub = temp_dir / "m"
        sub.mkdir()
        (sub / "inner.txt").write_text("inner")
        deep = sub / "deep"
        deep.mkdir()
        (deep / "z.txt").write_text("z")
        (temp_dir / "z.txt").write_text("z")
        return temp_dir

    def test_top_level_only(self, tree: Path):
        assert list_files(tree) == [tree / "a.txt", tree / "b.txt", tree / "z.txt"]

    def test_recursive_is_depth_first_in_name_order(self, tree: Path):
        assert list_files(tree, recursive=True) == [
            tree / "a.txt",
            tree / "b.txt",
            tree / "m" / "deep" / "z.txt",
            tree / "m" / "inner.txt",
            tree / "z.txt",
        ]

    def test_excludes_directories(self, tree: Path):
        assert all(p.is_file() for p in list_files(tree, recursive=True))

    def test_missing_directory_is_empty(self, temp_dir: Path):
        assert list_files(temp_dir / "missing", recursive=True) == []

    def test_skips_symlinks(self, temp_dir: Path):
        target = temp_dir / "real.txt"
        target.write_text("x")
        os.symlink(target, temp_dir / "link.txt")
        os.symlink(temp_dir, temp_dir / "loop")

        assert list_files(temp_dir, recursive=True) == [target]


class TestFilePrimitives:
    """Tests for move, rename and delete wrappers."""

    def test_move_creates_parents(self, temp_dir: Path):
        src = temp_dir / "a.txt"
        src.write_text("a")
        dst = temp_dir / "x" / "y" / "a.txt"

        move_file(src, dst)

        assert not src.exists()
        assert dst.read_text() == "a"

    def test_rename_replaces_existing(self, temp_dir: Path):
        old = temp_dir / "old.txt"
        old.write_text("new content")
        taken = temp_dir / "taken.txt"
        taken.write_text("old content")

        rename_file(old, taken)

        assert not old.exists()
        assert taken.read_text() == "new content"

    def test_delete(self, temp_dir: Path):
        f = temp_dir / "a.txt"
        f.write_text("a")

        delete_file(f)

        assert not f.exists()

    def test_get_file_size_bytes(self, temp_dir: Path):
        f = temp_dir / "a.bin"
        f.write_bytes(b"x" * 42)

        assert get_file_size_bytes(f) == 42
