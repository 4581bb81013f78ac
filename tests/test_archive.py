"""Tests for ZIP extraction into student directories."""

import pytest

from conftest import build_zip, patch_zip_headers
from core.archive import extract_archive
from utils.error_handler import ArchiveExtractionError


def test_flat_archive_extracts_in_place(tmp_path, zip_bytes) -> None:
    data = zip_bytes({"main.c": "int main;", "README.md": "hello"})

    extracted = extract_archive(data, tmp_path / "Doe, Jane")

    assert sorted(p.name for p in extracted) == ["README.md", "main.c"]
    assert (tmp_path / "Doe, Jane" / "main.c").read_text() == "int main;"


def test_single_top_level_directory_is_stripped(tmp_path, zip_bytes) -> None:
    data = zip_bytes({"project/": "", "project/main.c": "x", "project/src/util.h": "y"})

    extract_archive(data, tmp_path)

    assert (tmp_path / "main.c").read_text() == "x"
    assert (tmp_path / "src" / "util.h").read_text() == "y"
    assert not (tmp_path / "project").exists()


def test_nothing_stripped_when_files_at_root(tmp_path, zip_bytes) -> None:
    data = zip_bytes({"Makefile": "all:", "lib/util.c": "z"})

    extract_archive(data, tmp_path)

    assert (tmp_path / "Makefile").exists()
    assert (tmp_path / "lib" / "util.c").exists()


def test_strip_can_be_disabled(tmp_path, zip_bytes) -> None:
    extract_archive(zip_bytes({"project/main.c": "x"}), tmp_path, strip_top_level=False)

    assert (tmp_path / "project" / "main.c").exists()


def test_existing_directory_is_merged(tmp_path, zip_bytes) -> None:
    target = tmp_path / "Doe, Jane"
    target.mkdir()
    (target / "notes.txt").write_text("grader notes")
    (target / "main.c").write_text("old")

    extract_archive(zip_bytes({"main.c": "new"}), target)

    assert (target / "main.c").read_text() == "new"
    assert (target / "notes.txt").read_text() == "grader notes"


def test_corrupt_archive_is_an_extraction_error(tmp_path) -> None:
    with pytest.raises(ArchiveExtractionError):
        extract_archive(b"definitely not a zip file", tmp_path / "out")
    assert not (tmp_path / "out").exists()


def test_member_escaping_destination_is_rejected(tmp_path, zip_bytes) -> None:
    data = zip_bytes({"ok.c": "x", "../evil.sh": "rm -rf"})

    with pytest.raises(ArchiveExtractionError):
        extract_archive(data, tmp_path / "out")
    assert not (tmp_path / "evil.sh").exists()


def test_unsupported_compression_is_an_extraction_error(tmp_path) -> None:
    data = patch_zip_headers(build_zip({"main.c": "int main;"}), compress_type=99)

    with pytest.raises(ArchiveExtractionError, match="cannot be extracted"):
        extract_archive(data, tmp_path / "out")


def test_encrypted_member_is_an_extraction_error(tmp_path) -> None:
    data = patch_zip_headers(build_zip({"main.c": "int main;"}), flag_bits=0x1)

    with pytest.raises(ArchiveExtractionError, match="cannot be extracted"):
        extract_archive(data, tmp_path / "out")
