from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates path canonicalization, per-user data directory resolution,
per-project storage naming and atomic text persistence.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from mvnexplorer.infra.fs import (
    atomic_write_text,
    canonical_path,
    get_effective_pom_output_path,
    get_history_cache_path,
    get_user_data_dir,
    normalize_path,
    read_text_if_exists,
    safe_mkdir,
)

# -----------------------------------------------------------------------------
# PATH RESOLUTION TESTS
# -----------------------------------------------------------------------------

def test_get_user_data_dir_unix() -> None:
    """TC-01: Verify resolution of ~/.mvnexplorer on Unix-like systems."""
    mock_home = "/home/testuser"
    with patch("os.name", "posix"):
        with patch("os.path.expanduser", return_value=mock_home):
            with patch("os.makedirs"):
                path = get_user_data_dir()
                assert path == os.path.abspath(os.path.join(mock_home, ".mvnexplorer"))


def test_normalize_path_fallback_and_expansion(tmp_path: Path) -> None:
    """TC-02: Blank input uses the fallback; results are absolute."""
    assert normalize_path("", str(tmp_path)) == str(tmp_path)
    assert os.path.isabs(normalize_path("relative/dir", str(tmp_path)))


def test_canonical_path_collapses_spellings(tmp_path: Path) -> None:
    """TC-03: Equivalent spellings share one canonical form."""
    base = str(tmp_path / "a" / "b")
    assert canonical_path(base) == canonical_path(str(tmp_path / "a" / "." / "b"))
    assert canonical_path(base) == canonical_path(str(tmp_path / "a" / "c" / ".." / "b"))
    assert canonical_path(base) == canonical_path(base + os.sep)


def test_per_project_storage_paths(tmp_path: Path) -> None:
    """TC-04: Paths are stable per project and distinct across projects."""
    a1 = get_history_cache_path("/ws/a/pom.xml", base_dir=str(tmp_path))
    a2 = get_history_cache_path("/ws/a/./pom.xml", base_dir=str(tmp_path))
    b = get_history_cache_path("/ws/b/pom.xml", base_dir=str(tmp_path))

    assert a1 == a2
    assert a1 != b
    assert a1.endswith(".txt")
    assert os.path.dirname(a1) == str(tmp_path)

    effective = get_effective_pom_output_path("/ws/a/pom.xml", base_dir=str(tmp_path))
    assert os.path.basename(effective).startswith("effective-pom-")
    assert effective.endswith(".xml")


# -----------------------------------------------------------------------------
# PERSISTENCE TESTS
# -----------------------------------------------------------------------------

def test_atomic_write_creates_parents_and_replaces(tmp_path: Path) -> None:
    """TC-05: Content is written in full and leaves no temporary files."""
    target = tmp_path / "nested" / "dir" / "file.txt"

    atomic_write_text(str(target), "first\n")
    atomic_write_text(str(target), "second\n")

    assert target.read_text(encoding="utf-8") == "second\n"
    assert os.listdir(target.parent) == ["file.txt"]


def test_atomic_write_failure_cleans_up(tmp_path: Path) -> None:
    """TC-06: A failed replace raises OSError and removes the staged file."""
    target = tmp_path / "file.txt"
    with patch("mvnexplorer.infra.fs.os.replace", side_effect=OSError("busy")):
        with pytest.raises(OSError):
            atomic_write_text(str(target), "data")

    assert os.listdir(tmp_path) == []


def test_read_text_if_exists(tmp_path: Path) -> None:
    """TC-07: Missing files and blank paths read as None."""
    f = tmp_path / "x.txt"
    assert read_text_if_exists(str(f)) is None
    assert read_text_if_exists("") is None
    assert read_text_if_exists(None) is None

    f.write_text("hello", encoding="utf-8")
    assert read_text_if_exists(str(f)) == "hello"


def test_safe_mkdir(tmp_path: Path) -> None:
    """TC-08: Success flag and error message are reported."""
    ok, err = safe_mkdir(str(tmp_path / "new"))
    assert ok is True and err is None

    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    ok, err = safe_mkdir(str(blocker / "sub"))
    assert ok is False
    assert err
