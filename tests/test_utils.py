"""Tests for path helpers and Markdown discovery."""

import logging
import os
from pathlib import Path, PureWindowsPath

import pytest

from mdimg.utils import is_markdown_file, iter_markdown_files, to_posix


def test_to_posix_normalizes_separators():
    assert to_posix(PureWindowsPath("post") / "0.png") == "post/0.png"


def test_is_markdown_file_case_insensitive():
    assert is_markdown_file(Path("README.MD"))
    assert is_markdown_file(Path("notes.md"))
    assert not is_markdown_file(Path("notes.markdown"))
    assert not is_markdown_file(Path("md"))


def test_iter_markdown_files_recurses(tmp_path):
    (tmp_path / "a.md").write_text("a", encoding="utf-8")
    (tmp_path / "skip.txt").write_text("x", encoding="utf-8")
    nested = tmp_path / "sub" / "deeper"
    nested.mkdir(parents=True)
    (nested / "B.MD").write_text("b", encoding="utf-8")
    (tmp_path / "sub" / "dir.md").mkdir()

    found = sorted(iter_markdown_files(tmp_path))

    assert found == sorted([tmp_path / "a.md", nested / "B.MD"])


def test_iter_markdown_files_empty_directory(tmp_path):
    assert list(iter_markdown_files(tmp_path)) == []


def _fail_for(monkeypatch, blocked):
    real_scandir = os.scandir

    def scandir(path):
        if Path(path) == blocked:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", scandir)


def test_unreadable_subdirectory_is_skipped(tmp_path, monkeypatch, caplog):
    locked = tmp_path / "locked"
    locked.mkdir()
    (locked / "hidden.md").write_text("h", encoding="utf-8")
    other = tmp_path / "other"
    other.mkdir()
    (other / "b.md").write_text("b", encoding="utf-8")
    (tmp_path / "a.md").write_text("a", encoding="utf-8")
    _fail_for(monkeypatch, locked)

    with caplog.at_level(logging.ERROR, logger="mdimg"):
        found = sorted(iter_markdown_files(tmp_path))

    assert found == sorted([tmp_path / "a.md", other / "b.md"])
    assert "Skipping directory" in caplog.text


def test_unreadable_root_raises(tmp_path, monkeypatch):
    _fail_for(monkeypatch, tmp_path)

    with pytest.raises(PermissionError):
        iter_markdown_files(tmp_path)
