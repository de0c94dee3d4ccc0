"""Utility helpers for path handling and document discovery."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath
from typing import Iterator, List

logger = logging.getLogger("mdimg")

MARKDOWN_SUFFIX = ".md"


def to_posix(path: PurePath) -> str:
    """Render a relative path with forward slashes on every platform."""
    return str(path).replace("\\", "/")


def is_markdown_file(path: Path) -> bool:
    return path.name.lower().endswith(MARKDOWN_SUFFIX)


def _list_directory(path: Path) -> List[os.DirEntry]:
    with os.scandir(path) as entries:
        return list(entries)


def _walk(entries: List[os.DirEntry]) -> Iterator[Path]:
    for entry in entries:
        path = Path(entry.path)
        if entry.is_dir():
            try:
                children = _list_directory(path)
            except OSError as exc:
                logger.error("Skipping directory %s: %s", path, exc)
                continue
            yield from _walk(children)
        elif entry.is_file() and is_markdown_file(path):
            yield path


def iter_markdown_files(root: Path) -> Iterator[Path]:
    """Walk ``root`` depth-first and yield every Markdown file beneath it.

    Entries are visited in directory-listing order. The root is listed
    eagerly, so an unreadable root raises ``OSError`` at call time; an
    unreadable subdirectory is logged and its subtree skipped.
    """
    return _walk(_list_directory(root))
