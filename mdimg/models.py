"""Data models used throughout the localization pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ImageReference:
    """Image embed discovered in the original document text."""

    alt_text: str
    source_url: str
    matched_span: str
    start: int
    end: int


@dataclass(frozen=True)
class DocumentContext:
    """Paths derived once per document."""

    file_path: Path
    containing_directory: Path
    base_name: str
    images_directory: Path


@dataclass
class LocalImagePlan:
    """Where a downloaded image lives and how the document links to it."""

    local_path: Path
    file_name: str
    relative_link: str
    extension: str


@dataclass
class DocumentResult:
    """Counters describing one processed document."""

    path: Path
    references: int = 0
    downloaded: int = 0
    converted: int = 0
    failed: int = 0
    skipped: int = 0
