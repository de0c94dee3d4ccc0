"""Exceptions raised by the localization pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class MdimgError(Exception):
    """Base exception for mdimg."""


class DownloadError(MdimgError):
    """Remote image could not be retrieved."""

    def __init__(
        self,
        url: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        self.cause = cause
        if status_code is not None:
            detail = f"HTTP status {status_code}"
        else:
            detail = str(cause) if cause else "unknown error"
        super().__init__(f"Failed to download {url}: {detail}")


class ConversionError(MdimgError):
    """Image could not be decoded or re-encoded."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to convert {path}: {cause}")


class FilesystemError(MdimgError):
    """Reading, writing or creating a local path failed."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Filesystem error for {path}: {cause}")
