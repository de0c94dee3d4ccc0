"""Local naming and format decisions for downloaded images."""

from __future__ import annotations

import posixpath
import re
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from .config import (
    ANIMATED_WEBP_EXTENSION,
    DEFAULT_EXTENSION,
    PASSTHROUGH_EXTENSIONS,
    ProcessingOptions,
)
from .errors import DownloadError
from .models import DocumentContext, LocalImagePlan
from .utils import to_posix

PNG = "png"
JPEG = "jpeg"

TARGET_EXTENSIONS = {PNG: ".png", JPEG: ".jpg"}


def build_document_context(file_path: Path) -> DocumentContext:
    """Derive the per-document image directory (``<dir>/<stem>``)."""
    containing_directory = file_path.parent
    base_name = file_path.stem
    return DocumentContext(
        file_path=file_path,
        containing_directory=containing_directory,
        base_name=base_name,
        images_directory=containing_directory / base_name,
    )


def url_path(url: str) -> str:
    """Return the path component of ``url``.

    Malformed URLs raise :class:`DownloadError` so callers treat them like
    any other unreachable reference.
    """
    try:
        return urlparse(url).path
    except ValueError as exc:
        raise DownloadError(url, cause=exc) from exc


def url_extension(url: str) -> str:
    """Return the extension of the URL path, or an empty string."""
    name = posixpath.basename(url_path(url))
    extension = posixpath.splitext(name)[1]
    return "" if extension == "." else extension


def plan_local_image(
    context: DocumentContext, index: int, url: str
) -> LocalImagePlan:
    """Compute the pre-conversion location and link for a reference."""
    extension = url_extension(url) or DEFAULT_EXTENSION
    file_name = f"{index}{extension}"
    return LocalImagePlan(
        local_path=context.images_directory / file_name,
        file_name=file_name,
        relative_link=to_posix(Path(context.base_name) / file_name),
        extension=extension,
    )


def is_animated_webp(extension: str, url: str) -> bool:
    lowered = extension.lower()
    if lowered == ANIMATED_WEBP_EXTENSION:
        return True
    if lowered == ".webp":
        name = posixpath.basename(url_path(url))
        return name.lower().endswith(ANIMATED_WEBP_EXTENSION)
    return False


def conversion_target(
    plan: LocalImagePlan, url: str, options: ProcessingOptions
) -> Optional[str]:
    """Decide which format, if any, the downloaded file must be re-encoded to.

    Animated WebP files always need conversion (JPEG when everything is
    forced to JPEG, PNG otherwise). With ``convert_all_to_jpg`` any other
    extension outside png/jpg/jpeg is converted to JPEG.
    """
    if is_animated_webp(plan.extension, url):
        return JPEG if options.convert_all_to_jpg else PNG
    if (
        options.convert_all_to_jpg
        and plan.extension.lower() not in PASSTHROUGH_EXTENSIONS
    ):
        return JPEG
    return None


def _swap_extension(value: str, old: str, new: str) -> str:
    return re.sub(re.escape(old) + "$", new, value, flags=re.IGNORECASE)


def apply_conversion(plan: LocalImagePlan, target: str) -> LocalImagePlan:
    """Rewrite the plan in place so it points at the converted file."""
    new_extension = TARGET_EXTENSIONS[target]
    old_extension = plan.extension
    plan.local_path = plan.local_path.with_name(
        _swap_extension(plan.local_path.name, old_extension, new_extension)
    )
    plan.relative_link = _swap_extension(
        plan.relative_link, old_extension, new_extension
    )
    plan.file_name = plan.local_path.name
    plan.extension = new_extension
    return plan
