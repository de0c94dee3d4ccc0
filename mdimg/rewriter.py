"""Per-document orchestration: discover, download, convert, rewrite."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import requests

from .config import ProcessingOptions
from .errors import ConversionError, DownloadError, FilesystemError
from .images import create_session, fetch_image, normalize_image
from .markdown import (
    Replacement,
    apply_replacements,
    format_image_tag,
    iter_image_references,
    network_references,
)
from .models import DocumentContext, DocumentResult, ImageReference, LocalImagePlan
from .planner import (
    apply_conversion,
    build_document_context,
    conversion_target,
    plan_local_image,
)

logger = logging.getLogger("mdimg")


def read_document(path: Path) -> str:
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise FilesystemError(path, exc) from exc


def write_document(path: Path, text: str) -> None:
    try:
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(text)
    except OSError as exc:
        raise FilesystemError(path, exc) from exc


def localize_reference(
    reference: ImageReference,
    index: int,
    context: DocumentContext,
    session: requests.Session,
    options: ProcessingOptions,
) -> Tuple[LocalImagePlan, bool]:
    """Download one reference and convert it if required.

    Returns the final plan and whether a conversion happened.
    """
    url = reference.source_url
    plan = plan_local_image(context, index, url)
    fetch_image(url, plan.local_path, session, options)
    logger.info("Downloaded %s to %s", url, plan.local_path)

    target = conversion_target(plan, url, options)
    if target is None:
        return plan, False

    source_path = plan.local_path
    source_extension = plan.extension
    apply_conversion(plan, target)
    normalize_image(source_path, plan.local_path, target)
    logger.info("Converted %s to %s: %s", source_extension, target, plan.local_path)
    return plan, True


def process_markdown_file(
    file_path: Path,
    options: ProcessingOptions,
    session: Optional[requests.Session] = None,
) -> DocumentResult:
    """Localize every remote image in ``file_path`` and rewrite it in place.

    A failing reference is logged and keeps its original markup. Errors
    reading or writing the document itself raise :class:`FilesystemError`.
    """
    logger.info("Processing %s...", file_path)
    content = read_document(file_path)
    context = build_document_context(file_path)
    result = DocumentResult(path=file_path)

    references = list(iter_image_references(content))
    eligible = network_references(references)
    result.references = len(references)
    result.skipped = len(references) - len(eligible)

    owns_session = session is None
    if session is None:
        session = create_session(options)

    replacements: List[Replacement] = []
    try:
        for index, reference in eligible:
            try:
                plan, converted = localize_reference(
                    reference, index, context, session, options
                )
            except (DownloadError, ConversionError, FilesystemError) as exc:
                logger.error("Failed to localize %s: %s", reference.source_url, exc)
                result.failed += 1
                continue
            result.downloaded += 1
            if converted:
                result.converted += 1
            replacements.append(
                (
                    reference.start,
                    reference.end,
                    format_image_tag(reference.alt_text, plan.relative_link),
                )
            )
    finally:
        if owns_session:
            session.close()

    write_document(file_path, apply_replacements(content, replacements))
    logger.info(
        "Processed %s (%d downloaded, %d converted, %d failed)",
        file_path,
        result.downloaded,
        result.converted,
        result.failed,
    )
    return result
