"""Command-line entry point for mdimg."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence

from .config import DEFAULT_TIMEOUT, ProcessingOptions
from .errors import FilesystemError
from .models import DocumentResult
from .rewriter import process_markdown_file
from .utils import is_markdown_file, iter_markdown_files

logger = logging.getLogger("mdimg.cli")

EXIT_OK = 0
EXIT_FAILURE = 1


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self.max_level


def configure_logging(verbose: bool = False) -> None:
    """Send progress to stdout and warnings/errors to stderr."""
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.addFilter(_MaxLevelFilter(logging.INFO))
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
        handlers=[stdout_handler, stderr_handler],
        force=True,
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Download remote images referenced by Markdown files and rewrite "
            "the links to point at the local copies."
        ),
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        type=Path,
        help="Markdown file or directory to process (default: current directory)",
    )
    parser.add_argument(
        "-c",
        "--convert-all-to-jpg",
        action="store_true",
        help="Convert every image that is not PNG/JPG to JPG",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Per-request timeout in seconds; 0 disables it (default: %(default)s)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def _process_directory(root: Path, options: ProcessingOptions) -> List[DocumentResult]:
    results: List[DocumentResult] = []
    for path in iter_markdown_files(root):
        try:
            results.append(process_markdown_file(path, options))
        except FilesystemError as exc:
            logger.error("Skipping %s: %s", path, exc)
    return results


def run(args: argparse.Namespace) -> int:
    target = Path(args.path).resolve()
    options = ProcessingOptions(
        convert_all_to_jpg=args.convert_all_to_jpg,
        request_timeout=args.timeout or None,
    )

    logger.info("Target path: %s", target)
    if options.convert_all_to_jpg:
        logger.info("Converting all non-PNG/JPG images to JPG format")

    if not target.exists():
        logger.error("Path does not exist: %s", target)
        return EXIT_FAILURE

    overall_start = time.perf_counter()
    if target.is_dir():
        try:
            results = _process_directory(target, options)
        except OSError as exc:
            logger.error("Failed to scan %s: %s", target, exc)
            return EXIT_FAILURE
    elif is_markdown_file(target):
        try:
            results = [process_markdown_file(target, options)]
        except FilesystemError as exc:
            logger.error("%s", exc)
            return EXIT_FAILURE
    else:
        logger.error("Target must be a directory or a markdown file")
        return EXIT_FAILURE

    total_elapsed = time.perf_counter() - overall_start
    logger.info(
        "Finished in %.2fs (%d document(s), %d image(s) downloaded, %d failed)",
        total_elapsed,
        len(results),
        sum(result.downloaded for result in results),
        sum(result.failed for result in results),
    )
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
