"""Image downloading, sniffing and format normalization."""

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path
from typing import Optional

import requests
from filetype import guess
from PIL import Image

from .config import JPEG_QUALITY, ProcessingOptions
from .errors import ConversionError, DownloadError, FilesystemError
from .planner import JPEG, PNG

logger = logging.getLogger("mdimg")

CHUNK_SIZE = 64 * 1024
SNIFF_BYTES = 261


def create_session(options: ProcessingOptions) -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": options.user_agent})
    return session


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect image type using filetype; returns lowercase extension."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        ext = kind.extension.lower()
        if ext == "jpeg":
            return "jpg"
        return ext
    return None


def _remove_quietly(path: Path) -> None:
    with contextlib.suppress(OSError):
        path.unlink()


def fetch_image(
    url: str,
    destination: Path,
    session: requests.Session,
    options: ProcessingOptions,
) -> Path:
    """Download ``url`` into ``destination`` and return the destination.

    Parent directories are created as needed. Anything other than HTTP 200
    raises :class:`DownloadError` before the destination is touched; a
    transport failure while streaming removes the partial file.
    """
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(destination.parent, exc) from exc

    try:
        response = session.get(url, stream=True, timeout=options.request_timeout)
    except (requests.RequestException, ValueError) as exc:
        raise DownloadError(url, cause=exc) from exc

    with response:
        if response.status_code != 200:
            raise DownloadError(url, status_code=response.status_code)
        head = b""
        try:
            with destination.open("wb") as handle:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    if len(head) < SNIFF_BYTES:
                        head += chunk[: SNIFF_BYTES - len(head)]
                    handle.write(chunk)
                handle.flush()
                os.fsync(handle.fileno())
        except requests.RequestException as exc:
            _remove_quietly(destination)
            raise DownloadError(url, cause=exc) from exc
        except OSError as exc:
            _remove_quietly(destination)
            raise FilesystemError(destination, exc) from exc

    if detect_image_format(head) is None:
        logger.warning(
            "%s does not look like an image (Content-Type=%s)",
            url,
            response.headers.get("Content-Type", ""),
        )
    return destination


def _prepare_for_jpeg(image: Image.Image) -> Image.Image:
    if image.mode in ("RGBA", "LA") or (
        image.mode == "P" and "transparency" in image.info
    ):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def _prepare_for_png(image: Image.Image) -> Image.Image:
    if image.mode == "CMYK":
        return image.convert("RGB")
    if image.mode not in ("1", "L", "LA", "I", "P", "RGB", "RGBA"):
        return image.convert("RGBA")
    return image


def normalize_image(input_path: Path, output_path: Path, target: str) -> Path:
    """Re-encode ``input_path`` as ``target`` at ``output_path``.

    The source file is deleted only after the new file has been written.
    On failure the source is kept and :class:`ConversionError` is raised.
    """
    if target not in (PNG, JPEG):
        raise ValueError(f"Unsupported target format: {target}")
    try:
        with Image.open(input_path) as image:
            image.load()
            if target == JPEG:
                _prepare_for_jpeg(image).save(
                    output_path, format="JPEG", quality=JPEG_QUALITY
                )
            else:
                _prepare_for_png(image).save(output_path, format="PNG")
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        _remove_quietly(output_path)
        raise ConversionError(input_path, exc) from exc

    try:
        input_path.unlink()
    except OSError as exc:
        logger.warning("Could not remove %s after conversion: %s", input_path, exc)
    return output_path
