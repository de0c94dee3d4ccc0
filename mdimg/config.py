"""Configuration objects and constants for image localization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_EXTENSION = ".jpg"
ANIMATED_WEBP_EXTENSION = ".awebp"
JPEG_QUALITY = 90
PASSTHROUGH_EXTENSIONS = {".png", ".jpg", ".jpeg"}
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; mdimg/0.1)"


@dataclass(frozen=True)
class ProcessingOptions:
    """Run-wide settings, built once by the CLI and passed down explicitly."""

    convert_all_to_jpg: bool = False
    request_timeout: Optional[float] = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
