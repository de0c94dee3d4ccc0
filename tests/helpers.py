"""Test doubles for HTTP sessions and image fixtures."""

from __future__ import annotations

import io
from typing import Dict, Iterator, List, Optional, Union

from PIL import Image


class FakeResponse:
    """Minimal stand-in for a streamed ``requests.Response``."""

    def __init__(
        self,
        status_code: int = 200,
        content: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.status_code = status_code
        self.content = content
        self.headers = headers or {"Content-Type": "image/png"}
        self.error = error
        self.closed = False

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        for offset in range(0, len(self.content), chunk_size):
            yield self.content[offset : offset + chunk_size]
        if self.error is not None:
            raise self.error

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


Route = Union[FakeResponse, Exception]


class FakeSession:
    """Serves canned responses keyed by URL and records every request."""

    def __init__(self, routes: Optional[Dict[str, Route]] = None) -> None:
        self.routes: Dict[str, Route] = dict(routes or {})
        self.requested: List[str] = []
        self.timeouts: List[Optional[float]] = []
        self.closed = False

    def get(self, url: str, stream: bool = False, timeout=None) -> FakeResponse:
        self.requested.append(url)
        self.timeouts.append(timeout)
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(status_code=404, content=b"")
        if isinstance(route, Exception):
            raise route
        return route

    def close(self) -> None:
        self.closed = True


def image_bytes(fmt: str, mode: str = "RGB", size=(8, 8)) -> bytes:
    """Encode a small solid image with Pillow."""
    color = (200, 40, 40, 128) if mode == "RGBA" else (200, 40, 40)
    if mode in ("L", "P"):
        color = 120
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


