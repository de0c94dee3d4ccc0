"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Dict, Union

import pytest
import requests

from helpers import FakeResponse, FakeSession, Route, image_bytes
from mdimg.config import ProcessingOptions


@pytest.fixture
def options() -> ProcessingOptions:
    return ProcessingOptions()


@pytest.fixture
def jpg_options() -> ProcessingOptions:
    return ProcessingOptions(convert_all_to_jpg=True)


@pytest.fixture
def png_bytes() -> bytes:
    return image_bytes("PNG")


@pytest.fixture
def webp_bytes() -> bytes:
    return image_bytes("WEBP")


@pytest.fixture
def gif_bytes() -> bytes:
    return image_bytes("GIF", mode="P")


@pytest.fixture
def make_session():
    """Build a FakeSession from a mapping of URL to bytes, status or error."""

    def _make(routes: Dict[str, Union[bytes, int, Exception, FakeResponse]]):
        prepared: Dict[str, Route] = {}
        for url, value in routes.items():
            if isinstance(value, bytes):
                prepared[url] = FakeResponse(content=value)
            elif isinstance(value, int):
                prepared[url] = FakeResponse(status_code=value)
            else:
                prepared[url] = value
        return FakeSession(prepared)

    return _make


@pytest.fixture
def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")
