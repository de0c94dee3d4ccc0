"""Markdown image discovery and link substitution helpers."""

from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Sequence, Tuple

from .models import ImageReference

IMAGE_PATTERN = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")

Replacement = Tuple[int, int, str]


def iter_image_references(text: str) -> Iterator[ImageReference]:
    """Yield every ``![alt](url)`` embed in order of appearance."""
    for match in IMAGE_PATTERN.finditer(text):
        yield ImageReference(
            alt_text=match.group(1),
            source_url=match.group(2),
            matched_span=match.group(0),
            start=match.start(),
            end=match.end(),
        )


def is_network_url(url: str) -> bool:
    # Case-sensitive: "HTTP://" links are never downloaded.
    return url.startswith("http")


def network_references(
    references: Iterable[ImageReference],
) -> List[Tuple[int, ImageReference]]:
    """Pair each downloadable reference with its 0-based naming index."""
    eligible = (ref for ref in references if is_network_url(ref.source_url))
    return list(enumerate(eligible))


def format_image_tag(alt_text: str, link: str) -> str:
    return f"![{alt_text}]({link})"


def apply_replacements(text: str, replacements: Sequence[Replacement]) -> str:
    """Splice replacement strings into ``text`` by original character span.

    Spans refer to offsets in the unmodified text and must not overlap.
    Regions outside the spans are copied through unchanged.
    """
    if not replacements:
        return text
    pieces: List[str] = []
    cursor = 0
    for start, end, new_text in sorted(replacements):
        if start < cursor:
            raise ValueError(f"Overlapping replacement at offset {start}")
        pieces.append(text[cursor:start])
        pieces.append(new_text)
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces)
