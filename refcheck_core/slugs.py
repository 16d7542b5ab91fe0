# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
Heading-to-anchor slug generation (GitHub-style).

- SlugGenerator.generate_slug(heading): slug for a heading, de-duplicated against the
  headings already seen by this generator ("foo", "foo-1", "foo-2", ...)
- SlugGenerator.sluggify(value): the bare normalization, no de-duplication
- normalize_anchor_value(value): strip percent escapes and HTML entities, then sluggify

One generator instance per document; feeding headings in document order reproduces the
anchors a renderer would assign.
"""

from __future__ import annotations

import re
from typing import Dict

_TAG_RE = re.compile(r"<[^>]*>")
_PUNCT_RE = re.compile(r"[^\w\s-]", re.UNICODE)
_SPACE_RE = re.compile(r"\s+", re.UNICODE)
_DASHES_RE = re.compile(r"-{2,}")

_PERCENT_ESCAPE_RE = re.compile(r"%[0-9A-Fa-f]{2}")
_HTML_ENTITY_RE = re.compile(r"&#?[0-9A-Za-z]+;")


class SlugGenerator:
    """Stateful per-document slug generator."""

    def __init__(self) -> None:
        self._occurrences: Dict[str, int] = {}

    def generate_slug(self, heading: str) -> str:
        slug = original = self.sluggify(heading)
        while slug in self._occurrences:
            self._occurrences[original] += 1
            slug = f"{original}-{self._occurrences[original]}"
        self._occurrences[slug] = 0
        return slug

    @staticmethod
    def sluggify(value: str) -> str:
        value = _TAG_RE.sub("", value.strip().lower())
        value = _PUNCT_RE.sub("", value)
        value = _SPACE_RE.sub("-", value.strip())
        return _DASHES_RE.sub("-", value)


def normalize_anchor_value(value: str) -> str:
    """
    Reduce a hand-written anchor to the slug it most likely meant.

    Percent escapes and HTML entities usually stand in for characters a slug drops
    anyway, so they are removed rather than decoded.
    """
    value = _PERCENT_ESCAPE_RE.sub("", value)
    value = _HTML_ENTITY_RE.sub("", value)
    return SlugGenerator.sluggify(value)


__all__ = ["SlugGenerator", "normalize_anchor_value"]
