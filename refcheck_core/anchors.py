# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
Anchor index: per-document anchor tables and the corpus-wide index.

Provides:
- index_document(text): scan one document's text and return its AnchorTable
- iter_headings(text): heading matches in document order (shared with explicit
  anchor injection so both passes see exactly the same headings)
- AnchorIndex: mapping of corpus path -> AnchorTable, populated once before any
  reference is resolved

Recognized anchors
- Headings ("# Title"), producing an implicit slug via SlugGenerator
- A co-located explicit tag on the heading line ('# Title <a name="x"></a>')
- Standalone '<a name="x">' tags and element ids ('<div id="x">')

Fenced code blocks are skipped; a '#' line inside one is not a heading.
"""

from __future__ import annotations

import re
from typing import Dict, Iterator, List, Mapping, Optional

from refcheck_core.interfaces import Anchor, AnchorTable
from refcheck_core.slugs import SlugGenerator

FENCE_SOURCE = r"(?P<fence>^```[\s\S]*?```)"

HEADING_SOURCE = (
    r"^(?P<level>#+)[ \t]*(?P<title_start>.*?)"
    r'(?P<title_tag><a[ \t]+name="(?P<title_anchor>[^">]+)"[^>]*>\s*</a>)?'
    r"(?P<title_end>(?:.(?!<a[ \t]+name))*?)$"
)

TITLE_PATTERN = re.compile(
    FENCE_SOURCE
    + "|" + HEADING_SOURCE
    + r'|<a[ \t]+name="(?P<name_anchor>[^"\n]+?)"'
    + r'|<\w[^>\n]*\sid="(?P<id_anchor>[^"\n]+?)"',
    re.MULTILINE,
)

HEADING_PATTERN = re.compile(FENCE_SOURCE + "|" + HEADING_SOURCE, re.MULTILINE)


def heading_title(match: "re.Match[str]") -> str:
    """Heading text with any co-located anchor tag cut out."""
    return (match.group("title_start") or "") + (match.group("title_end") or "")


def iter_headings(text: str) -> Iterator["re.Match[str]"]:
    for m in HEADING_PATTERN.finditer(text):
        if m.group("fence") is None and heading_title(m):
            yield m


def index_document(text: str) -> AnchorTable:
    anchors: AnchorTable = {}
    slugs = SlugGenerator()
    for m in TITLE_PATTERN.finditer(text):
        if m.group("fence") is not None:
            continue
        title = heading_title(m)
        explicit = m.group("title_anchor") or m.group("name_anchor") or m.group("id_anchor")
        if explicit:
            anchors[explicit] = Anchor(slug=explicit, is_explicit=True, explicit_value=explicit)
        if title:
            implicit = slugs.generate_slug(title)
            existing = anchors.get(implicit)
            if implicit != explicit and not (existing is not None and existing.is_explicit):
                anchors[implicit] = Anchor(slug=implicit, is_explicit=False, explicit_value=explicit)
    return anchors


class AnchorIndex:
    """
    Corpus path -> AnchorTable.

    After population the only mutation is Anchor.is_used flipping to True while
    references are resolved.
    """

    def __init__(self, tables: Optional[Mapping[str, AnchorTable]] = None) -> None:
        self._tables: Dict[str, AnchorTable] = dict(tables or {})

    def add(self, path: str, table: AnchorTable) -> None:
        self._tables[path] = table

    def get(self, path: str) -> Optional[AnchorTable]:
        return self._tables.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def paths(self) -> List[str]:
        return sorted(self._tables)

    def used_pages(self) -> List[str]:
        """Documents with at least one implicit anchor relied upon by a reference."""
        return [p for p in self.paths() if any(a.is_used for a in self._tables[p].values())]


__all__ = [
    "TITLE_PATTERN",
    "HEADING_PATTERN",
    "heading_title",
    "iter_headings",
    "index_document",
    "AnchorIndex",
]
