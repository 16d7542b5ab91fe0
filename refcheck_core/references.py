# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
Reference extraction from raw document text.

A single composite pattern is scanned left to right. Code samples (fenced blocks and
[sourcecode] tags) are alternatives of the same pattern, so they are consumed as a
unit and nothing inside them is reported. Link-bearing alternatives:

- <a ... href="path?query#anchor">      -> ReferenceKind.HYPERLINK_TAG
- [text](path?query#anchor)             -> ReferenceKind.BRACKET_LINK
- g.doc('path')                         -> ReferenceKind.LINK_HELPER (no anchor slot)

Query strings are matched but left outside both the link and the anchor spans, so a
rewrite of either keeps the query intact. Targets containing ':' (schemes such as
https: or mailto:) or '{' (template expressions) are not matched.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional, Tuple

from refcheck_core.interfaces import Reference, ReferenceKind, Span

REFERENCE_PATTERN = re.compile(
    r"(?P<fence>^```[\s\S]*?```)"
    r"|(?P<sourcecode>\[sourcecode[^\]]*\][\s\S]*?\[/sourcecode\])"
    r'|<a(?:\s+[^>]*)?\shref\s*=\s*"(?P<href_link>[^":{?#]*)(?:\?[^#"]*)?(?P<href_anchor>#[^>"]*)?"'
    r"|\[[^\]]+\]\((?P<md_link>[^:){?#]*)(?:\?[^#)]*)?(?P<md_anchor>#[^)]*)?\)"
    r"|g\.doc\('(?P<doc_link>.*?)'",
    re.MULTILINE,
)

# group names per kind: (link slot, anchor slot)
_SLOTS = (
    (ReferenceKind.HYPERLINK_TAG, "href_link", "href_anchor"),
    (ReferenceKind.BRACKET_LINK, "md_link", "md_anchor"),
    (ReferenceKind.LINK_HELPER, "doc_link", None),
)


def _slot(match: "re.Match[str]", name: Optional[str]) -> Tuple[Optional[str], Optional[Span]]:
    if name is None:
        return None, None
    value = match.group(name)
    if not value:
        return None, None
    return value, match.span(name)


def _to_reference(match: "re.Match[str]") -> Optional[Reference]:
    for kind, link_group, anchor_group in _SLOTS:
        if match.group(link_group) is None:
            continue
        link, link_span = _slot(match, link_group)
        anchor, anchor_span = _slot(match, anchor_group)
        return Reference(
            kind=kind,
            span=match.span(),
            link=link,
            link_span=link_span,
            anchor=anchor,
            anchor_span=anchor_span,
        )
    return None  # code sample


class ReferenceSequence:
    """Lazy view over the references of one text; every iteration rescans from the start."""

    def __init__(self, text: str) -> None:
        self.text = text

    def __iter__(self) -> Iterator[Reference]:
        for m in REFERENCE_PATTERN.finditer(self.text):
            ref = _to_reference(m)
            if ref is not None and (ref.link or ref.anchor):
                yield ref


def extract_references(text: str) -> ReferenceSequence:
    return ReferenceSequence(text)


__all__ = ["REFERENCE_PATTERN", "ReferenceSequence", "extract_references"]
