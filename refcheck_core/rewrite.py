# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
In-place rewriting of document text.

- apply_replacements: splice non-overlapping span replacements, right to left, so
  earlier offsets stay valid whatever the replacement lengths
- plan_reference_replacements / rewrite_references: resolve every reference of a
  document and collect the link and anchor substitutions that differ from the text
- inject_explicit_anchors: append '<a name="slug"></a>' to headings whose implicit
  slug was relied upon by another document
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from refcheck_core.anchor_resolver import AnchorResolver
from refcheck_core.anchors import heading_title, iter_headings
from refcheck_core.interfaces import AnchorResolved, AnchorTable, Repaired
from refcheck_core.links import LinkResolver, resolve_relative_link
from refcheck_core.references import extract_references
from refcheck_core.slugs import SlugGenerator


@dataclass(frozen=True)
class Replacement:
    start: int
    end: int
    value: str


def apply_replacements(text: str, replacements: Iterable[Replacement]) -> str:
    ordered = sorted(replacements, key=lambda r: (r.start, r.end))
    for prev, cur in zip(ordered, ordered[1:]):
        if cur.start < prev.end:
            raise ValueError(f"Overlapping replacements at [{prev.start}, {prev.end}) and [{cur.start}, {cur.end})")
    for r in reversed(ordered):
        text = text[: r.start] + r.value + text[r.end :]
    return text


def plan_reference_replacements(
    text: str,
    source_path: str,
    links: LinkResolver,
    anchors: AnchorResolver,
) -> List[Replacement]:
    out: List[Replacement] = []
    for ref in extract_references(text):
        linked_path: Optional[str] = None
        if ref.link and ref.link_span is not None:
            outcome = links.resolve_link(ref.link, source_path)
            linked_path = outcome.path
            if isinstance(outcome, Repaired) and outcome.path != resolve_relative_link(ref.link, source_path):
                out.append(Replacement(ref.link_span[0], ref.link_span[1], outcome.path))
        if ref.anchor and ref.anchor_span is not None:
            resolved = anchors.resolve_anchor(ref.anchor, linked_path, source_path)
            if isinstance(resolved, AnchorResolved) and resolved.anchor != ref.anchor:
                out.append(Replacement(ref.anchor_span[0], ref.anchor_span[1], resolved.anchor))
    return out


def rewrite_references(text: str, source_path: str, links: LinkResolver, anchors: AnchorResolver) -> str:
    return apply_replacements(text, plan_reference_replacements(text, source_path, links, anchors))


def inject_explicit_anchors(text: str, anchors: AnchorTable) -> Tuple[str, int]:
    """
    Returns (new_text, number_of_injected_anchors).

    Slugs are re-derived for every heading in order, exactly like the index was built,
    otherwise de-duplicated slugs ("setup-1") would land on the wrong heading.
    """
    slugs = SlugGenerator()
    replacements: List[Replacement] = []
    for m in iter_headings(text):
        headline = heading_title(m)
        slug = slugs.generate_slug(headline)
        anchor = anchors.get(slug)
        if m.group("title_tag") or anchor is None or not anchor.is_used:
            continue
        eol = "\r" if m.group(0).endswith("\r") else ""
        line = f'{m.group("level")} {headline.rstrip()} <a name="{slug}"></a>{eol}'
        replacements.append(Replacement(m.start(), m.end(), line))
    return apply_replacements(text, replacements), len(replacements)


__all__ = [
    "Replacement",
    "apply_replacements",
    "plan_reference_replacements",
    "rewrite_references",
    "inject_explicit_anchors",
]
