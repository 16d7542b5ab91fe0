# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
Anchor validation against the corpus-wide AnchorIndex.

Candidate targets
- bare anchor ("#x")                         -> the source document itself
- link from a localized source (a@fr.md)     -> the target's @fr variant, else the plain target
- link from an unlocalized source            -> for every configured locale the source also
                                                serves (no own variant indexed), the target's
                                                variant for that locale

Lookup per candidate: raw value first, then the normalized slug. An implicit anchor
found through another document marks itself used, so the explicit anchor pass can
pin it down. A candidate missing from the index is not part of the checked corpus
and passes.

All candidates must agree; otherwise the reference keeps its original anchor and is
reported. Failures from imported documents or ignored paths are soft warnings.
"""

from __future__ import annotations

from typing import Callable, Collection, List, Optional, Sequence

from refcheck_core.anchors import AnchorIndex
from refcheck_core.interfaces import (
    AnchorInvalid,
    AnchorOutcome,
    AnchorResolved,
    LogSink,
    NullLogSink,
    RunReport,
)
from refcheck_core.locales import locale_of, path_for_locale, strip_locale
from refcheck_core.slugs import normalize_anchor_value


class AnchorResolver:
    def __init__(
        self,
        index: AnchorIndex,
        report: RunReport,
        *,
        locales: Sequence[str] = (),
        imported_documents: Collection[str] = (),
        is_ignored: Optional[Callable[[str], bool]] = None,
        markdown_extension: str = ".md",
        log: Optional[LogSink] = None,
    ) -> None:
        self.index = index
        self.report = report
        self.locales = list(locales)
        self.imported_documents = set(imported_documents)
        self._is_ignored = is_ignored or (lambda path: False)
        self.markdown_extension = markdown_extension
        self.log: LogSink = log if log is not None else NullLogSink()

    # ---- candidates ----

    def candidate_targets(self, linked_path: Optional[str], source_path: str) -> List[str]:
        if not linked_path:
            return [source_path]
        target = strip_locale(linked_path)
        source_locale = locale_of(source_path)
        if source_locale:
            return [path_for_locale(target, source_locale, self.index, self.markdown_extension)]
        out: List[str] = []
        for locale in self.locales:
            if path_for_locale(source_path, locale, self.index, self.markdown_extension) == source_path:
                candidate = path_for_locale(target, locale, self.index, self.markdown_extension)
                if candidate not in out:
                    out.append(candidate)
        return out or [target]

    # ---- lookup ----

    def lookup(self, anchor_value: str, target_path: str, mark_used: bool = True) -> Optional[str]:
        """Resolved anchor value within target_path, or None when it does not exist there."""
        anchors = self.index.get(target_path)
        if anchors is None:
            return anchor_value
        key = anchor_value
        existing = anchors.get(key)
        if existing is None:
            key = normalize_anchor_value(anchor_value)
            existing = anchors.get(key)
        if existing is None:
            return None
        if existing.is_explicit:
            return key
        if existing.explicit_value:
            return existing.explicit_value
        if mark_used:
            existing.is_used = True
        return key

    # ---- resolution ----

    def is_soft_failure(self, source_path: str, targets: Sequence[str]) -> bool:
        paths = [source_path, *targets]
        for path in paths:
            if path in self.imported_documents:
                return True
            if "@" not in path and self._is_ignored(path):
                return True
        return False

    def resolve_anchor(self, anchor: Optional[str], linked_path: Optional[str], source_path: str) -> AnchorOutcome:
        if not anchor or anchor == "#" or "{{" in anchor:
            return AnchorResolved(anchor or "")
        anchor_value = anchor[1:]

        resolved: Optional[str] = None
        failed: List[str] = []
        for target in self.candidate_targets(linked_path, source_path):
            found = self.lookup(anchor_value, target, mark_used=target != source_path)
            if found is None or (resolved is not None and found != resolved):
                failed.append(target)
            elif resolved is None:
                resolved = found

        if not failed:
            return AnchorResolved("#" + (resolved if resolved is not None else anchor_value))

        where = failed if linked_path else ["<internal>"]
        soft = self.is_soft_failure(source_path, failed)
        if soft:
            self.report.soft_anchor_warnings += 1
            self.log.warn(
                f"anchor not found in imported document {anchor} (found in: {source_path}, target: {', '.join(where)})",
                source=source_path,
                target=where,
                anchor=anchor,
            )
        else:
            self.report.wrong_anchor_count += 1
            self.log.error(
                f"anchor not found {anchor} (found in: {source_path}, target: {', '.join(where)})",
                source=source_path,
                target=where,
                anchor=anchor,
            )
        return AnchorInvalid(anchor, tuple(failed), soft=soft)


__all__ = ["AnchorResolver"]
