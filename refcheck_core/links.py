# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
Link resolution and repair.

resolve_link(raw_link, source_path) runs, in order:
1) absolutize the link against the source document's directory
2) ignored path pattern        -> Unchanged (not validated)
3) target exists               -> Unchanged
4) manual lookup table hit     -> Repaired(hint)
5) basename search over the corpus (case-insensitive equality):
     one match                 -> Repaired(match)
     several matches           -> AmbiguousMatch(all), never "pick first"
     none, .html target        -> retry once with the markdown extension
     none                      -> Unresolvable, remembered for the rest of the run

Every target that does not exist counts as one broken reference in the RunReport,
including repeats of an already-unfindable path.
"""

from __future__ import annotations

import posixpath
import re
from typing import Dict, Mapping, Optional, Sequence, Set, Tuple

from refcheck_core.interfaces import (
    AmbiguousMatch,
    CorpusPort,
    LinkOutcome,
    LogSink,
    NullLogSink,
    Repaired,
    RunReport,
    Unchanged,
    Unresolvable,
)


def compile_ignored_patterns(patterns: Sequence[str]) -> Optional["re.Pattern[str]"]:
    """Join ignored path regexes into one searchable pattern (None when empty)."""
    if not patterns:
        return None
    return re.compile("|".join(f"(?:{p})" for p in patterns))


def resolve_relative_link(link: str, source_path: str) -> str:
    if link.startswith("/"):
        return link
    return posixpath.normpath(posixpath.join(posixpath.dirname(source_path), link))


class LinkResolver:
    """
    Resolves links for one run. Holds the per-run memo of basename searches and of
    paths already known to be unfindable; findings are written into the shared report.
    """

    def __init__(
        self,
        corpus: CorpusPort,
        report: RunReport,
        *,
        lookup_table: Optional[Mapping[str, str]] = None,
        ignored_pattern: Optional["re.Pattern[str]"] = None,
        markdown_extension: str = ".md",
        html_extension: str = ".html",
        log: Optional[LogSink] = None,
    ) -> None:
        self.corpus = corpus
        self.report = report
        self.lookup_table: Dict[str, str] = dict(lookup_table or {})
        self.ignored_pattern = ignored_pattern
        self.markdown_extension = markdown_extension
        self.html_extension = html_extension
        self.log: LogSink = log if log is not None else NullLogSink()
        self._search_memo: Dict[str, Tuple[str, ...]] = {}
        self._unfindable: Set[str] = set()

    def is_ignored(self, path: str) -> bool:
        return self.ignored_pattern is not None and self.ignored_pattern.search(path) is not None

    def resolve_link(self, raw_link: str, source_path: str) -> LinkOutcome:
        path = resolve_relative_link(raw_link, source_path)
        return self._verify(path, source_path, allow_swap=True)

    def find_candidates(self, basename: str) -> Tuple[str, ...]:
        key = basename.lower()
        if key not in self._search_memo:
            self._search_memo[key] = tuple(sorted(self.corpus.find_by_basename(basename)))
        return self._search_memo[key]

    def _verify(self, path: str, source_path: str, *, allow_swap: bool) -> LinkOutcome:
        if self.is_ignored(path) or self.corpus.exists(path):
            return Unchanged(path)

        if allow_swap:
            self.report.broken_references_count += 1

        if path in self._unfindable:
            return Unresolvable(path)

        hint = self.lookup_table.get(path)
        if hint:
            self.report.repaired_count += 1
            return Repaired(hint, broken_path=path)

        basename = posixpath.basename(path)
        matches = self.find_candidates(basename)

        if len(matches) > 1:
            self.log.error(
                f"More than one possible match for {path}. Needs manual fixing. (In {source_path})",
                source=source_path,
                target=path,
                candidates=list(matches),
            )
            self.report.ambiguous_matches.setdefault(path, list(matches))
            return AmbiguousMatch(path, matches)

        if not matches:
            if allow_swap and basename.endswith(self.html_extension):
                swapped = path[: -len(self.html_extension)] + self.markdown_extension
                outcome = self._verify(swapped, source_path, allow_swap=False)
                if isinstance(outcome, Unchanged):
                    self.report.repaired_count += 1
                    return Repaired(outcome.path, broken_path=path)
                return outcome
            self.log.error(
                f"No matching document found for {path}. Needs manual fixing. (First found in {source_path})",
                source=source_path,
                target=path,
            )
            self._unfindable.add(path)
            self.report.unfindable_documents.append(path)
            return Unresolvable(path)

        self.report.repaired_count += 1
        return Repaired(matches[0], broken_path=path)


__all__ = ["LinkResolver", "compile_ignored_patterns", "resolve_relative_link"]
