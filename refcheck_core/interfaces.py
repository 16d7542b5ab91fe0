# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
Reference checker: core typed interfaces and data models.

This module defines:
- Type aliases for corpus paths and anchor tables
- Data models: Anchor, Reference, RunReport
- Resolution outcomes (tagged results):
    * Unchanged, Repaired, AmbiguousMatch, Unresolvable   (link resolution)
    * AnchorResolved, AnchorInvalid                       (anchor resolution)
- Protocols (interfaces):
    * CorpusPort (read-only lookups plus document read/write)

Corpus paths are POSIX strings rooted at the corpus root, always starting with "/",
e.g. "/content/docs/guide/index.md".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    NewType,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Union,
    runtime_checkable,
)

# ---------- Type aliases ----------

DocPath = NewType("DocPath", str)
Span = Tuple[int, int]  # half-open [start, end) offsets into a document's text


# ---------- Entities ----------


@dataclass
class Anchor:
    """
    One entry of a document's anchor table.

    is_used is flipped to True (never back) when another document relies on the
    implicit slug; it drives the explicit anchor injection pass.
    """
    slug: str
    is_explicit: bool
    explicit_value: Optional[str] = None
    is_used: bool = False


AnchorTable = Dict[str, Anchor]


class ReferenceKind(str, Enum):
    HYPERLINK_TAG = "hyperlink-tag"  # <a href="path#anchor">
    BRACKET_LINK = "bracket-link"  # [text](path#anchor)
    LINK_HELPER = "link-helper"  # g.doc('path')


@dataclass(frozen=True)
class Reference:
    """A located link and/or anchor inside a document's text."""
    kind: ReferenceKind
    span: Span
    link: Optional[str] = None
    link_span: Optional[Span] = None
    anchor: Optional[str] = None  # includes the leading '#'
    anchor_span: Optional[Span] = None

    @property
    def is_bare_anchor(self) -> bool:
        return not self.link and bool(self.anchor)


# ---------- Resolution outcomes ----------


@dataclass(frozen=True)
class Unchanged:
    path: str


@dataclass(frozen=True)
class Repaired:
    path: str
    broken_path: str


@dataclass(frozen=True)
class AmbiguousMatch:
    path: str
    candidates: Tuple[str, ...]


@dataclass(frozen=True)
class Unresolvable:
    path: str


@dataclass(frozen=True)
class AnchorResolved:
    anchor: str  # "#<value>"


@dataclass(frozen=True)
class AnchorInvalid:
    anchor: str
    targets: Tuple[str, ...]
    soft: bool = False


LinkOutcome = Union[Unchanged, Repaired, AmbiguousMatch, Unresolvable]
AnchorOutcome = Union[AnchorResolved, AnchorInvalid]
ResolutionOutcome = Union[LinkOutcome, AnchorOutcome]


# ---------- Run report ----------


class ReferenceCheckFailed(RuntimeError):
    """Raised when a finished run still has unresolved references."""

    def __init__(self, report: "RunReport") -> None:
        super().__init__(
            f"{len(report.unfindable_documents)} documents with broken links"
            f" and {report.wrong_anchor_count} wrong anchors found"
        )
        self.report = report


@dataclass
class RunReport:
    broken_references_count: int = 0
    repaired_count: int = 0
    ambiguous_matches: Dict[str, List[str]] = field(default_factory=dict)
    unfindable_documents: List[str] = field(default_factory=list)
    wrong_anchor_count: int = 0
    soft_anchor_warnings: int = 0
    anchors_injected: int = 0
    edited_documents: List[str] = field(default_factory=list)

    @property
    def still_broken_count(self) -> int:
        return len(self.unfindable_documents) + len(self.ambiguous_matches)

    @property
    def passed(self) -> bool:
        return not self.ambiguous_matches and not self.unfindable_documents and self.wrong_anchor_count == 0

    def mark_edited(self, path: str) -> None:
        if path not in self.edited_documents:
            self.edited_documents.append(path)

    def raise_for_failures(self) -> None:
        if not self.passed:
            raise ReferenceCheckFailed(self)

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "broken_references_count": self.broken_references_count,
            "repaired_count": self.repaired_count,
            "ambiguous_matches": {k: list(v) for k, v in sorted(self.ambiguous_matches.items())},
            "unfindable_documents": list(self.unfindable_documents),
            "wrong_anchor_count": self.wrong_anchor_count,
            "soft_anchor_warnings": self.soft_anchor_warnings,
            "anchors_injected": self.anchors_injected,
            "edited_documents": list(self.edited_documents),
            "passed": self.passed,
        }


# ---------- Protocols (interfaces) ----------


@runtime_checkable
class CorpusPort(Protocol):
    """Access to the document tree; the only place the engine touches storage."""

    def exists(self, path: str) -> bool:
        """Whether a file exists at the corpus path."""
        ...

    def find_by_basename(self, basename: str) -> Sequence[str]:
        """All corpus paths whose final segment equals basename (case-insensitive), sorted."""
        ...

    def read_document(self, path: str) -> str:
        ...

    def write_document(self, path: str, text: str) -> None:
        ...

    def iter_documents(self, extensions: Iterable[str]) -> Sequence[str]:
        """Corpus paths of all documents with one of the given extensions, sorted."""
        ...


@runtime_checkable
class LogSink(Protocol):
    """Where resolvers report what they find; refcheck_pipeline.logging_utils.ReferenceLogger implements it."""

    def info(self, message: str, **fields: Any) -> None:
        ...

    def warn(self, message: str, **fields: Any) -> None:
        ...

    def error(self, message: str, **fields: Any) -> None:
        ...


class NullLogSink:
    def info(self, message: str, **fields: Any) -> None:
        pass

    def warn(self, message: str, **fields: Any) -> None:
        pass

    def error(self, message: str, **fields: Any) -> None:
        pass


__all__ = [
    "DocPath",
    "Span",
    "Anchor",
    "AnchorTable",
    "ReferenceKind",
    "Reference",
    "Unchanged",
    "Repaired",
    "AmbiguousMatch",
    "Unresolvable",
    "AnchorResolved",
    "AnchorInvalid",
    "LinkOutcome",
    "AnchorOutcome",
    "ResolutionOutcome",
    "ReferenceCheckFailed",
    "RunReport",
    "CorpusPort",
    "LogSink",
    "NullLogSink",
]
