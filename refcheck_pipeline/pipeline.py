# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
Reference check pipeline: three ordered passes over a document corpus.

This module provides:
- CheckerConfig: lookup hints, ignored paths, imported documents, locales, workers
- ReferenceCheckPipeline: run coordinator returning a RunReport
- Convenience constructor over the filesystem backend

Passes (each runs to completion before the next starts)
1) build_anchor_index: index every markdown document (HTML documents can assemble
   content from other files, so their anchors are not indexed)
2) check_references: resolve every reference of every document against the complete
   index, repair links and anchors in place
3) add_explicit_anchors: pin implicit anchors that pass 2 relied upon by adding an
   explicit anchor tag behind their heading

Key integrations
- Engine: refcheck_core (links.LinkResolver, anchor_resolver.AnchorResolver, rewrite)
- Storage: refcheck_core.interfaces.CorpusPort (FileSystemCorpus by default)
- Logging: refcheck_pipeline.logging_utils.ReferenceLogger
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from refcheck_core.anchor_resolver import AnchorResolver
from refcheck_core.anchors import AnchorIndex, index_document
from refcheck_core.corpus_fs import FileSystemCorpus
from refcheck_core.interfaces import AnchorTable, CorpusPort, RunReport
from refcheck_core.links import LinkResolver, compile_ignored_patterns
from refcheck_core.rewrite import inject_explicit_anchors, rewrite_references
from refcheck_pipeline.logging_utils import ReferenceLogger
from refcheck_pipeline.reporting import log_run_report


# -------------------------
# Config dataclasses
# -------------------------


@dataclass(frozen=True)
class CheckerConfig:
    markdown_extension: str = ".md"
    html_extension: str = ".html"
    # Manual hints: known-broken corpus path -> replacement path
    lookup_table: Mapping[str, str] = field(default_factory=dict)
    # Regexes searched anywhere in a resolved path; matches are never validated
    ignored_path_patterns: Sequence[str] = ()
    # Anchor failures from/into these documents are warnings only
    imported_documents: Sequence[str] = ()
    locales: Sequence[str] = ()
    # Thread workers for anchor indexing; 1 keeps everything sequential
    workers: int = 1
    # Compute all passes but write nothing
    dry_run: bool = False


# -------------------------
# Pipeline
# -------------------------


class ReferenceCheckPipeline:
    """
    Orchestrates the three passes for one run.

    Attributes
    - corpus: CorpusPort backend
    - cfg: CheckerConfig
    - log: ReferenceLogger
    """

    def __init__(
        self,
        corpus: CorpusPort,
        cfg: CheckerConfig = CheckerConfig(),
        log: Optional[ReferenceLogger] = None,
    ) -> None:
        self.corpus = corpus
        self.cfg = cfg
        self.log = log if log is not None else ReferenceLogger()
        self._ignored = compile_ignored_patterns(list(cfg.ignored_path_patterns))
        # rewritten texts not yet written (dry runs keep them here)
        self._pending: Dict[str, str] = {}

    @classmethod
    def from_defaults(
        cls,
        root: Union[str, Path],
        *,
        content_dir: str = "",
        cfg: CheckerConfig = CheckerConfig(),
        log: Optional[ReferenceLogger] = None,
    ) -> "ReferenceCheckPipeline":
        return cls(FileSystemCorpus(root, content_dir=content_dir), cfg=cfg, log=log)

    # ---- storage helpers ----

    def _read(self, path: str) -> str:
        if path in self._pending:
            return self._pending[path]
        return self.corpus.read_document(path)

    def _store(self, path: str, text: str, report: RunReport) -> None:
        report.mark_edited(path)
        if self.cfg.dry_run:
            self._pending[path] = text
        else:
            self.corpus.write_document(path, text)

    # ---- pass 1 ----

    def _index_one(self, path: str) -> Tuple[str, AnchorTable]:
        return path, index_document(self.corpus.read_document(path))

    def build_anchor_index(self) -> AnchorIndex:
        paths = list(self.corpus.iter_documents([self.cfg.markdown_extension]))
        index = AnchorIndex()
        if self.cfg.workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=self.cfg.workers) as pool:
                results: List[Tuple[str, AnchorTable]] = list(pool.map(self._index_one, paths))
        else:
            results = [self._index_one(p) for p in paths]
        for path, table in results:
            index.add(path, table)
        return index

    # ---- pass 2 ----

    def make_resolvers(self, index: AnchorIndex, report: RunReport) -> Tuple[LinkResolver, AnchorResolver]:
        links = LinkResolver(
            self.corpus,
            report,
            lookup_table=self.cfg.lookup_table,
            ignored_pattern=self._ignored,
            markdown_extension=self.cfg.markdown_extension,
            html_extension=self.cfg.html_extension,
            log=self.log,
        )
        anchors = AnchorResolver(
            index,
            report,
            locales=self.cfg.locales,
            imported_documents=self.cfg.imported_documents,
            is_ignored=links.is_ignored,
            markdown_extension=self.cfg.markdown_extension,
            log=self.log,
        )
        return links, anchors

    def check_references(self, index: AnchorIndex, report: RunReport) -> None:
        links, anchors = self.make_resolvers(index, report)
        extensions = [self.cfg.markdown_extension, self.cfg.html_extension]
        for path in self.corpus.iter_documents(extensions):
            text = self._read(path)
            new_text = rewrite_references(text, path, links, anchors)
            if new_text != text:
                self._store(path, new_text, report)

    # ---- pass 3 ----

    def add_explicit_anchors(self, index: AnchorIndex, report: RunReport) -> None:
        pages = index.used_pages()
        if not pages:
            return
        self.log.info(f"Add explicit anchors to: {', '.join(pages)}")
        for path in pages:
            table = index.get(path) or {}
            new_text, injected = inject_explicit_anchors(self._read(path), table)
            if injected:
                report.anchors_injected += injected
                self._store(path, new_text, report)

    # ---- run ----

    def run(self, *, raise_on_failure: bool = False) -> RunReport:
        report = RunReport()
        self._pending.clear()
        self.log.start("Inspecting documents for broken references ...")

        index = self.build_anchor_index()
        self.check_references(index, report)
        self.add_explicit_anchors(index, report)

        log_run_report(self.log, report)
        if raise_on_failure:
            report.raise_for_failures()
        return report


__all__ = ["CheckerConfig", "ReferenceCheckPipeline"]
