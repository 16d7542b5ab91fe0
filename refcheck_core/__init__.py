# Copyright (c) 2025 Refcheck Maintainers
# License: MIT

"""
Core package exposing typed interfaces and the resolution engine.

Primary modules
- interfaces: data models, resolution outcomes, RunReport, CorpusPort protocol
- slugs: GitHub-style heading slugs with per-document de-duplication
- anchors: per-document anchor tables and the corpus-wide AnchorIndex
- references: link/anchor extraction that skips code samples
- links: link resolution with lookup table and basename repair
- anchor_resolver: locale-aware anchor validation
- rewrite: span replacements and explicit anchor injection
- corpus_mem / corpus_fs: CorpusPort backends

This __init__ consolidates common exports for convenience:
    from refcheck_core import (
        AnchorIndex, SlugGenerator, LinkResolver, AnchorResolver,
        InMemoryCorpus, FileSystemCorpus, RunReport,
    )
"""

from __future__ import annotations

__all__ = [
    # Entities
    "Anchor",
    "Reference",
    "ReferenceKind",
    "RunReport",
    "ReferenceCheckFailed",
    # Outcomes
    "Unchanged",
    "Repaired",
    "AmbiguousMatch",
    "Unresolvable",
    "AnchorResolved",
    "AnchorInvalid",
    # Protocols
    "CorpusPort",
    "LogSink",
    # Engine
    "SlugGenerator",
    "AnchorIndex",
    "index_document",
    "extract_references",
    "LinkResolver",
    "AnchorResolver",
    "apply_replacements",
    "inject_explicit_anchors",
    # Backends
    "InMemoryCorpus",
    "FileSystemCorpus",
    # Version
    "__version__",
]

__version__ = "0.1.0"

from .interfaces import (
    Anchor,
    Reference,
    ReferenceKind,
    RunReport,
    ReferenceCheckFailed,
    Unchanged,
    Repaired,
    AmbiguousMatch,
    Unresolvable,
    AnchorResolved,
    AnchorInvalid,
    CorpusPort,
    LogSink,
)

from .slugs import SlugGenerator
from .anchors import AnchorIndex, index_document
from .references import extract_references
from .links import LinkResolver
from .anchor_resolver import AnchorResolver
from .rewrite import apply_replacements, inject_explicit_anchors

# Default backends
from .corpus_mem import InMemoryCorpus
from .corpus_fs import FileSystemCorpus
