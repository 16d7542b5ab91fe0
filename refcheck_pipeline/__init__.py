# Copyright (c) 2025 Refcheck Maintainers
# License: MIT

"""
Pipeline package exposing the run coordinator for reference checking.

Primary exports
- CheckerConfig: lookup hints, ignored paths, imported documents, locales
- ReferenceCheckPipeline: three-pass coordinator (index anchors, resolve references,
  add explicit anchors) producing a RunReport

See:
- refcheck_pipeline/pipeline.py
- scripts/check_references.py
"""

from __future__ import annotations

from .pipeline import (
    CheckerConfig,
    ReferenceCheckPipeline,
)

__all__ = [
    "CheckerConfig",
    "ReferenceCheckPipeline",
]
