# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
In-memory CorpusPort backend.

Provides:
- InMemoryCorpus: a dict of corpus path -> text, suitable for tests and dry
  experiments. Writes replace the stored text and are recorded in `writes`.

Notes
- A path "exists" when it is a stored document or a directory prefix of one,
  matching how a filesystem treats links to folders.
"""

from __future__ import annotations

import posixpath
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from refcheck_core.interfaces import CorpusPort


class InMemoryCorpus(CorpusPort):
    def __init__(self, documents: Optional[Mapping[str, str]] = None) -> None:
        self._docs: Dict[str, str] = dict(documents or {})
        self.writes: List[str] = []

    def exists(self, path: str) -> bool:
        if path in self._docs:
            return True
        prefix = path.rstrip("/") + "/"
        return any(p.startswith(prefix) for p in self._docs)

    def find_by_basename(self, basename: str) -> Sequence[str]:
        key = basename.lower()
        return sorted(p for p in self._docs if posixpath.basename(p).lower() == key)

    def read_document(self, path: str) -> str:
        try:
            return self._docs[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write_document(self, path: str, text: str) -> None:
        self._docs[path] = text
        self.writes.append(path)

    def iter_documents(self, extensions: Iterable[str]) -> Sequence[str]:
        exts = tuple(extensions)
        return sorted(p for p in self._docs if p.endswith(exts))


__all__ = ["InMemoryCorpus"]
