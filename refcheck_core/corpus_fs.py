# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
Filesystem CorpusPort backend.

Corpus paths are POSIX strings relative to `root` with a leading "/". Documents and
basename search are limited to `root / content_dir`; existence checks see the whole
root, so links into non-content folders (e.g. "/static/") still resolve.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from refcheck_core.interfaces import CorpusPort

SKIP_DIRS = {".git", "node_modules", "__pycache__", ".venv", "venv"}


class FileSystemCorpus(CorpusPort):
    def __init__(self, root: Union[str, Path], content_dir: str = "") -> None:
        self.root = Path(root).resolve()
        self.content_root = (self.root / content_dir.strip("/")) if content_dir.strip("/") else self.root
        self._files: Optional[List[Path]] = None

    # ---- path mapping ----

    def to_corpus_path(self, fs_path: Path) -> str:
        return "/" + Path(fs_path).relative_to(self.root).as_posix()

    def to_fs_path(self, path: str) -> Path:
        return self.root / path.lstrip("/")

    def _content_files(self) -> List[Path]:
        # cached; the run never creates or deletes files
        if self._files is None:
            self._files = sorted(
                p
                for p in self.content_root.rglob("*")
                if p.is_file() and not any(part in SKIP_DIRS for part in p.relative_to(self.root).parts)
            )
        return self._files

    # ---- CorpusPort ----

    def exists(self, path: str) -> bool:
        return self.to_fs_path(path).exists()

    def find_by_basename(self, basename: str) -> Sequence[str]:
        key = basename.lower()
        return [self.to_corpus_path(p) for p in self._content_files() if p.name.lower() == key]

    def read_document(self, path: str) -> str:
        with self.to_fs_path(path).open("r", encoding="utf-8", newline="") as f:
            return f.read()

    def write_document(self, path: str, text: str) -> None:
        with self.to_fs_path(path).open("w", encoding="utf-8", newline="") as f:
            f.write(text)

    def iter_documents(self, extensions: Iterable[str]) -> Sequence[str]:
        exts = tuple(extensions)
        return [self.to_corpus_path(p) for p in self._content_files() if p.name.endswith(exts)]


__all__ = ["FileSystemCorpus"]
