# Copyright (c) 2025 Refcheck Maintainers
# License: MIT

from __future__ import annotations

from pathlib import Path

from refcheck_core.corpus_fs import FileSystemCorpus
from refcheck_pipeline.logging_utils import ReferenceLogger
from refcheck_pipeline.pipeline import ReferenceCheckPipeline


def _tree(root: Path) -> None:
    (root / "content" / "docs" / "guides").mkdir(parents=True)
    (root / "content" / "docs" / "node_modules").mkdir(parents=True)
    (root / "static").mkdir()
    (root / "content" / "docs" / "index.md").write_text("See [guide](setup.md).\n", encoding="utf-8")
    (root / "content" / "docs" / "guides" / "Setup.md").write_text("# Setup\n", encoding="utf-8")
    (root / "content" / "docs" / "page.html").write_text("<p>x</p>\n", encoding="utf-8")
    (root / "content" / "docs" / "node_modules" / "setup.md").write_text("# vendored\n", encoding="utf-8")
    (root / "static" / "logo.md").write_text("", encoding="utf-8")


def test_documents_and_basename_search(tmp_path: Path):
    _tree(tmp_path)
    corpus = FileSystemCorpus(tmp_path, content_dir="content")
    assert corpus.iter_documents([".md"]) == ["/content/docs/guides/Setup.md", "/content/docs/index.md"]
    assert corpus.iter_documents([".html"]) == ["/content/docs/page.html"]
    assert corpus.find_by_basename("setup.md") == ["/content/docs/guides/Setup.md"]
    assert corpus.find_by_basename("logo.md") == []


def test_exists_sees_whole_root(tmp_path: Path):
    _tree(tmp_path)
    corpus = FileSystemCorpus(tmp_path, content_dir="content")
    assert corpus.exists("/static/logo.md")
    assert corpus.exists("/content/docs/guides")
    assert not corpus.exists("/content/docs/missing.md")


def test_read_write_keeps_line_endings(tmp_path: Path):
    _tree(tmp_path)
    corpus = FileSystemCorpus(tmp_path)
    corpus.write_document("/content/docs/index.md", "a\r\nb\n")
    assert corpus.read_document("/content/docs/index.md") == "a\r\nb\n"


def test_pipeline_repairs_files_on_disk(tmp_path: Path):
    _tree(tmp_path)
    pipeline = ReferenceCheckPipeline.from_defaults(tmp_path, content_dir="content", log=ReferenceLogger(quiet=True))
    report = pipeline.run()
    assert report.passed
    text = (tmp_path / "content" / "docs" / "index.md").read_text(encoding="utf-8")
    assert text == "See [guide](/content/docs/guides/Setup.md).\n"
