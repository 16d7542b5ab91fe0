# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
End-to-end runs of the three-pass pipeline over an in-memory corpus.
"""

from __future__ import annotations

from typing import Mapping

import pytest

from refcheck_core.corpus_mem import InMemoryCorpus
from refcheck_core.interfaces import ReferenceCheckFailed
from refcheck_pipeline.logging_utils import ReferenceLogger
from refcheck_pipeline.pipeline import CheckerConfig, ReferenceCheckPipeline


def _run(docs: Mapping[str, str], cfg: CheckerConfig = CheckerConfig()):
    corpus = docs if isinstance(docs, InMemoryCorpus) else InMemoryCorpus(docs)
    pipeline = ReferenceCheckPipeline(corpus, cfg=cfg, log=ReferenceLogger(quiet=True))
    return pipeline.run(), corpus


def test_moved_document_link_is_repaired():
    report, corpus = _run({
        "/docs/a/a.md": "# A\n\nSee [text](../guide.md).\n",
        "/docs/moved/guide.md": "# Guide\n",
    })
    assert corpus.read_document("/docs/a/a.md") == "# A\n\nSee [text](/docs/moved/guide.md).\n"
    assert report.broken_references_count == 1
    assert report.repaired_count == 1
    assert report.passed


def test_changed_heading_is_wrong_anchor():
    original = '<a href="c.md#Old Title">c</a>\n'
    report, corpus = _run({
        "/docs/b.md": original,
        "/docs/c.md": "# New Title\n",
    })
    assert report.wrong_anchor_count == 1
    assert corpus.read_document("/docs/b.md") == original
    assert not report.passed
    with pytest.raises(ReferenceCheckFailed):
        report.raise_for_failures()


def test_ambiguous_basename_is_reported_and_nothing_written():
    report, corpus = _run({
        "/docs/a.md": "[x](gone/foo.md)\n",
        "/docs/one/foo.md": "# One\n",
        "/docs/two/foo.md": "# Two\n",
    })
    assert report.ambiguous_matches == {"/docs/gone/foo.md": ["/docs/one/foo.md", "/docs/two/foo.md"]}
    assert corpus.writes == []
    assert not report.passed


def test_used_implicit_anchor_gets_explicit_tag_once():
    report, corpus = _run({
        "/docs/c.md": "# Introduction\n\nBody\n\n## Details\n",
        "/docs/x.md": "[c](c.md#introduction)\n",
        "/docs/y.md": "[c](./c.md#introduction)\n",
    })
    text = corpus.read_document("/docs/c.md")
    assert text == '# Introduction <a name="introduction"></a>\n\nBody\n\n## Details\n'
    assert text.count('<a name="introduction">') == 1
    assert report.anchors_injected == 1
    assert report.edited_documents == ["/docs/c.md"]
    assert report.passed


def test_second_run_is_idempotent():
    corpus = InMemoryCorpus({
        "/docs/a/a.md": "[g](../guide.md#setup) [c](/docs/c.md#Introduction)\n",
        "/docs/moved/guide.md": "# Guide\n## Setup\n",
        "/docs/c.md": "# Introduction\n",
    })
    first, _ = _run(corpus)
    assert first.passed and first.edited_documents
    writes = len(corpus.writes)

    second, _ = _run(corpus)
    assert second.edited_documents == []
    assert second.broken_references_count == 0
    assert len(corpus.writes) == writes


def test_own_heading_reference_round_trips():
    text = "# Hello World\n\n[jump](#hello-world)\n"
    report, corpus = _run({"/docs/self.md": text})
    assert corpus.read_document("/docs/self.md") == text
    assert corpus.writes == []
    assert report.passed


def test_html_documents_are_checked_but_not_indexed():
    report, corpus = _run({
        "/docs/page.html": '<h1 id="top">Top</h1>\n[a](a.md#missing)\n',
        "/docs/a.md": "# A\n[p](page.html#anything)\n",
    })
    assert report.wrong_anchor_count == 1
    assert report.passed is False


def test_locale_variant_anchor_checked_against_variant():
    report, corpus = _run(
        {
            "/docs/s@fr.md": "[t](target.md#heading)\n",
            "/docs/target.md": "# Heading\n",
            "/docs/target@fr.md": "# Titre\n",
        },
        CheckerConfig(locales=("fr",)),
    )
    assert report.wrong_anchor_count == 1


def test_dry_run_writes_nothing():
    report, corpus = _run(
        {
            "/docs/a/a.md": "[text](../guide.md)\n",
            "/docs/moved/guide.md": "# Guide\n",
        },
        CheckerConfig(dry_run=True),
    )
    assert report.edited_documents == ["/docs/a/a.md"]
    assert corpus.writes == []
    assert corpus.read_document("/docs/a/a.md") == "[text](../guide.md)\n"


def test_threaded_indexing_matches_sequential():
    docs = {f"/docs/p{i}.md": f"# Page {i}\n## Setup\n## Setup\n" for i in range(8)}
    sequential = ReferenceCheckPipeline(InMemoryCorpus(docs), log=ReferenceLogger(quiet=True)).build_anchor_index()
    threaded = ReferenceCheckPipeline(
        InMemoryCorpus(docs), cfg=CheckerConfig(workers=4), log=ReferenceLogger(quiet=True)
    ).build_anchor_index()
    assert sequential.paths() == threaded.paths()
    for path in sequential.paths():
        assert sequential.get(path) == threaded.get(path)


def test_heading_after_unclosed_angle_bracket_resolves():
    report, corpus = _run({
        "/docs/c.md": 'If a<b holds, continue.\n\n## Setup\n\n<div id="box"></div>\n',
        "/docs/x.md": "[s](c.md#setup)\n",
    })
    assert report.wrong_anchor_count == 0
    assert corpus.read_document("/docs/c.md").count('<a name="setup"></a>') == 1
    assert report.passed


def test_empty_fragment_is_not_a_wrong_anchor():
    report, corpus = _run({"/docs/a.md": '# A\n\n[top](#) <a href="#">up</a>\n'})
    assert report.wrong_anchor_count == 0
    assert corpus.writes == []
    assert report.passed
