# Copyright (c) 2025 Refcheck Maintainers
# License: MIT

from __future__ import annotations

from refcheck_core.anchors import AnchorIndex, heading_title, index_document, iter_headings

DOC = """# Introduction
Some text
## Setup
## Setup
### Custom <a name="custom-anchor"></a>
### Same <a name="same"></a>
<a name="standalone"></a>
<div id="box">x</div>

```
# not a heading
```
"""


def test_implicit_and_deduplicated_headings():
    table = index_document(DOC)
    assert table["introduction"].is_explicit is False
    assert table["introduction"].explicit_value is None
    assert "setup" in table and "setup-1" in table
    assert "not-a-heading" not in table


def test_colocated_explicit_anchor_links_both_keys():
    table = index_document(DOC)
    assert table["custom-anchor"].is_explicit is True
    assert table["custom"].is_explicit is False
    assert table["custom"].explicit_value == "custom-anchor"


def test_explicit_equal_to_implicit_is_single_entry():
    table = index_document(DOC)
    assert table["same"].is_explicit is True
    assert table["same"].explicit_value == "same"


def test_standalone_name_and_element_id():
    table = index_document(DOC)
    assert table["standalone"].is_explicit is True
    assert table["box"].is_explicit is True


def test_iter_headings_matches_index_order():
    titles = [heading_title(m).strip() for m in iter_headings(DOC)]
    assert titles == ["Introduction", "Setup", "Setup", "Custom", "Same"]


def test_anchor_index_used_pages():
    index = AnchorIndex()
    index.add("/a.md", index_document("# A\n"))
    index.add("/b.md", index_document("# B\n"))
    assert "/a.md" in index and len(index) == 2
    assert index.used_pages() == []
    index.get("/b.md")["b"].is_used = True
    assert index.used_pages() == ["/b.md"]
    assert index.get("/missing.md") is None


def test_unclosed_angle_bracket_does_not_hide_headings():
    text = 'If a<b holds, continue.\n\n## Setup\n\n<div id="box"></div>\n'
    table = index_document(text)
    assert sorted(table) == ["box", "setup"]
    assert [heading_title(m) for m in iter_headings(text)] == ["Setup"]


def test_standalone_name_before_heading_stays_explicit():
    table = index_document('<a name="setup"></a>\n## Setup\n')
    assert table["setup"].is_explicit is True
    assert list(table) == ["setup"]
