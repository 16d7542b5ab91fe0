# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
Rendering of a finished RunReport: console summary and an optional markdown report.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from refcheck_core.interfaces import RunReport
from refcheck_pipeline.logging_utils import ReferenceLogger, ensure_dir


def log_run_report(log: ReferenceLogger, report: RunReport) -> None:
    if report.passed:
        log.success("All references intact!")
        return

    log.complete("Finished automatic fixing.")
    log.complete(
        f"A total of {report.broken_references_count} had errors. "
        f"{report.still_broken_count} still have."
    )

    if report.unfindable_documents:
        log.info(
            f"Could not automatically fix {len(report.unfindable_documents)} "
            "as there wasn't any document with a matching basename:"
        )
        for path in report.unfindable_documents:
            log.pending(f"- {path}")

    if report.ambiguous_matches:
        log.info(f"Encountered multiple possible matches for {len(report.ambiguous_matches)} documents:")
        for path, candidates in report.ambiguous_matches.items():
            log.pending(path)
            for candidate in candidates:
                log.pending(f"-- {candidate}")

    if report.wrong_anchor_count:
        log.info(f"{report.wrong_anchor_count} anchors could not be resolved.")


def write_markdown_report(path: Union[str, Path], report: RunReport) -> Path:
    out = Path(path)
    ensure_dir(out.parent)
    with out.open("w", encoding="utf-8") as f:
        f.write("# References Report\n\n")
        f.write(f"- Broken references found: {report.broken_references_count}\n")
        f.write(f"- Repaired automatically: {report.repaired_count}\n")
        f.write(f"- Unfindable documents: {len(report.unfindable_documents)}\n")
        f.write(f"- Ambiguous matches: {len(report.ambiguous_matches)}\n")
        f.write(f"- Wrong anchors: {report.wrong_anchor_count}\n")
        f.write(f"- Anchor warnings (imported documents): {report.soft_anchor_warnings}\n")
        f.write(f"- Explicit anchors added: {report.anchors_injected}\n")
        f.write(f"- Documents edited: {len(report.edited_documents)}\n\n")
        if report.unfindable_documents:
            f.write("## Unfindable documents\n\n")
            for p in report.unfindable_documents:
                f.write(f"- {p}\n")
            f.write("\n")
        if report.ambiguous_matches:
            f.write("## Ambiguous matches\n\n")
            for p, candidates in sorted(report.ambiguous_matches.items()):
                f.write(f"- {p}\n")
                for c in candidates:
                    f.write(f"  - {c}\n")
            f.write("\n")
        if report.passed:
            f.write("No issues found.\n")
    return out


__all__ = ["log_run_report", "write_markdown_report"]
