#!/usr/bin/env python3
# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
Reference checker CLI: validate and repair links and anchors across a document tree.

Features
- Three-pass run (index anchors, resolve references, add explicit anchors) via
  refcheck_pipeline.pipeline.ReferenceCheckPipeline.
- Optional YAML config (PyYAML safe_load); CLI flags override file values.
- Imported documents can be listed directly or derived from a JSON import manifest
  (list of {"to": "<path>"} objects, each prefixed with imports.prefix).
- Prints a one-line JSON summary to stdout; optional markdown report and JSONL event log.

Config keys (all optional)
  corpus:
    root: pages                 # directory the corpus paths are relative to
    content_dir: content/docs   # subtree that is scanned and searched
  lookup_table: {"/content/docs/old.md": "/content/docs/new.md"}
  ignored_path_patterns: ["/reference/.*?", "/boilerplate"]
  locales: [de, fr]
  imported_documents: ["/content/docs/spec/amp.md"]
  imports: {manifest: config/imports.json, prefix: /content/docs/}
  workers: 1
  dry_run: false

Exit codes
- 0: all references intact (or repaired)
- 1: unfindable documents, ambiguous matches or wrong anchors remain
- 2: configuration errors

Usage
  python -m scripts.check_references --root pages --content-dir content/docs --config configs/refcheck.yaml
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml  # pyyaml (runtime dep)

from refcheck_pipeline.logging_utils import JSONLLogger, ReferenceLogger
from refcheck_pipeline.pipeline import CheckerConfig, ReferenceCheckPipeline
from refcheck_pipeline.reporting import write_markdown_report


class ConfigError(ValueError):
    pass


# -------------------------
# Config loading
# -------------------------


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"YAML at {path} must be a mapping at top-level.")
    return data


def _load_import_manifest(path: Path, prefix: str) -> List[str]:
    """Imported document paths from a JSON manifest of {"to": ...} entries."""
    with path.open("r", encoding="utf-8") as f:
        entries = json.load(f)
    if not isinstance(entries, list):
        raise ConfigError(f"Import manifest at {path} must be a JSON list.")
    out: List[str] = []
    for entry in entries:
        if isinstance(entry, Mapping) and entry.get("to"):
            out.append(prefix + str(entry["to"]).lstrip("/"))
    return out


def _as_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"'{key}' must be a list.")
    return [str(v) for v in value]


def _cfg_to_checker_config(cfg_map: Mapping[str, Any], base_dir: Path) -> CheckerConfig:
    lookup = cfg_map.get("lookup_table", {}) or {}
    if not isinstance(lookup, Mapping):
        raise ConfigError("'lookup_table' must be a mapping.")

    imported = _as_list(cfg_map.get("imported_documents"), "imported_documents")
    imports_map = cfg_map.get("imports", {}) or {}
    manifest = imports_map.get("manifest")
    if manifest:
        manifest_path = Path(manifest)
        if not manifest_path.is_absolute():
            manifest_path = base_dir / manifest_path
        if not manifest_path.exists():
            raise ConfigError(f"Import manifest not found at {manifest_path}")
        imported += _load_import_manifest(manifest_path, str(imports_map.get("prefix", "/")))

    return CheckerConfig(
        markdown_extension=str(cfg_map.get("markdown_extension", CheckerConfig.markdown_extension)),
        html_extension=str(cfg_map.get("html_extension", CheckerConfig.html_extension)),
        lookup_table={str(k): str(v) for k, v in lookup.items()},
        ignored_path_patterns=tuple(_as_list(cfg_map.get("ignored_path_patterns"), "ignored_path_patterns")),
        imported_documents=tuple(imported),
        locales=tuple(_as_list(cfg_map.get("locales"), "locales")),
        workers=int(cfg_map.get("workers", CheckerConfig.workers)),
        dry_run=bool(cfg_map.get("dry_run", CheckerConfig.dry_run)),
    )


def _exit2(msg: str) -> "NoReturn":  # type: ignore[name-defined]
    sys.stderr.write(msg.rstrip() + "\n")
    sys.exit(2)


# -------------------------
# Entry points
# -------------------------


def run_main(
    root: Optional[str] = None,
    content_dir: Optional[str] = None,
    config: Optional[str] = None,
    locales: Optional[Sequence[str]] = None,
    dry_run: Optional[bool] = None,
    workers: Optional[int] = None,
    report_path: Optional[str] = None,
    events_path: Optional[str] = None,
    quiet: bool = False,
) -> Dict[str, Any]:
    """
    Run the reference checker and return a JSON-serializable summary.

    Raises ConfigError for unusable configuration (missing files, wrong shapes).
    """
    cfg_map: Dict[str, Any] = {}
    base_dir = Path.cwd()
    if config:
        cfg_path = Path(config)
        if not cfg_path.exists():
            raise ConfigError(f"Missing config at {cfg_path}.")
        cfg_map = _load_yaml(cfg_path)
        base_dir = cfg_path.resolve().parent

    corpus_map = cfg_map.get("corpus", {}) or {}
    root_value = root or corpus_map.get("root")
    if not root_value:
        raise ConfigError("No corpus root given (--root or corpus.root).")
    root_path = Path(root_value)
    if not root_path.is_absolute() and not root:
        root_path = base_dir / root_path
    if not root_path.is_dir():
        raise ConfigError(f"Corpus root not found at {root_path}.")

    cfg = _cfg_to_checker_config(cfg_map, base_dir)
    overrides: Dict[str, Any] = {}
    if locales:
        overrides["locales"] = tuple(locales)
    if dry_run is not None:
        overrides["dry_run"] = bool(dry_run)
    if workers is not None:
        overrides["workers"] = int(workers)
    if overrides:
        cfg = replace(cfg, **overrides)

    events = JSONLLogger(events_path, auto_timestamp=True) if events_path else None
    log = ReferenceLogger(events=events, quiet=quiet)
    try:
        pipeline = ReferenceCheckPipeline.from_defaults(
            root_path,
            content_dir=content_dir if content_dir is not None else str(corpus_map.get("content_dir", "")),
            cfg=cfg,
            log=log,
        )
        report = pipeline.run()
    finally:
        log.close()

    result: Dict[str, Any] = {"report": report.to_jsonable(), "passed": report.passed}
    if report_path:
        result["artifact"] = str(write_markdown_report(report_path, report))
    return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate and repair cross-document links and anchors.")
    parser.add_argument("--root", default=None, help="Corpus root directory")
    parser.add_argument("--content-dir", default=None, help="Subtree of the root to scan and search")
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument("--locale", action="append", dest="locales", default=None, help="Locale code (repeatable)")
    parser.add_argument("--dry-run", action="store_true", default=None, help="Report without writing files")
    parser.add_argument("--workers", type=int, default=None, help="Threads for anchor indexing")
    parser.add_argument("--report", default=None, help="Write a markdown report to this path")
    parser.add_argument("--events", default=None, help="Append warnings/errors as JSONL to this path")
    parser.add_argument("--quiet", action="store_true", help="No console log lines")
    args = parser.parse_args(argv)

    try:
        out = run_main(
            root=args.root,
            content_dir=args.content_dir,
            config=args.config,
            locales=args.locales,
            dry_run=args.dry_run,
            workers=args.workers,
            report_path=args.report,
            events_path=args.events,
            quiet=args.quiet,
        )
    except ConfigError as e:
        _exit2(str(e))
    print(json.dumps(out, separators=(",", ":"), ensure_ascii=False))
    return 0 if out["passed"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
