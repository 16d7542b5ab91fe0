# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
Logging utilities for reference checking runs.

This module is filesystem-only; no logging framework is configured.

Exports:
- JSONLLogger: newline-delimited JSON writer for machine-readable findings.
- ReferenceLogger: scoped console logger (start/info/pending/success/complete/warn/error)
  that can mirror warnings and errors into a JSONLLogger.
- ensure_dir: create a directory tree.
"""

from __future__ import annotations

import json
import sys
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional, TextIO, Union


# -------------------------
# Filesystem helpers
# -------------------------


def ensure_dir(path: Path) -> None:
    """Create the directory if it does not already exist (parents included)."""
    Path(path).mkdir(parents=True, exist_ok=True)


# -------------------------
# JSONL (newline-delimited JSON) logger
# -------------------------


class JSONLLogger:
    """
    Newline-delimited JSON writer with append semantics.

    Parameters
    ----------
    path : str | Path
        Target .jsonl file path.
    auto_timestamp : bool
        If True, inject a 'ts' ISO8601 string when not present in the record.
    """

    def __init__(self, path: Union[str, Path], auto_timestamp: bool = False) -> None:
        self.path = Path(path)
        self.auto_timestamp = bool(auto_timestamp)
        ensure_dir(self.path.parent)
        self._f = self.path.open("a", encoding="utf-8")

    def log(self, record: Mapping[str, Any]) -> None:
        """Append a single JSON record as one line."""
        data = dict(record)
        if self.auto_timestamp and "ts" not in data:
            data["ts"] = datetime.now(timezone.utc).isoformat()
        self._f.write(json.dumps(data, ensure_ascii=False) + "\n")

    def flush(self) -> None:
        if self._f is not None:
            self._f.flush()

    def close(self) -> None:
        try:
            if self._f is not None:
                self._f.flush()
                self._f.close()
        finally:
            self._f = None

    def __enter__(self) -> "JSONLLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


# -------------------------
# Console logger
# -------------------------


class ReferenceLogger:
    """
    Scoped console logger used by the resolvers and the run coordinator.

    Parameters
    ----------
    scope : str
        Prefix of every line, e.g. "[Reference checker] error: ...".
    events : JSONLLogger | None
        If provided, warnings and errors are mirrored as JSON records with their
        structured fields (source, target, anchor, candidates).
    quiet : bool
        Suppress console output; counting and mirroring still happen.
    stdout, stderr : TextIO | None
        Output streams; default to sys.stdout / sys.stderr at call time.

    Attributes
    ----------
    counts : Counter
        Number of messages emitted per level.
    """

    def __init__(
        self,
        scope: str = "Reference checker",
        *,
        events: Optional[JSONLLogger] = None,
        quiet: bool = False,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ) -> None:
        self.scope = scope
        self.events = events
        self.quiet = bool(quiet)
        self._stdout = stdout
        self._stderr = stderr
        self.counts: Counter = Counter()

    def _emit(self, level: str, message: str, fields: Mapping[str, Any], to_err: bool = False) -> None:
        self.counts[level] += 1
        if self.events is not None and to_err:
            self.events.log({"level": level, "scope": self.scope, "message": message, **fields})
        if self.quiet:
            return
        stream = (self._stderr or sys.stderr) if to_err else (self._stdout or sys.stdout)
        stream.write(f"[{self.scope}] {level}: {message}\n")

    def start(self, message: str, **fields: Any) -> None:
        self._emit("start", message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self._emit("info", message, fields)

    def pending(self, message: str, **fields: Any) -> None:
        self._emit("pending", message, fields)

    def success(self, message: str, **fields: Any) -> None:
        self._emit("success", message, fields)

    def complete(self, message: str, **fields: Any) -> None:
        self._emit("complete", message, fields)

    def warn(self, message: str, **fields: Any) -> None:
        self._emit("warn", message, fields, to_err=True)

    def error(self, message: str, **fields: Any) -> None:
        self._emit("error", message, fields, to_err=True)

    def close(self) -> None:
        if self.events is not None:
            self.events.close()


__all__ = [
    "JSONLLogger",
    "ReferenceLogger",
    "ensure_dir",
]
