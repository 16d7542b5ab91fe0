# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
Locale markers in corpus paths: "/docs/guide@fr.md" is the French variant of "/docs/guide.md".
"""

from __future__ import annotations

import re
from typing import Container, Optional

_LOCALE_MARKER_RE = re.compile(r"@[^./]+")


def locale_of(path: str) -> Optional[str]:
    """Locale code embedded in path, or None."""
    if "@" not in path:
        return None
    start = path.index("@") + 1
    end = path.rfind(".")
    if end < start:
        end = len(path)
    return path[start:end] or None


def strip_locale(path: str) -> str:
    return _LOCALE_MARKER_RE.sub("", path, count=1)


def with_locale(path: str, locale: str, extension: str = ".md") -> str:
    if not path.endswith(extension):
        return path
    return f"{path[:-len(extension)]}@{locale}{extension}"


def path_for_locale(path: str, locale: str, indexed: Container[str], extension: str = ".md") -> str:
    """The locale variant of path if it is indexed, else path itself."""
    candidate = with_locale(path, locale, extension)
    return candidate if candidate in indexed else path


__all__ = ["locale_of", "strip_locale", "with_locale", "path_for_locale"]
