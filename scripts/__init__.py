# Copyright (c) 2025 Refcheck Maintainers
# License: MIT
"""
Refcheck CLI package.

Holds the entry-point module installed with the wheel, so the `refcheck`
console script defined in pyproject.toml resolves at runtime.
"""

__all__: list[str] = []
