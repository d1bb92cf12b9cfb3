"""
Core functionality exports for closuredeps.

    from closuredeps.core import DependencyExtractor, DependencyScanner
"""

from __future__ import annotations

from closuredeps.core.extractor import DependencyExtractor
from closuredeps.core.parser import JavaScriptParser, ParsedSource
from closuredeps.core.scanner import DependencyScanner

__all__ = [
    "DependencyExtractor",
    "JavaScriptParser",
    "ParsedSource",
    "DependencyScanner",
]
