"""
closuredeps: Closure Library dependency extraction for JavaScript sources.

closuredeps parses JavaScript files and reports the namespaces each file
declares with ``goog.provide`` and depends on with ``goog.require``. The
results can be printed, exported as JSON, or written as a Closure
``deps.js`` file for the debug loader.

Library usage::

    from closuredeps import DependencyExtractor, JavaScriptParser

    parsed = JavaScriptParser().parse_file("app/main.js")
    result = DependencyExtractor().extract(parsed.root)
"""

from __future__ import annotations

from closuredeps.__version__ import __version__
from closuredeps.core import DependencyExtractor, DependencyScanner, JavaScriptParser
from closuredeps.models import ExtractionResult, NodeKind, SyntaxNode

__author__ = "closuredeps Contributors"
__license__ = "Apache-2.0"
__description__ = "Extract goog.provide / goog.require dependencies from JavaScript."

__all__ = [
    "__version__",
    "DependencyExtractor",
    "DependencyScanner",
    "JavaScriptParser",
    "ExtractionResult",
    "NodeKind",
    "SyntaxNode",
]
