"""
Unified data model exports for closuredeps.

Example:
    >>> from closuredeps.models import SyntaxNode, ExtractionResult
"""

from __future__ import annotations

from closuredeps.models.syntax import NodeKind, SyntaxNode
from closuredeps.models.dependencies import ExtractionResult, SourceFileDependencies

__all__ = [
    "NodeKind",
    "SyntaxNode",
    "ExtractionResult",
    "SourceFileDependencies",
]
