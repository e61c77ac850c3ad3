"""
Hierarchy models and locale formatting shared by parsing, UI and exports.
"""

from .models import DocumentHeader, ParsedDocument, PositionNode, PositionType

__all__ = ["DocumentHeader", "ParsedDocument", "PositionNode", "PositionType"]
