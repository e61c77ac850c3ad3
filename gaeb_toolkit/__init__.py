"""
GAEB Converter: parse GAEB bill-of-quantities files and export production lists.
"""

from .system.version import __version__

__all__ = ["__version__"]
