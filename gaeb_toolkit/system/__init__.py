"""
System services: error handling, console debug output and session state.
"""

from .debug_output import emit_debug, emit_error, is_debug_enabled
from .version import __version__

__all__ = [
    "emit_debug",
    "emit_error",
    "is_debug_enabled",
    "__version__",
]
