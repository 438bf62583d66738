"""
tailmark - Utility-class markup transpiler

Converts line-oriented markup annotated with utility classes into an HTML
fragment plus a scoped CSS stylesheet.
"""

__version__ = "1.0.0"

from .lib import (
    UtilityClassRegistry,
    UnknownUtilityClass,
    UtilityTableError,
    ScopedSelectorGenerator,
    LineLexer,
    MalformedLine,
    LineTranspiler,
    transpile,
    LOG,
    state_connectToLogger,
)
from .models import ParsedLine, ScopedRule, TranspileResult

__all__ = [
    "UtilityClassRegistry",
    "UnknownUtilityClass",
    "UtilityTableError",
    "ScopedSelectorGenerator",
    "LineLexer",
    "MalformedLine",
    "LineTranspiler",
    "transpile",
    "ParsedLine",
    "ScopedRule",
    "TranspileResult",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
