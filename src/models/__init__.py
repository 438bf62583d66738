"""
Models package for tailmark

Contains data structures and type definitions for the transpilation pipeline.
"""

from .state import ProgramState, pipeline
from .elements import ElementSpec, ELEMENT_SPECS, elementSpec_get
from .transpiler import SourceDocument, ParsedLine, ScopedRule, TranspileResult

__all__ = [
    "ProgramState",
    "pipeline",
    "ElementSpec",
    "ELEMENT_SPECS",
    "elementSpec_get",
    "SourceDocument",
    "ParsedLine",
    "ScopedRule",
    "TranspileResult",
]
