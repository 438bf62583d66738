"""Transpiler building blocks: registry, selector generator, lexer, transpiler, logging"""

from .registry import UtilityClassRegistry, UnknownUtilityClass, UtilityTableError
from .selector import ScopedSelectorGenerator
from .lexer import LineLexer, MalformedLine
from .transpiler import LineTranspiler, transpile
from .log import LOG, state_connectToLogger

__all__ = [
    "UtilityClassRegistry",
    "UnknownUtilityClass",
    "UtilityTableError",
    "ScopedSelectorGenerator",
    "LineLexer",
    "MalformedLine",
    "LineTranspiler",
    "transpile",
    "LOG",
    "state_connectToLogger",
]
