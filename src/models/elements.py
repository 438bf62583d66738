"""
Element specification models

Maps line tokens to the HTML elements they produce, and names the marker
syntax the lexer strips from a line before splitting it.
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class ElementSpec:
    """
    Specification for one recognized line token

    Attributes:
        token: Leading marker on the source line (e.g., "#", "###")
        tag: HTML tag name emitted for the line (e.g., "h1")
    """
    token: str
    tag: str


# One entry per heading level, "#" -> h1 through "######" -> h6
ELEMENT_SPECS: Dict[str, ElementSpec] = {
    "#" * level: ElementSpec(token="#" * level, tag=f"h{level}")
    for level in range(1, 7)
}

# Annotation markers stripped from a line before value/utility splitting
MARKER_CLASS = "."   # .{name other} - extra plain class names
MARKER_ID = "#"      # #{name} - element id


def elementSpec_get(token: str) -> Optional[ElementSpec]:
    """Look up the element spec for a token, or None if it is not recognized"""
    return ELEMENT_SPECS.get(token)
