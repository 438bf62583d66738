"""
Transpiler-specific data models

Type-safe structures passed between the lexer, the scoped selector
generator and the line transpiler.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

# Raw input: an ordered sequence of source lines, owned by the caller
SourceDocument = Sequence[str]


@dataclass
class ParsedLine:
    """
    Tokenized form of one logical source line

    Returned by LineLexer.tokenize() for every line that carries a recognized
    token. Continuation lines have already been folded into the spec of the
    heading they belong to.

    Attributes:
        token: Leading marker identifying the element kind (e.g., "#", "##")
        value: Literal text content of the element
        utilityClassSpec: Space-joined utility class names, marker syntax stripped
        classes: Plain class names from a .{...} marker
        elementId: Element id from a #{...} marker, if any
        lineNumber: 1-based source line where the element starts
        utilityLineNumbers: Source line of each utilityClassSpec word, in order

    Example:
        For source "# Heading 1 .{nav} font-semibold 2rem":
        ParsedLine(
            token="#",
            value="Heading 1",
            utilityClassSpec="font-semibold 2rem",
            classes=["nav"],
            elementId=None,
            lineNumber=1,
            utilityLineNumbers=[1, 1]
        )
    """
    token: str
    value: str
    utilityClassSpec: str
    classes: List[str] = field(default_factory=list)
    elementId: Optional[str] = None
    lineNumber: int = 0
    utilityLineNumbers: List[int] = field(default_factory=list)

    def utilityLine_find(self, name: str) -> int:
        """Source line of the first spec word equal to name (the element line if absent)"""
        for word, lineNumber in zip(self.utilityClassSpec.split(), self.utilityLineNumbers):
            if word == name:
                return lineNumber
        return self.lineNumber


@dataclass(frozen=True)
class ScopedRule:
    """
    A generated CSS class selector and its concatenated declaration body

    Attributes:
        identifier: Unique class name for one annotated element
        declarations: Utility declarations joined in spec order

    Example:
        ScopedRule(identifier="tm-0-1a2b3c4d", declarations="font-weight: 600;")
        .css -> ".tm-0-1a2b3c4d {font-weight: 600;}"
    """
    identifier: str
    declarations: str

    @property
    def css(self) -> str:
        """Render the rule as a self-delimited CSS block"""
        return f".{self.identifier} {{{self.declarations}}}"


@dataclass(frozen=True)
class TranspileResult:
    """
    Aggregate output of one transpile call

    Attributes:
        html: Concatenated element strings, no separators
        css: Concatenated scoped rules, no separators
        rules: The scoped rules behind css, in source order
    """
    html: str
    css: str
    rules: Tuple[ScopedRule, ...] = field(default=(), compare=False)
