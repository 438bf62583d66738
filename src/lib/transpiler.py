"""
Line transpiler for tailmark documents

Transforms a source document into a TranspileResult: an HTML fragment with
one element per recognized line, and a stylesheet with one scoped rule per
element.

The transpiler works in two phases:
1. Tokenizing: LineLexer turns source lines into ParsedLines
2. Emitting: each ParsedLine is dispatched on its token to an element
   template; its utility spec becomes a scoped rule

Output is accumulated and only joined once every line has been processed,
so a failure on any line leaves no partial output behind.

Example:
    >>> registry = UtilityClassRegistry({"font-semibold": "font-weight: 600;"})
    >>> result = LineTranspiler(registry).transpile("# Hello font-semibold")
    >>> result.html
    '<h1 class="tm-0-5f01c9d3">Hello</h1>'
    >>> result.css
    '.tm-0-5f01c9d3 {font-weight: 600;}'
"""

import html
from typing import List, Optional, Sequence, Union

from ..config import AppSettings, appsettings
from ..models.elements import elementSpec_get
from ..models.transpiler import ParsedLine, ScopedRule, TranspileResult
from .lexer import LineLexer
from .log import LOG
from .registry import UnknownUtilityClass, UtilityClassRegistry
from .selector import ScopedSelectorGenerator


class LineTranspiler:
    """
    Transpiles tailmark source into an (html, css) pair

    Handles:
    - Heading levels 1-6
    - Inline and continuation-line utility specs
    - .{class} and #{id} markers
    - Fail-fast on unknown utility classes
    """

    def __init__(
        self,
        registry: UtilityClassRegistry,
        generator: Optional[ScopedSelectorGenerator] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        """
        Args:
            registry: Utility class declarations
            generator: Scoped selector generator (built from registry if omitted)
            settings: Runtime configuration (defaults to appsettings)
        """
        self.registry = registry
        self.settings = settings or appsettings
        self.generator = generator or ScopedSelectorGenerator(registry, self.settings)
        self.lexer = LineLexer(registry=registry, malformed_policy=self.settings.malformed_policy)

    def text_escape(self, text: str) -> str:
        if self.settings.escape_html:
            return html.escape(text, quote=True)
        return text

    def element_render(self, parsed: ParsedLine, rule: ScopedRule) -> str:
        """
        Render the HTML element for a parsed line

        Args:
            parsed: Tokenized line
            rule: Scoped rule whose identifier becomes the first class

        Returns:
            Element string, e.g. '<h1 class="tm-0-5f01c9d3 nav" id="top">Intro</h1>'
        """
        spec = elementSpec_get(parsed.token)
        if spec is None:
            raise ValueError(f"No element registered for token '{parsed.token}'")

        class_attr = ' '.join([rule.identifier, *parsed.classes])
        attrs = f' class="{self.text_escape(class_attr)}"'
        if parsed.elementId is not None:
            attrs += f' id="{self.text_escape(parsed.elementId)}"'

        return f'<{spec.tag}{attrs}>{self.text_escape(parsed.value)}</{spec.tag}>'

    def line_transpile(self, parsed: ParsedLine) -> tuple[str, ScopedRule]:
        """
        Transpile one parsed line to its element and scoped rule

        Raises:
            UnknownUtilityClass: Tagged with the source line holding the bad name
        """
        try:
            rule = self.generator.generate(parsed.utilityClassSpec)
        except UnknownUtilityClass as e:
            e.lineNumber = parsed.utilityLine_find(e.name)
            raise
        return self.element_render(parsed, rule), rule

    def transpile(self, document: Union[str, Sequence[str]]) -> TranspileResult:
        """
        Transpile a whole source document

        Args:
            document: Newline-delimited text blob or sequence of lines

        Returns:
            TranspileResult with html and css concatenated in source order.
            An empty document yields TranspileResult(html="", css="").

        Raises:
            UnknownUtilityClass: If any line references an unregistered class
            MalformedLine: If a recognized line is malformed (policy "raise")
        """
        parsed_lines = self.lexer.tokenize(document)
        LOG(f"Tokenized {len(parsed_lines)} elements", level=2)

        html_parts: List[str] = []
        rules: List[ScopedRule] = []

        for parsed in parsed_lines:
            element_html, rule = self.line_transpile(parsed)
            html_parts.append(element_html)
            rules.append(rule)

        LOG(f"Emitted {len(html_parts)} elements and {len(rules)} scoped rules", level=2)
        return TranspileResult(
            html=''.join(html_parts),
            css=''.join(rule.css for rule in rules),
            rules=tuple(rules),
        )


def transpile(
    document: Union[str, Sequence[str]],
    registry: Optional[UtilityClassRegistry] = None,
) -> TranspileResult:
    """
    Transpile a document with a one-off LineTranspiler

    Args:
        document: Source text or lines
        registry: Utility classes (defaults to the packaged table)
    """
    if registry is None:
        registry = UtilityClassRegistry.fromDefault()
    return LineTranspiler(registry).transpile(document)
