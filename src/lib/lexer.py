"""
Line lexer for tailmark source documents

Turns source lines into ParsedLine records of (token, value,
utilityClassSpec) using a small regex grammar:

    # Heading text .{extra classes} #{element-id} font-semibold 2rem
        text-red-500 mt-4

- A heading line starts in column 0 with one to six '#' and whitespace.
- .{a b} markers add plain class names, #{x} sets the element id. Both are
  stripped before the line is split.
- The first word is always text. The utility spec starts at the first later
  word the registry knows, pulled back over utility-shaped words right
  before it (text-red-600, 12px); every word from there on is a utility.
- A lone '|' word splits text from utilities explicitly:
  "# Use text-red-500 here | italic".
- Indented lines directly below a heading are continuation lines: all of
  their words are utilities for that heading.
- Blank lines end a continuation block. Anything else is skipped.
"""

import re
from typing import Container, List, Optional, Sequence, Tuple, Union

from ..models.elements import MARKER_CLASS, MARKER_ID, elementSpec_get
from ..models.transpiler import ParsedLine
from .log import LOG


HEADING_PATTERN = re.compile(r'^(#{1,6})(?:[ \t]+(.*))?$')
MARKER_PATTERN = re.compile(r'([.#])\{([^{}]*)\}')
UNTERMINATED_MARKER_PATTERN = re.compile(r'[.#]\{')
# Hyphenated lowercase names (text-red-600) or bare sizes (2rem, 12px)
UTILITY_SHAPE_PATTERN = re.compile(r'^(?:[a-z][a-z0-9]*(?:-[a-z0-9.]+)+|\d+(?:\.\d+)?(?:rem|em|px|%))$')
UTILITY_SEPARATOR = "|"


class MalformedLine(SyntaxError):
    """
    Raised when a recognized line is missing a required field or carries
    broken marker syntax

    Attributes:
        lineNumber: 1-based source line number
        line: The offending source line
    """

    def __init__(self, message: str, lineNumber: int, line: str) -> None:
        super().__init__(f"{message} at line {lineNumber}: {line!r}")
        self.reason = message
        self.lineNumber = lineNumber
        self.line = line


class LineLexer:
    """
    Tokenizer for tailmark source lines

    Args:
        registry: Container of known utility class names, used to find where
                  the inline utility spec begins. With an empty container the
                  whole heading line is text.
        malformed_policy: "raise" to signal MalformedLine, "skip" to drop the
                          offending element (and its continuation lines)
    """

    def __init__(
        self,
        registry: Optional[Container[str]] = None,
        malformed_policy: str = "raise",
    ) -> None:
        if malformed_policy not in ("raise", "skip"):
            raise ValueError(f"malformed_policy must be 'raise' or 'skip', not '{malformed_policy}'")
        self.registry: Container[str] = registry if registry is not None else frozenset()
        self.malformed_policy = malformed_policy

    @staticmethod
    def lines_split(document: Union[str, Sequence[str]]) -> List[str]:
        """Accept either a newline-delimited text blob or a sequence of lines"""
        if isinstance(document, str):
            return [line.rstrip('\r') for line in document.split('\n')]
        return list(document)

    def markers_extract(
        self, text: str, lineNumber: int, line: str
    ) -> Tuple[str, List[str], Optional[str]]:
        """
        Strip .{...} and #{...} markers from text

        Returns:
            (remaining text, extra class names, element id or None)

        Raises:
            MalformedLine: On an unterminated marker, an empty or multi-word
                           id, or more than one id marker
        """
        classes: List[str] = []
        element_id: Optional[str] = None

        for marker, body in MARKER_PATTERN.findall(text):
            if marker == MARKER_CLASS:
                classes.extend(body.split())
            elif marker == MARKER_ID:
                words = body.split()
                if len(words) != 1:
                    raise MalformedLine("Id marker needs exactly one name", lineNumber, line)
                if element_id is not None:
                    raise MalformedLine("Duplicate id marker", lineNumber, line)
                element_id = words[0]

        remaining = MARKER_PATTERN.sub(' ', text)
        if UNTERMINATED_MARKER_PATTERN.search(remaining):
            raise MalformedLine("Unterminated marker", lineNumber, line)

        return remaining, classes, element_id

    def utilitySplit_find(self, words: List[str]) -> int:
        """Index of the first word that starts the utility spec (len(words) if none)"""
        split_at = len(words)
        for index in range(1, len(words)):
            if words[index] in self.registry:
                split_at = index
                break

        # Mistyped utilities look like utilities; keep them in the spec so they fail loudly
        while split_at > 1 and UTILITY_SHAPE_PATTERN.match(words[split_at - 1]):
            split_at -= 1
        return split_at

    def heading_parse(self, line: str, lineNumber: int) -> Optional[ParsedLine]:
        """
        Parse a column-0 line as a heading

        Returns:
            ParsedLine, or None if the line carries no recognized token

        Raises:
            MalformedLine: If the heading has no text
        """
        match = HEADING_PATTERN.match(line.rstrip())
        if not match:
            return None

        token = match.group(1)
        if elementSpec_get(token) is None:
            return None

        rest, classes, element_id = self.markers_extract(match.group(2) or "", lineNumber, line)
        words = rest.split()
        if not words:
            raise MalformedLine(f"Token '{token}' has no value", lineNumber, line)

        if UTILITY_SEPARATOR in words:
            split_at = words.index(UTILITY_SEPARATOR)
            utilities = words[split_at + 1:]
        else:
            split_at = self.utilitySplit_find(words)
            utilities = words[split_at:]

        if split_at == 0:
            raise MalformedLine(f"Token '{token}' has no value", lineNumber, line)

        return ParsedLine(
            token=token,
            value=' '.join(words[:split_at]),
            utilityClassSpec=' '.join(utilities),
            utilityLineNumbers=[lineNumber] * len(utilities),
            classes=classes,
            elementId=element_id,
            lineNumber=lineNumber,
        )

    def continuation_apply(self, parsed: ParsedLine, line: str, lineNumber: int) -> None:
        """Fold an indented continuation line into the heading it belongs to"""
        rest, classes, element_id = self.markers_extract(line, lineNumber, line)
        if element_id is not None:
            if parsed.elementId is not None:
                raise MalformedLine("Duplicate id marker", lineNumber, line)
            parsed.elementId = element_id
        parsed.classes.extend(classes)
        utilities = rest.split()
        parsed.utilityClassSpec = ' '.join(parsed.utilityClassSpec.split() + utilities)
        parsed.utilityLineNumbers.extend([lineNumber] * len(utilities))

    def malformed_handle(self, error: MalformedLine) -> None:
        """Apply the malformed-line policy: re-raise, or log and carry on"""
        if self.malformed_policy == "raise":
            raise error
        LOG(f"Skipping malformed line: {error}", level=2)

    def tokenize(self, document: Union[str, Sequence[str]]) -> List[ParsedLine]:
        """
        Tokenize a source document into ParsedLines, in source order

        Args:
            document: Text blob or sequence of lines

        Returns:
            One ParsedLine per recognized element. Empty for an empty document.

        Raises:
            MalformedLine: Under the "raise" policy

        Example:
            >>> lexer = LineLexer(registry={"font-semibold", "2rem"})
            >>> lexer.tokenize("# Heading 1 font-semibold 2rem")[0].value
            'Heading 1'
        """
        parsed_lines: List[ParsedLine] = []
        current: Optional[ParsedLine] = None
        # True while skipping the continuation lines of a dropped heading
        dropping = False

        for index, line in enumerate(self.lines_split(document)):
            lineNumber = index + 1

            if not line.strip():
                current, dropping = None, False
                continue

            if line[0].isspace():
                if current is not None:
                    try:
                        self.continuation_apply(current, line, lineNumber)
                    except MalformedLine as e:
                        self.malformed_handle(e)
                        parsed_lines.pop()
                        current, dropping = None, True
                elif not dropping:
                    LOG(f"Line {lineNumber}: indented line without heading, skipped", level=3)
                continue

            current, dropping = None, False
            try:
                current = self.heading_parse(line, lineNumber)
            except MalformedLine as e:
                self.malformed_handle(e)
                dropping = True
                continue

            if current is None:
                LOG(f"Line {lineNumber}: no recognized token, skipped", level=3)
                continue

            LOG(f"Line {lineNumber}: token '{current.token}' value '{current.value}'", level=3)
            parsed_lines.append(current)

        return parsed_lines
