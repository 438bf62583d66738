"""
Scoped selector generator

Turns a whitespace-separated utility class spec into a ScopedRule: a
freshly generated class identifier plus the registry declarations for each
utility, concatenated in spec order.

Identifiers combine a process-wide monotonic sequence number with a random
hex suffix drawn from `secrets`, e.g. "tm-2a-5f01c9d3". The sequence alone
makes them unique within the process; the suffix makes them differ between
processes and runs.
"""

import itertools
import secrets
import threading
from typing import List, Optional

from ..config import AppSettings, appsettings
from ..models.transpiler import ScopedRule
from .log import LOG
from .registry import UtilityClassRegistry


# Shared by every generator in the process; reset only at process start
_sequence = itertools.count()
_sequence_lock = threading.Lock()


def sequence_next() -> int:
    """Draw the next process-wide sequence number"""
    with _sequence_lock:
        return next(_sequence)


class ScopedSelectorGenerator:
    """
    Generates scoped CSS rules from utility class specs

    Holds no mutable state of its own; the only shared state is the
    lock-protected process sequence, so one generator may safely serve
    concurrent transpile calls.
    """

    def __init__(
        self,
        registry: UtilityClassRegistry,
        settings: Optional[AppSettings] = None,
    ) -> None:
        """
        Args:
            registry: Source of utility class declarations
            settings: Identifier prefix/entropy configuration (defaults to appsettings)
        """
        self.registry = registry
        self.settings = settings or appsettings

    def identifier_generate(self) -> str:
        """Produce an identifier distinct from every earlier one in this process"""
        suffix = secrets.token_hex(self.settings.id_entropy_bytes)
        return self.settings.identifier_make(sequence_next(), suffix)

    def declarations_resolve(self, utilityClassSpec: str) -> str:
        """
        Resolve every utility in a spec and concatenate the declarations

        Raises:
            UnknownUtilityClass: On the first unregistered name
        """
        tokens: List[str] = utilityClassSpec.split()
        return ''.join(self.registry.resolve(token) for token in tokens)

    def generate(self, utilityClassSpec: str) -> ScopedRule:
        """
        Build a scoped rule for a utility class spec

        Args:
            utilityClassSpec: Whitespace-separated utility class names
                              (empty is legal and yields an empty body)

        Returns:
            ScopedRule with a fresh identifier and the concatenated declarations

        Raises:
            UnknownUtilityClass: Propagated from the registry, unchanged

        Example:
            >>> rule = generator.generate("font-semibold 2rem")
            >>> rule.declarations
            'font-weight: 600;font-size: 2rem;'
            >>> rule.css
            '.tm-0-5f01c9d3 {font-weight: 600;font-size: 2rem;}'
        """
        # Resolve first so a failed spec does not consume a sequence number
        declarations = self.declarations_resolve(utilityClassSpec)
        identifier = self.identifier_generate()
        LOG(f"Scoped rule {identifier}: '{utilityClassSpec}'", level=3)
        return ScopedRule(identifier=identifier, declarations=declarations)
