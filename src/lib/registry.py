"""
Utility class registry

Immutable lookup from utility class name to CSS declaration text. A
registry is built from an explicit mapping or a YAML utility table; there
is no shared global table, so independent registries (one per theme, say)
can coexist in one process.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from ..models.utilities import UtilityTable
from .log import LOG


DEFAULT_UTILITIES_FILE = Path(__file__).parent.parent / "utilities" / "default.yaml"


class UtilityTableError(Exception):
    """Raised when a utility table cannot be loaded or fails validation"""
    pass


class UnknownUtilityClass(LookupError):
    """
    Raised when a utility class name has no registered declaration

    Attributes:
        name: The unregistered utility class name
        lineNumber: Source line that referenced it, once known
    """

    def __init__(self, name: str, lineNumber: Optional[int] = None) -> None:
        super().__init__(name)
        self.name = name
        self.lineNumber = lineNumber

    def __str__(self) -> str:
        if self.lineNumber is not None:
            return f"Unknown utility class '{self.name}' at line {self.lineNumber}"
        return f"Unknown utility class '{self.name}'"


class UtilityClassRegistry:
    """
    Registry of utility class declarations

    Maps utility class names to the literal CSS declaration each one
    contributes to a scoped rule (e.g., "font-semibold" -> "font-weight: 600;").
    Loaded once and never mutated.
    """

    def __init__(self, utilities: Mapping[str, str], name: str = "custom") -> None:
        """
        Build a registry from an explicit mapping

        Args:
            utilities: Utility class name -> CSS declaration text
            name: Registry name, used in log and error messages

        Raises:
            UtilityTableError: If a name or declaration is malformed
        """
        table = self.table_validate({"name": name, "utilities": dict(utilities)})
        self.name = table.name
        self.description = table.description
        self._utilities: Mapping[str, str] = MappingProxyType(dict(table.utilities))

    @staticmethod
    def table_validate(data: object) -> UtilityTable:
        """Validate raw table data, converting pydantic errors to UtilityTableError"""
        try:
            return UtilityTable.model_validate(data)
        except ValidationError as e:
            raise UtilityTableError(f"Invalid utility table: {e}") from e

    @classmethod
    def fromTable(cls, table: UtilityTable) -> "UtilityClassRegistry":
        """Build a registry from an already validated UtilityTable"""
        registry = cls(table.utilities, name=table.name)
        registry.description = table.description
        return registry

    @classmethod
    def fromYAML(cls, path: Union[str, Path]) -> "UtilityClassRegistry":
        """
        Load a registry from a YAML utility table

        Args:
            path: Path to the .yaml file

        Returns:
            UtilityClassRegistry for the table

        Raises:
            UtilityTableError: If the file is missing, unparsable or invalid
        """
        table_path = Path(path)
        if not table_path.exists():
            raise UtilityTableError(f"Utility table not found: {table_path}")

        try:
            with open(table_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise UtilityTableError(f"Failed to parse {table_path.name}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise UtilityTableError(f"{table_path.name} must contain a mapping at top level")

        data.setdefault("name", table_path.stem)
        registry = cls.fromTable(cls.table_validate(data))
        LOG(f"Loaded utility table '{registry.name}' ({len(registry)} classes) from {table_path}", level=2)
        return registry

    @classmethod
    def fromDefault(cls) -> "UtilityClassRegistry":
        """Load the utility table shipped with the package"""
        return cls.fromYAML(DEFAULT_UTILITIES_FILE)

    def resolve(self, name: str) -> str:
        """
        Look up the declaration for a utility class

        Args:
            name: Utility class name (non-empty)

        Returns:
            The exact declaration text registered for the name

        Raises:
            ValueError: If name is empty
            UnknownUtilityClass: If name is not registered
        """
        if not name:
            raise ValueError("utility class name must be a non-empty string")
        try:
            return self._utilities[name]
        except KeyError:
            raise UnknownUtilityClass(name) from None

    def names(self) -> List[str]:
        """Registered utility class names, sorted"""
        return sorted(self._utilities)

    def __contains__(self, name: object) -> bool:
        return name in self._utilities

    def __len__(self) -> int:
        return len(self._utilities)

    def __iter__(self) -> Iterator[str]:
        return iter(self._utilities)

    def __repr__(self) -> str:
        return f"UtilityClassRegistry(name='{self.name}', classes={len(self)})"


def utilityTables_listAvailable(tables_dir: Union[str, Path]) -> List[str]:
    """
    List the utility table names available in a directory.

    Args:
        tables_dir: Directory holding *.yaml / *.yml tables

    Returns:
        Sorted table names (file stems)
    """
    tables_path = Path(tables_dir)

    if not tables_path.is_dir():
        return []

    tables: List[str] = [
        item.stem
        for item in tables_path.iterdir()
        if item.is_file() and item.suffix in ('.yaml', '.yml')
    ]
    return sorted(tables)
