"""
Utility table model

Validated shape of a utility table file: a named mapping from utility
class name to the CSS declaration it stands for.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UtilityTable(BaseModel):
    """
    A named set of utility classes

    Attributes:
        name: Table name (e.g., "default", "dark")
        description: Human-readable description
        utilities: Utility class name -> CSS declaration text

    Example (YAML):
        name: default
        utilities:
          font-semibold: "font-weight: 600;"
          text-red-500: "color: #EF4444;"
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = "custom"
    description: str = ""
    utilities: Dict[str, str] = Field(default_factory=dict)

    @field_validator("utilities")
    @classmethod
    def utilities_validate(cls, utilities: Dict[str, str]) -> Dict[str, str]:
        """Names are single non-empty words; declarations end with their own terminator."""
        for name, declaration in utilities.items():
            if not name or any(ch.isspace() for ch in name):
                raise ValueError(f"invalid utility class name {name!r}")
            if not declaration.strip():
                raise ValueError(f"utility class '{name}' has an empty declaration")
            if not declaration.rstrip().endswith(";"):
                raise ValueError(
                    f"declaration for '{name}' must end with ';' (got {declaration!r})"
                )
        return utilities
