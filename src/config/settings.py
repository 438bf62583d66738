"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use TAILMARK_ prefix (e.g., TAILMARK_ID_PREFIX=ui).

Settings can also be loaded from a .env file in the project root.
"""

import re
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use TAILMARK_ prefix.

    Examples:
        TAILMARK_ID_PREFIX=ui
        TAILMARK_MALFORMED_POLICY=skip
        TAILMARK_UTILITIES_FILE=themes/dark.yaml
    """

    model_config = SettingsConfigDict(
        env_prefix="TAILMARK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Scoped selector configuration
    id_prefix: str = Field(
        default="tm",
        description="Leading part of every generated scoped class identifier",
    )

    id_entropy_bytes: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Number of random bytes (hex encoded) appended to each identifier",
    )

    # Utility table configuration
    utilities_file: Optional[str] = Field(
        default=None,
        description="Path to a YAML utility table. Defaults to the packaged table",
    )

    # Transpilation configuration
    malformed_policy: Literal["raise", "skip"] = Field(
        default="raise",
        description="What to do with a recognized line that is missing its value",
    )

    escape_html: bool = Field(
        default=True,
        description="HTML-escape element text and attribute values",
    )

    @field_validator("id_prefix")
    @classmethod
    def idPrefix_validate(cls, value: str) -> str:
        """The prefix starts every CSS class name, so it must be a valid identifier start."""
        if not re.fullmatch(r"[A-Za-z_][A-Za-z0-9_-]*", value):
            raise ValueError(f"id_prefix '{value}' is not a valid CSS identifier start")
        return value

    def identifier_make(self, sequence: int, suffix: str) -> str:
        """
        Build a scoped class identifier from a sequence number and random suffix.

        Args:
            sequence: Process-wide monotonic sequence number
            suffix: Random hex suffix

        Returns:
            Identifier string (e.g., "tm-1f-9c04ab7e")

        Example:
            >>> settings = AppSettings()
            >>> settings.identifier_make(31, "9c04ab7e")
            'tm-1f-9c04ab7e'
        """
        return f"{self.id_prefix}-{sequence:x}-{suffix}"


# Singleton instance - import this in your code
appsettings = AppSettings()
