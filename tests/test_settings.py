"""
Settings tests

Tests defaults, environment overrides and identifier helpers.
"""

import pytest
from pydantic import ValidationError

from tailmark.config import AppSettings


class TestDefaults:
    """Test default configuration"""

    def test_defaults(self, monkeypatch):
        """Defaults match the documented values"""
        for name in ("ID_PREFIX", "ID_ENTROPY_BYTES", "UTILITIES_FILE", "MALFORMED_POLICY", "ESCAPE_HTML"):
            monkeypatch.delenv(f"TAILMARK_{name}", raising=False)
        settings = AppSettings()

        assert settings.id_prefix == "tm"
        assert settings.id_entropy_bytes == 4
        assert settings.utilities_file is None
        assert settings.malformed_policy == "raise"
        assert settings.escape_html is True

    def test_identifier_make(self):
        """Sequence is hex-encoded between prefix and suffix"""
        settings = AppSettings(id_prefix="tm")
        assert settings.identifier_make(31, "9c04ab7e") == "tm-1f-9c04ab7e"
        assert settings.identifier_make(0, "00") == "tm-0-00"


class TestEnvironment:
    """Test TAILMARK_ environment overrides"""

    def test_env_override(self, monkeypatch):
        """Environment variables override defaults"""
        monkeypatch.setenv("TAILMARK_ID_PREFIX", "ui")
        monkeypatch.setenv("TAILMARK_MALFORMED_POLICY", "skip")
        monkeypatch.setenv("TAILMARK_ESCAPE_HTML", "false")

        settings = AppSettings()

        assert settings.id_prefix == "ui"
        assert settings.malformed_policy == "skip"
        assert settings.escape_html is False


class TestValidation:
    """Invalid settings are rejected"""

    @pytest.mark.parametrize("prefix", ["1tm", "-tm", "t m", ""])
    def test_prefix_must_start_identifier(self, prefix):
        """Prefixes must be usable as the start of a CSS class name"""
        with pytest.raises(ValidationError):
            AppSettings(id_prefix=prefix)

    def test_unknown_policy(self):
        """Policy is limited to raise/skip"""
        with pytest.raises(ValidationError):
            AppSettings(malformed_policy="ignore")

    def test_entropy_bounds(self):
        """At least one byte of entropy"""
        with pytest.raises(ValidationError):
            AppSettings(id_entropy_bytes=0)

    def test_only_used_settings_exist(self):
        """Every setting is read somewhere; no leftover switches"""
        assert set(AppSettings.model_fields) == {
            "id_prefix",
            "id_entropy_bytes",
            "utilities_file",
            "malformed_policy",
            "escape_html",
        }
