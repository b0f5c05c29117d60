"""Unit tests for settings."""

import pytest
from pydantic import ValidationError

from nestrule import DepthLimitExceededError, Rule
from nestrule.core.config import Settings, get_settings


class TestSettings:
    """Test settings loading and validation."""

    def test_defaults(self, monkeypatch):
        """Test default values."""
        for name in ("NESTRULE_MAX_DEPTH", "NESTRULE_LOG_LEVEL", "NESTRULE_LOG_FORMAT", "NESTRULE_ENVIRONMENT"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.max_depth == 64
        assert settings.log_level == "INFO"
        assert settings.log_format == "json"
        assert settings.is_development

    def test_environment_override(self, monkeypatch):
        """Test NESTRULE_ variables override defaults."""
        monkeypatch.setenv("NESTRULE_MAX_DEPTH", "10")
        monkeypatch.setenv("NESTRULE_ENVIRONMENT", "testing")
        settings = get_settings()
        assert settings.max_depth == 10
        assert settings.is_testing

    def test_cached(self):
        """Test get_settings returns one instance."""
        assert get_settings() is get_settings()

    @pytest.mark.parametrize("depth", [0, -1, 257])
    def test_invalid_depth(self, depth):
        """Test out-of-range depth limits are rejected."""
        with pytest.raises(ValidationError):
            Settings(max_depth=depth)

    def test_invalid_log_level(self):
        """Test unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            Settings(log_level="VERBOSE")

    def test_rule_uses_configured_depth(self, monkeypatch):
        """Test rules pick up the configured depth limit."""
        monkeypatch.setenv("NESTRULE_MAX_DEPTH", "1")
        Rule(["!", True])
        with pytest.raises(DepthLimitExceededError):
            Rule(["!", ["!", True]])
