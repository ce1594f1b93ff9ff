"""Tests for configuration loading."""

import pytest

from seo_audit.config import AuditConfig


ENV_VARS = [
    "AUDIT_TIMEOUT_SECONDS",
    "NAVIGATION_TIMEOUT_SECONDS",
    "FALLBACK_TO_MOCK",
    "USE_MOCK_SEO",
    "BLOCK_RESOURCES",
    "BROWSERLESS_TOKEN",
    "BROWSERLESS_ENDPOINT",
    "HEADLESS",
    "USER_AGENT",
    "PROBE_TIMEOUT_SECONDS",
    "MAX_CONCURRENT_PROBES",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestAuditConfig:
    """Test cases for AuditConfig."""

    def test_defaults(self, clean_env):
        config = AuditConfig.from_env()

        assert config.analysis_timeout == 60.0
        assert config.navigation_timeout == 30.0
        assert config.fallback_to_mock is False
        assert config.use_mock is False
        assert config.remote_endpoint is None

    def test_from_env(self, clean_env):
        clean_env.setenv("AUDIT_TIMEOUT_SECONDS", "12.5")
        clean_env.setenv("FALLBACK_TO_MOCK", "yes")
        clean_env.setenv("USE_MOCK_SEO", "true")
        clean_env.setenv("HEADLESS", "0")
        clean_env.setenv("MAX_CONCURRENT_PROBES", "4")

        config = AuditConfig.from_env()

        assert config.analysis_timeout == 12.5
        assert config.fallback_to_mock is True
        assert config.use_mock is True
        assert config.headless is False
        assert config.max_concurrent_probes == 4

    def test_invalid_number_keeps_default(self, clean_env):
        clean_env.setenv("MAX_CONCURRENT_PROBES", "lots")

        assert AuditConfig.from_env().max_concurrent_probes == 10

    def test_remote_endpoint_from_token(self, clean_env):
        clean_env.setenv("BROWSERLESS_TOKEN", "abc123")
        clean_env.setenv("BROWSERLESS_ENDPOINT", "wss://browser.example.com?token={token}")

        config = AuditConfig.from_env()

        assert config.remote_endpoint == "wss://browser.example.com?token=abc123"

    def test_browser_config(self):
        config = AuditConfig(navigation_timeout=15, block_resources=True, user_agent="AuditBot")

        browser_config = config.browser_config()

        assert browser_config.timeout == 15000
        assert browser_config.block_resources == ["image", "font", "stylesheet", "media"]
        assert browser_config.user_agent == "AuditBot"

    @pytest.mark.parametrize("value", ["600", "0.5"])
    def test_out_of_range_navigation_timeout_keeps_default(self, clean_env, value):
        clean_env.setenv("NAVIGATION_TIMEOUT_SECONDS", value)

        config = AuditConfig.from_env()

        assert config.navigation_timeout == 30.0
        assert config.browser_config().timeout == 30000

    def test_navigation_timeout_bounds_accepted(self, clean_env):
        clean_env.setenv("NAVIGATION_TIMEOUT_SECONDS", "300")

        assert AuditConfig.from_env().browser_config().timeout == 300000

    @pytest.mark.parametrize("seconds", [600, 0.5])
    def test_out_of_range_navigation_timeout_rejected(self, seconds):
        with pytest.raises(ValueError, match="navigation_timeout must be between 1 and 300 seconds"):
            AuditConfig(navigation_timeout=seconds, fallback_to_mock=True)
