"""Tests for the command-line interface."""

import json
from unittest.mock import patch

import pytest

from seo_audit.cli import main
from seo_audit.errors import NoBrowserAvailable
from seo_audit.fallback import MOCK_WARNING


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("USE_MOCK_SEO", "FALLBACK_TO_MOCK", "AUDIT_TIMEOUT_SECONDS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestCli:
    """Test cases for the seo-audit command."""

    def test_mock_json_output(self, capsys):
        exit_code = main(["example.com", "--mock", "--output", "json"])

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert data["analyzedUrl"] == "https://example.com"
        assert data["warning"] == MOCK_WARNING
        assert data["analysisDepth"] == "standard"

    def test_mock_text_output(self, capsys):
        exit_code = main(["https://example.com", "--mock", "--depth", "deep"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "SIMULATED RESULT" in out
        assert "Overall Score:" in out
        assert "Meta tags:" in out

    def test_json_output_file(self, tmp_path, capsys):
        target = tmp_path / "report.json"

        main(["https://example.com", "--mock", "-o", "json", "-f", str(target)])

        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["warning"] == MOCK_WARNING
        assert "Results written to" in capsys.readouterr().out

    def test_audit_error_exit_code(self, capsys):
        error = NoBrowserAvailable([("managed", "not installed")])
        with patch("seo_audit.cli.run_audit", side_effect=error):
            exit_code = main(["https://example.com", "--no-fallback"])

        assert exit_code == 1
        assert "Could not launch any browser" in capsys.readouterr().err

    def test_overrides_reach_config(self):
        with patch("seo_audit.cli.run_audit") as run_audit:
            run_audit.return_value.to_dict.return_value = {}
            main(["https://example.com", "--timeout", "9", "--fallback", "--block-resources",
                  "-o", "json"])

        url, depth, config = run_audit.call_args.args
        assert url == "https://example.com"
        assert depth == "standard"
        assert config.analysis_timeout == 9
        assert config.fallback_to_mock is True
        assert config.block_resources is True

    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        with patch("seo_audit.cli.run_audit") as run_audit, \
                patch("seo_audit.cli.setup_logging") as setup_logging:
            run_audit.return_value.to_dict.return_value = {}
            main(["https://example.com", "-o", "json"])

        config = run_audit.call_args.args[2]
        assert config.log_level == "DEBUG"
        assert setup_logging.call_args.kwargs["level"] == "DEBUG"

    def test_log_level_flag_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        with patch("seo_audit.cli.run_audit") as run_audit, \
                patch("seo_audit.cli.setup_logging") as setup_logging:
            run_audit.return_value.to_dict.return_value = {}
            main(["https://example.com", "--log-level", "ERROR", "-o", "json"])

        assert run_audit.call_args.args[2].log_level == "ERROR"
        assert setup_logging.call_args.kwargs["level"] == "ERROR"

    @pytest.mark.parametrize("given,expected", [
        ("httpbin.org", "https://httpbin.org"),
        ("http-tools.dev/page", "https://http-tools.dev/page"),
        ("http://example.com", "http://example.com"),
        ("HTTPS://example.com", "HTTPS://example.com"),
    ])
    def test_scheme_is_added_to_bare_hosts(self, given, expected):
        with patch("seo_audit.cli.run_audit") as run_audit, \
                patch("seo_audit.cli.setup_logging"):
            run_audit.return_value.to_dict.return_value = {}
            main([given, "-o", "json"])

        assert run_audit.call_args.args[0] == expected
