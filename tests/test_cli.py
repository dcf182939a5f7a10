"""Tests for the command-line entry point."""

import json
from unittest.mock import patch

import pytest

import cli
from config import ConfigError, VectorScopeConfig
from ports import QuoteUnavailable

from conftest import run_analysis


@pytest.fixture
def result():
    return run_analysis(include_secondary=False)


@pytest.fixture
def patched(result):
    with patch("cli.load_dotenv") as load_dotenv, \
         patch("cli.get_config", return_value=VectorScopeConfig()) as get_config, \
         patch("cli.analyze", return_value=result) as analyze:
        yield {"load_dotenv": load_dotenv, "get_config": get_config, "analyze": analyze}


class TestAnalyzeCommand:
    def test_markdown_default(self, patched, capsys):
        assert cli.main(["analyze", "acme"]) == 0

        out = capsys.readouterr().out
        assert out.startswith("# ACME - ")
        patched["load_dotenv"].assert_called_once()
        patched["analyze"].assert_called_once_with(
            "acme",
            config=patched["get_config"].return_value,
            timeout=None,
            include_secondary=True,
        )

    def test_json_flag(self, patched, result, capsys):
        assert cli.main(["analyze", "ACME", "--json"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["ticker"] == "ACME"
        assert payload["bullCase"]["score"] == result.bull_case.score

    def test_summary_format(self, patched, capsys):
        assert cli.main(["analyze", "ACME", "-f", "summary"]) == 0
        assert capsys.readouterr().out.startswith("ACME is trading at $100.00")

    def test_options_forwarded(self, patched):
        cli.main(["analyze", "ACME", "--no-secondary", "--timeout", "5"])

        kwargs = patched["analyze"].call_args.kwargs
        assert kwargs["include_secondary"] is False
        assert kwargs["timeout"] == 5.0

    def test_output_file(self, patched, tmp_path, capsys):
        target = tmp_path / "acme.md"
        assert cli.main(["analyze", "ACME", "-o", str(target)]) == 0

        assert target.read_text().startswith("# ACME - ")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert f"Analysis written to {target}" in captured.err

    def test_quote_unavailable(self, patched, capsys):
        patched["analyze"].side_effect = QuoteUnavailable("NOPE")

        assert cli.main(["analyze", "NOPE"]) == 1
        assert "ERROR: No quote data available for NOPE" in capsys.readouterr().err

    def test_explicit_config_path(self, patched, tmp_path):
        path = tmp_path / "vectorscope.toml"
        path.write_text("[http]\ntimeout_seconds = 15\n")

        cli.main(["analyze", "ACME", "--config", str(path)])

        patched["get_config"].assert_not_called()
        assert patched["analyze"].call_args.kwargs["config"].http.timeout_seconds == 15.0

    def test_config_error(self, patched, capsys):
        patched["get_config"].side_effect = ConfigError("Invalid configuration: bad", field="http.timeout_seconds")

        assert cli.main(["analyze", "ACME"]) == 1
        assert "ERROR: Invalid configuration" in capsys.readouterr().err
        patched["analyze"].assert_not_called()

    def test_invalid_timeout(self, patched, capsys):
        patched["analyze"].side_effect = ConfigError("Invalid timeout: -1.0", field="timeout")

        assert cli.main(["analyze", "ACME", "--timeout", "-1"]) == 1
        assert "ERROR: Invalid timeout: -1.0 | Field: timeout" in capsys.readouterr().err

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.main([])
