"""
Tests for the ink-insights command line runner.
"""
import json

import httpx
import openai
import pytest
from click.testing import CliRunner

import ink_insights.cli as cli
from ink_insights.core.config import InsightConfig
from ink_insights.insights.ai_providers.openai import OpenAIInsightClient


@pytest.fixture
def entries_file(tmp_path):
    path = tmp_path / "entries.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "5f0c6a2e-8d7b-4f7e-9a55-0f2f1f7f6c11",
                    "date": "2026-10-18T20:15:00+00:00",
                    "mood": "calm",
                    "content": "Evening walk, then read a book.",
                },
                {
                    "id": "9b1e3d52-3f57-4c9b-8a0e-7f3f2f9e1d22",
                    "date": "2026-10-16T08:00:00+00:00",
                    "mood": "stressed",
                    "content": "Big deadline at work.",
                },
            ]
        )
    )
    return path


@pytest.fixture
def use_config(monkeypatch):
    def _use(config, factory=None):
        monkeypatch.setattr(cli, "get_insight_config", lambda: config)
        if factory is not None:
            monkeypatch.setattr(
                cli, "OpenAIInsightClient", lambda cfg: OpenAIInsightClient(cfg, client_factory=factory)
            )

    return _use


@pytest.mark.unit
class TestWeeklyCommand:

    def test_dry_run_prints_prompt(self, entries_file, use_config):
        use_config(InsightConfig())

        result = CliRunner().invoke(cli.main, ["weekly", str(entries_file), "--now", "2026-10-19", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "[system]" in result.output
        assert "- Entries count (7 days): 2" in result.output
        assert '"calm": {"label": "Calm", "count": 1, "percent": 50}' in result.output

    def test_prints_report(self, entries_file, use_config, openai_factory, json_response, valid_payload):
        use_config(InsightConfig(api_key="sk-test"), openai_factory(response=json_response))

        result = CliRunner().invoke(cli.main, ["weekly", str(entries_file), "--now", "2026-10-19"])

        assert result.exit_code == 0, result.output
        report = json.loads(result.output)
        assert report["insight"]["suggestions"] == valid_payload["suggestions"]
        assert report["snapshot"]["entry_count"] == 2

    def test_missing_key(self, entries_file, use_config):
        use_config(InsightConfig(api_key=None))

        result = CliRunner().invoke(cli.main, ["weekly", str(entries_file)])

        assert result.exit_code == 1
        assert "OPENAI_API_KEY is not set." in result.output

    def test_rate_limit_message(self, entries_file, use_config, openai_factory):
        error = openai.RateLimitError(
            "Too many requests",
            response=httpx.Response(429, request=httpx.Request("POST", "https://api.openai.com")),
            body=None,
        )
        use_config(InsightConfig(api_key="sk-test"), openai_factory(error=error))

        result = CliRunner().invoke(cli.main, ["weekly", str(entries_file), "--now", "2026-10-19"])

        assert result.exit_code == 1
        assert "try again shortly" in result.output

    def test_invalid_entries_file(self, tmp_path, use_config):
        use_config(InsightConfig())
        path = tmp_path / "entries.json"
        path.write_text('{"not": "a list"}')

        result = CliRunner().invoke(cli.main, ["weekly", str(path)])

        assert result.exit_code == 1
        assert "JSON array" in result.output

    def test_non_utf8_entries_file(self, tmp_path, use_config):
        use_config(InsightConfig())
        path = tmp_path / "entries.json"
        path.write_bytes(b'[{"content": "caf\xe9"}]')

        result = CliRunner().invoke(cli.main, ["weekly", str(path)])

        assert result.exit_code == 1
        assert "is not UTF-8 text" in result.output
