"""Tests for logging configuration and the command-line entrypoint."""

from __future__ import annotations

import json

import pytest
import structlog
from typer.testing import CliRunner

from imdb_suggest import main as main_module
from imdb_suggest.config import SuggestSettings
from imdb_suggest.domain.models import Icon, ResultDocument, ResultItem
from imdb_suggest.logging import configure_logging
from imdb_suggest.services.exceptions import ConfigurationError

runner = CliRunner()


def test_configure_logging_writes_json_to_stderr(capsys):
    configure_logging()
    logger = structlog.get_logger()
    logger.info("unit-test", foo="bar")
    captured = capsys.readouterr()
    assert captured.out == ""
    record = json.loads(captured.err.strip().splitlines()[-1])
    assert record["event"] == "unit-test"
    assert record["foo"] == "bar"
    assert record["level"] == "info"


def test_configure_logging_filters_below_level(capsys):
    configure_logging("WARNING")
    structlog.get_logger().info("quiet")
    structlog.get_logger().warning("loud")
    err = capsys.readouterr().err
    assert "quiet" not in err
    assert "loud" in err


@pytest.fixture
def cli(monkeypatch, settings):
    monkeypatch.setattr(main_module, "get_settings", lambda: settings)
    return settings


def test_cli_prints_document_from_pipeline(cli, monkeypatch):
    seen = {}

    async def fake_run(query, settings):
        seen["query"] = query
        seen["settings"] = settings
        item = ResultItem(uid="tt0133093", title="The Matrix", subtitle="1999", arg="tt0133093", icon=Icon(path="icon.png"))
        return ResultDocument(items=[item])

    monkeypatch.setattr(main_module, "run", fake_run)

    result = runner.invoke(main_module.app, ["mat"])

    assert result.exit_code == 0
    assert seen == {"query": "mat", "settings": cli}
    assert json.loads(result.stdout)["items"][0]["uid"] == "tt0133093"


def test_cli_without_argument_prints_empty_items(cli):
    result = runner.invoke(main_module.app, [])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"items": []}


def test_cli_short_query_keeps_typing(cli):
    result = runner.invoke(main_module.app, ["ma"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["items"][0]["title"] == "Keep typing..."
    assert not cli.cache_dir.exists()


def test_cli_turns_pipeline_crash_into_error_item(cli, monkeypatch):
    async def broken_run(query, settings):
        raise OSError("disk on fire")

    monkeypatch.setattr(main_module, "run", broken_run)

    result = runner.invoke(main_module.app, ["matrix"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload == {
        "items": [{"title": "Error", "subtitle": "disk on fire", "icon": {"path": "icon.png"}, "valid": False}]
    }


def test_cli_reports_invalid_configuration(monkeypatch):
    def bad_settings():
        return SuggestSettings(_env_file=None, min_query_length=0)

    monkeypatch.setattr(main_module, "get_settings", bad_settings)

    result = runner.invoke(main_module.app, ["matrix"])

    assert result.exit_code == 0
    item = json.loads(result.stdout)["items"][0]
    assert item["title"] == "Error"
    assert item["subtitle"].startswith("Invalid configuration")


def test_load_settings_wraps_validation_errors(monkeypatch):
    monkeypatch.setattr(
        main_module, "get_settings", lambda: SuggestSettings(_env_file=None, document_cache_seconds=1)
    )
    with pytest.raises(ConfigurationError):
        main_module.load_settings()
