"""Tests for CLI commands: add, review, preview, due, stats, import and config."""

import json
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from cadence.infrastructure.adapters.json_store import JsonFileCardStore
from cadence.interface.cli import app

runner = CliRunner()


@pytest.fixture
def store_file(tmp_path, mock_home):
    return tmp_path / "srs.json"


def invoke(store_file, *args):
    return runner.invoke(app, ["--store", str(store_file), *args])


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "cadence: spaced-repetition scheduling" in result.stdout
    for command in ("add", "review", "due", "stats", "import", "config"):
        assert command in result.stdout


# --- Add / Review / Preview ---


def test_add_then_add_again(store_file):
    result = invoke(store_file, "add", "q-1", "-c", "react", "-d", "beginner")
    assert result.exit_code == 0
    assert "Added react/beginner/q-1, due now." in result.stdout

    result = invoke(store_file, "add", "q-1", "-c", "react", "-d", "beginner")
    assert result.exit_code == 0
    assert "Already tracked: react/beginner/q-1" in result.stdout
    assert len(JsonFileCardStore(store_file).list()) == 1


def test_review_reschedules(store_file):
    invoke(store_file, "add", "q-1", "-c", "react", "-d", "beginner")

    result = invoke(store_file, "review", "q-1", "-c", "react", "-d", "beginner", "-r", "good")

    assert result.exit_code == 0
    assert "Good: next review in 1d" in result.stdout
    assert "ease 2.50, streak 1" in result.stdout
    assert "Mastery: Learning (1/5)" in result.stdout
    [card] = JsonFileCardStore(store_file).list()
    assert card.repetitions == 1


def test_review_rating_is_case_insensitive(store_file):
    result = invoke(store_file, "review", "q-1", "-c", "sql", "-d", "Advanced", "-r", "EASY")
    assert result.exit_code == 0
    assert "Easy: next review in 1d" in result.stdout


def test_review_rejects_unknown_rating(store_file):
    result = invoke(store_file, "review", "q-1", "-c", "react", "-d", "beginner", "-r", "perfect")
    assert result.exit_code == 2
    assert not store_file.exists()


def test_review_unknown_card_without_auto_initialize(store_file, monkeypatch):
    monkeypatch.setenv("CADENCE_AUTO_INITIALIZE", "false")
    result = invoke(store_file, "review", "q-1", "-c", "react", "-d", "beginner", "-r", "good")
    assert result.exit_code == 1
    assert "No review card for react/beginner/q-1" in result.stdout


def test_preview(store_file):
    result = invoke(store_file, "preview", "q-1", "-c", "react", "-d", "beginner")
    assert result.exit_code == 0
    assert result.stdout.strip() == "Again: now  Hard: 1d  Good: 1d  Easy: 1d"
    assert not store_file.exists()


# --- Due / Stats ---


def test_due_lists_new_cards(store_file):
    invoke(store_file, "add", "q-2", "-c", "react", "-d", "beginner")
    invoke(store_file, "add", "q-1", "-c", "sql", "-d", "advanced")

    result = invoke(store_file, "due")

    assert result.exit_code == 0
    assert "2 card(s) due." in result.stdout


def test_due_json_with_filter(store_file):
    invoke(store_file, "add", "q-1", "-c", "react", "-d", "beginner")
    invoke(store_file, "add", "q-2", "-c", "sql", "-d", "beginner")

    result = invoke(store_file, "due", "--channel", "sql", "--json")

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [c["question_id"] for c in payload] == ["q-2"]
    assert payload[0]["mastery_label"] == "New"


def test_due_empty(store_file):
    result = invoke(store_file, "due")
    assert result.exit_code == 0
    assert "No cards due." in result.stdout


def test_stats_json(store_file):
    invoke(store_file, "add", "q-1", "-c", "react", "-d", "beginner")
    invoke(store_file, "review", "q-2", "-c", "react", "-d", "beginner", "-r", "good")

    result = invoke(store_file, "stats", "--json")

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["total_cards"] == 2
    assert payload["due_today"] == 1
    assert payload["review_streak"] == 1
    assert payload["by_channel"] == {"react": 2}


def test_stats_text(store_file):
    invoke(store_file, "add", "q-1", "-c", "react", "-d", "beginner")
    result = invoke(store_file, "stats")
    assert result.exit_code == 0
    assert "Cards: 1" in result.stdout
    assert "Streak: 0 day(s)" in result.stdout


def test_corrupted_store_exits_cleanly(store_file):
    store_file.write_text("{broken")
    result = invoke(store_file, "due")
    assert result.exit_code == 1
    assert "Cannot read card store" in result.stdout


# --- Import ---


def test_import_manifest(store_file, tmp_path):
    manifest = tmp_path / "react.yaml"
    manifest.write_text(
        "questions:\n"
        "  - id: q-1\n"
        "    difficulty: beginner\n"
        "  - id: q-2\n"
        "    difficulty: wizard\n"
    )

    result = invoke(store_file, "import", str(manifest), "--channel", "react")

    assert result.exit_code == 0
    assert "Added 1 question(s)." in result.stdout
    assert "#1:" in result.stdout
    assert [c.question_id for c in JsonFileCardStore(store_file).list()] == ["q-1"]


def test_import_missing_file(store_file, tmp_path):
    result = invoke(store_file, "import", str(tmp_path / "missing.yaml"))
    assert result.exit_code == 1
    assert "File not found" in result.stdout


# --- Config ---


def test_config_show_reflects_store_option(store_file):
    result = invoke(store_file, "config", "show")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["store_path"] == str(store_file.resolve())
    assert data["max_interval_days"] == 180


@patch("cadence.interface.cli.resolve_config")
def test_config_show_command(mock_resolve_config):
    mock_config = MagicMock()
    mock_config.model_dump.return_value = {
        "store_path": Path("/tmp/srs.json"),
        "auto_initialize": True,
    }
    mock_resolve_config.return_value = mock_config

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["store_path"] == str(Path("/tmp/srs.json"))


def test_invalid_config_is_reported(store_file, monkeypatch):
    monkeypatch.setenv("CADENCE_MIN_EASE", "2.9")
    result = invoke(store_file, "due")
    assert result.exit_code == 1
    assert "Invalid configuration" in result.stdout


# --- Unreadable input ---


def test_import_malformed_yaml(store_file, tmp_path):
    manifest = tmp_path / "broken.yaml"
    manifest.write_text("questions:\n  - id: q-1\n   difficulty: [beginner\n")

    result = invoke(store_file, "import", str(manifest))

    assert result.exit_code == 1
    assert "Invalid YAML in" in result.stdout
    assert not store_file.exists()


def test_store_with_invalid_utf8_exits_cleanly(store_file):
    store_file.write_bytes(b'{"cards": [], "x": "\xff\xfe"}')
    result = invoke(store_file, "stats")
    assert result.exit_code == 1
    assert "Cannot read card store" in result.stdout


# --- Verbosity ---


def test_verbosity_from_env(store_file, monkeypatch):
    monkeypatch.setenv("CADENCE_VERBOSE", "2")
    result = invoke(store_file, "due")
    assert result.exit_code == 0
    assert logging.getLogger("cadence").level == logging.DEBUG


def test_verbosity_from_config_file(store_file, mock_home):
    config_file = mock_home / ".config/cadence/config.toml"
    config_file.parent.mkdir(parents=True)
    config_file.write_text("verbose = 1\n")

    invoke(store_file, "due")

    assert logging.getLogger("cadence").level == logging.INFO


def test_verbose_flag_overrides_config(store_file, monkeypatch):
    monkeypatch.setenv("CADENCE_VERBOSE", "2")
    invoke(store_file, "-v", "due")
    assert logging.getLogger("cadence").level == logging.INFO


def test_default_verbosity_is_warning(store_file):
    invoke(store_file, "due")
    assert logging.getLogger("cadence").level == logging.WARNING
