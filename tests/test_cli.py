"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest
from skill_handlers import HELLO_MODEL
from typer.testing import CliRunner

from skill_simulator.cli import app

runner = CliRunner()


@pytest.fixture
def model_path(tmp_path: Path) -> Path:
    path = tmp_path / "en-US.json"
    path.write_text(json.dumps(HELLO_MODEL))
    return path


def test_match_shows_intent_and_slots(model_path: Path) -> None:
    """Test offline matching output."""
    result = runner.invoke(app, ["match", "play yesterday by the beatles", "--model", str(model_path)])

    assert result.exit_code == 0
    assert "PlayIntent" in result.output
    assert "the beatles" in result.output


def test_match_miss_exits_nonzero(model_path: Path) -> None:
    """Test that a miss reports the fallback phrase."""
    result = runner.invoke(app, ["match", "xyzzy", "--model", str(model_path)])

    assert result.exit_code == 1
    assert "No match" in result.output


def test_speak_runs_conversation(model_path: Path) -> None:
    """Test speaking several phrases to a local handler."""
    result = runner.invoke(
        app,
        ["speak", "hello", "say hello to Ada", "--launch", "--model", str(model_path), "--handler", "skill_handlers:hello_skill"],
    )

    assert result.exit_code == 0
    assert "Welcome to Hello." in result.output
    assert "Hello, Ada!" in result.output


def test_intend_with_slots(model_path: Path) -> None:
    """Test sending a direct intent with slots."""
    result = runner.invoke(
        app,
        ["intend", "HelloIntent", "--slot", "name=Grace", "--model", str(model_path), "--handler", "skill_handlers:hello_skill"],
    )

    assert result.exit_code == 0
    assert "Hello, Grace!" in result.output


def test_intend_rejects_bad_slot(model_path: Path) -> None:
    """Test that slots must be name=value."""
    result = runner.invoke(
        app, ["intend", "HelloIntent", "--slot", "Grace", "--model", str(model_path), "--handler", "skill_handlers:hello_skill"]
    )

    assert result.exit_code == 1
    assert "expected name=value" in result.output


def test_end_session(model_path: Path) -> None:
    """Test sending a session-ended request."""
    result = runner.invoke(
        app,
        ["end", "--reason", "ERROR", "--error", "boom", "--model", str(model_path), "--handler", "skill_handlers:hello_skill"],
    )

    assert result.exit_code == 0
    assert "ended" in result.output


def test_unknown_handler_fails(model_path: Path) -> None:
    """Test that an unloadable handler exits with an error."""
    result = runner.invoke(app, ["launch", "--model", str(model_path), "--handler", "no_such_skill_module:handler"])

    assert result.exit_code == 1
    assert "Cannot import" in result.output


def test_match_malformed_model(tmp_path: Path) -> None:
    """Test that a malformed model file exits with an error instead of a traceback."""
    path = tmp_path / "broken.json"
    path.write_text(json.dumps({"intents": [{"samples": ["hello"]}]}))

    result = runner.invoke(app, ["match", "hello", "--model", str(path)])

    assert result.exit_code == 1
    assert "Malformed" in result.output
