"""Tests for the command line interface."""
import json

import pytest
import typer
from rich.console import Console
from typer.testing import CliRunner

import main
from main import app, parse_assignments

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch):
    """Wide console and no logging reconfiguration."""
    monkeypatch.setattr(main, "console", Console(width=200))
    monkeypatch.setattr(main, "setup_logging", lambda *args, **kwargs: None)


@pytest.fixture
def fake_run_agent(monkeypatch):
    calls = []
    envelopes = []

    async def run_agent(slug, input_data=None):
        calls.append((slug, input_data))
        return envelopes.pop(0) if envelopes else {"success": True, "translation": {"translated_text": "Hola"}}

    monkeypatch.setattr(main, "run_agent", run_agent)
    return calls, envelopes


def test_parse_assignments_keeps_json_types():
    assert parse_assignments(["count=3", "name=Ada", 'tags=["a", "b"]', "expr=a=b"]) == {
        "count": 3,
        "name": "Ada",
        "tags": ["a", "b"],
        "expr": "a=b",
    }


def test_parse_assignments_requires_equals():
    with pytest.raises(typer.BadParameter):
        parse_assignments(["oops"])


def test_list_shows_agents():
    result = runner.invoke(app, ["list"])

    assert result.exit_code == 0
    assert "Agents" in result.output
    assert "regex_generator" in result.output
    assert "youtube_finder" in result.output


def test_example_prints_input():
    result = runner.invoke(app, ["example", "regex_generator"])

    assert result.exit_code == 0
    assert '"requirement"' in result.output


def test_example_unknown_agent():
    result = runner.invoke(app, ["example", "nope"])

    assert "No example for: nope" in result.output


def test_run_unknown_agent_exits_1(fake_run_agent):
    result = runner.invoke(app, ["run", "nope"])

    assert result.exit_code == 1
    assert "Unknown agent: nope" in result.output
    assert fake_run_agent[0] == []


def test_run_merges_inputs_and_saves_output(fake_run_agent, tmp_path):
    calls, _ = fake_run_agent
    input_file = tmp_path / "input.json"
    input_file.write_text(json.dumps({"text": "Hello", "target_language": "german"}))
    output_file = tmp_path / "out.json"

    result = runner.invoke(app, [
        "run", "translator",
        "--input-file", str(input_file),
        "--input", '{"target_language": "spanish"}',
        "--set", "formality=2",
        "--output-file", str(output_file),
    ])

    assert result.exit_code == 0
    assert calls == [("translator", {"text": "Hello", "target_language": "spanish", "formality": 2})]
    assert json.loads(output_file.read_text())["translation"]["translated_text"] == "Hola"


def test_run_failed_envelope_exits_1(fake_run_agent):
    _, envelopes = fake_run_agent
    envelopes.append({"success": False, "error": "Text is required", "translation": None})

    result = runner.invoke(app, ["run", "translator"])

    assert result.exit_code == 1
    assert "Text is required" in result.output


def test_run_rejects_invalid_json(fake_run_agent):
    result = runner.invoke(app, ["run", "translator", "--input", "{not json"])

    assert result.exit_code == 1
    assert "input is not valid JSON" in result.output
    assert fake_run_agent[0] == []


def test_run_missing_input_file(fake_run_agent, tmp_path):
    result = runner.invoke(app, ["run", "translator", "--input-file", str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_test_command_without_provider_keys(monkeypatch):
    for field in ("groq_api_key", "gemini_api_key", "openai_api_key"):
        monkeypatch.setattr(main.config.providers, field, "")

    result = runner.invoke(app, ["test"])

    assert result.exit_code == 1
    assert "No LLM provider key is configured!" in result.output


def test_test_command_with_a_provider_key(monkeypatch):
    monkeypatch.setattr(main.config.providers, "groq_api_key", "gsk-test")

    result = runner.invoke(app, ["test"])

    assert result.exit_code == 0
    assert "Environment" in result.output
