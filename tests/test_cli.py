"""Tests for zacai/cli.py."""

import json

import pytest

from zacai import __version__, config
from zacai.cli import ZacCLI, main


@pytest.fixture(autouse=True)
def no_animation(monkeypatch):
    monkeypatch.setattr("zacai.cli.time.sleep", lambda _: None)


@pytest.fixture
def cli(agent):
    shell = ZacCLI()
    shell.agent = agent
    return shell


class TestHandleCommand:
    def test_quit(self, cli):
        assert cli.handle_command("quit") is False
        assert cli.handle_command("exit") is False

    def test_questions_are_not_commands(self, cli):
        assert cli.handle_command("what is gravity") is None
        assert cli.handle_command("help me with maths") is None

    def test_thinking_toggles(self, cli):
        assert cli.handle_command("thinking") is True
        assert cli.show_thinking is True
        cli.handle_command("thinking")
        assert cli.show_thinking is False

    def test_stats(self, cli, capsys):
        assert cli.handle_command("stats") is True
        assert "ZacAI Statistics" in capsys.readouterr().out

    def test_version(self, cli, capsys):
        cli.handle_command("version")
        assert __version__ in capsys.readouterr().out

    def test_export_and_import(self, cli, tmp_path, capsys):
        cli.agent.submit("my name is Jordan")
        path = tmp_path / "export.json"
        assert cli.handle_command(f"export {path}") is True
        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["format"] == config.EXPORT_FORMAT

        cli.agent.clear_memory()
        assert cli.handle_command(f"import {path}") is True
        assert cli.agent.store.get(config.PERSONAL, "name").value == "Jordan"
        assert "Imported" in capsys.readouterr().out

    def test_import_of_bad_file(self, cli, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text('{"format": "other"}', encoding="utf-8")
        assert cli.handle_command(f"import {path}") is True
        assert "Import failed" in capsys.readouterr().out

    def test_import_of_missing_file(self, cli, tmp_path, capsys):
        assert cli.handle_command(f"import {tmp_path / 'missing.json'}") is True
        assert "Import failed" in capsys.readouterr().out

    def test_clear_needs_confirmation(self, cli, monkeypatch):
        cli.agent.submit("my name is Jordan")
        monkeypatch.setattr("builtins.input", lambda _="": "no")
        cli.handle_command("clear")
        assert cli.agent.store.count(config.PERSONAL) == 1

        monkeypatch.setattr("builtins.input", lambda _="": "yes")
        cli.handle_command("clear")
        assert cli.agent.store.count(config.PERSONAL) == 0


class TestOutput:
    def test_trace_shown_when_thinking(self, cli, capsys):
        response = cli.agent.submit("3×3+3")
        cli.show_thinking = True
        cli.print_response(response.text, response.confidence, response.trace)
        out = capsys.readouterr().out
        assert "Reasoning" in out
        assert "Final result: 12" in out

    def test_feedback_prompt(self, cli, monkeypatch):
        cli.feedback_interval = 1
        monkeypatch.setattr("builtins.input", lambda _="": "y")
        response = cli.agent.submit("what is algorithm")
        cli._prompt_feedback(response)
        assert cli.agent.get_statistics()["conversation"]["helpful"] == 1

    def test_no_feedback_prompt_for_small_talk(self, cli, monkeypatch):
        cli.feedback_interval = 1
        monkeypatch.setattr("builtins.input", lambda _="": pytest.fail("should not ask"))
        cli._prompt_feedback(cli.agent.submit("hello"))


class TestMain:
    def test_about(self, capsys):
        main(["--about"])
        out = capsys.readouterr().out
        assert "ZacAI" in out
        assert __version__ in out

    def test_version_flag(self, capsys):
        with pytest.raises(SystemExit):
            main(["--version"])
        assert __version__ in capsys.readouterr().out
