from __future__ import annotations

from click.testing import CliRunner

import coder.cli as cli
import coder.config as config_mod
from coder.errors import TransportError
from conftest import ScriptedConnector, scripted_input, text_reply


def _isolate(monkeypatch, tmp_path):
    monkeypatch.setattr(config_mod, "CONFIG_FILE", tmp_path / "config.toml")


def test_tools_command_lists_registry(monkeypatch, tmp_path):
    _isolate(monkeypatch, tmp_path)
    result = CliRunner().invoke(cli.main, ["tools"])
    assert result.exit_code == 0
    for name in ("read_file", "edit_file", "git_pull"):
        assert name in result.output


def test_chat_session_ends_on_eof(monkeypatch, tmp_path):
    _isolate(monkeypatch, tmp_path)
    connector = ScriptedConnector([text_reply("Hi there")])
    monkeypatch.setattr(cli, "get_connector", lambda *a, **kw: connector)
    monkeypatch.setattr(cli, "make_input_reader", lambda: scripted_input(["hello"]))

    result = CliRunner().invoke(cli.main, ["--model", "test-model"])
    assert result.exit_code == 0
    assert "Assistant: Hi there" in result.output


def test_transport_error_is_fatal(monkeypatch, tmp_path):
    _isolate(monkeypatch, tmp_path)
    connector = ScriptedConnector([TransportError("connection refused")])
    monkeypatch.setattr(cli, "get_connector", lambda *a, **kw: connector)
    monkeypatch.setattr(cli, "make_input_reader", lambda: scripted_input(["hello", "again"]))

    result = CliRunner().invoke(cli.main, [])
    assert result.exit_code == 1
    assert "Error: connection refused" in result.output


def test_unknown_connector_exits(monkeypatch, tmp_path):
    _isolate(monkeypatch, tmp_path)
    result = CliRunner().invoke(cli.main, ["--connector", "nope"])
    assert result.exit_code == 2
    assert "Unknown connector" in result.output
