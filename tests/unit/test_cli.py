"""Unit tests for the command-line front end."""

from __future__ import annotations

import json

import pytest

from stdio_mcp import __version__, cli


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    # basicConfig(force=True) would replace the capture handlers.
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)


def test_run_sample_prints_decoded_json(capsys):
    code = cli.main(["run", "sample", "--args", '{"text": "hi"}'])

    out = capsys.readouterr().out
    assert code == 0
    assert json.loads(out) == {"message": "Hello, MCP!"}


def test_run_by_tool_name_without_command_alias(capsys):
    code = cli.main(["run", "echo", "--args", '{"text": "hello there"}'])

    assert code == 0
    assert capsys.readouterr().out == "hello there\n"


def test_run_missing_required_argument_exits_2(capsys):
    code = cli.main(["run", "sample"])

    err = capsys.readouterr().err
    assert code == 2
    assert "invalid arguments for tool 'sample'" in err
    assert "/text" in err


def test_run_invalid_json_exits_2(capsys):
    code = cli.main(["run", "sample", "--args", "{oops"])

    assert code == 2
    assert "not valid JSON" in capsys.readouterr().err


def test_run_unknown_command_exits_2(capsys):
    code = cli.main(["run", "nope"])

    assert code == 2
    assert "unknown tool command: nope" in capsys.readouterr().err


def test_tools_lists_builtin_tools(capsys):
    assert cli.main(["tools"]) == 0

    out = capsys.readouterr().out
    assert "Sample Tool" in out
    assert "echo" in out


def test_tools_json(capsys):
    assert cli.main(["tools", "--json"]) == 0

    rows = json.loads(capsys.readouterr().out)
    assert [r["name"] for r in rows] == ["sample", "echo"]
    assert rows[0]["command"] == "sample"
    assert rows[1]["command"] == "echo"
    assert rows[0]["inputSchema"]["required"] == ["text"]


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_subcommand_required():
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 2


def test_stdio_settings_overrides(monkeypatch):
    seen = {}

    def fake_stdio(args, settings):
        seen["settings"] = settings
        return 0

    monkeypatch.setattr(cli, "cmd_stdio", fake_stdio)
    monkeypatch.setenv("MCP_SHUTDOWN_GRACE_S", "1.5")

    # The parser binds the function at build time, so rebuild through main.
    assert cli.main(["--log-level", "debug", "stdio", "--serial"]) == 0
    settings = seen["settings"]
    assert settings.serial_dispatch is True
    assert settings.log_level == "debug"
    assert settings.shutdown_grace_s == 1.5


def test_stdio_registration_failure_exits_1(monkeypatch):
    async def broken(registry):
        raise RuntimeError("cannot register")

    monkeypatch.setattr(cli, "register_builtin_tools", broken)

    assert cli.cmd_stdio(None, cli.ServerSettings()) == 1
