from __future__ import annotations

from acsh.cli import app
from acsh.logging import is_verbose


def test_root_without_command_shows_help(runner):
    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert "model" in result.output
    assert "config" in result.output


def test_alias_is_hidden_from_help(runner):
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert " use " not in result.output


def test_verbose_flag_enables_debug(runner, models_file):
    result = runner.invoke(app, ["--verbose", "models", "list"])

    assert result.exit_code == 0, result.output
    assert is_verbose()


def test_debug_env_enables_debug(monkeypatch):
    assert not is_verbose()
    monkeypatch.setenv("ACSH_DEBUG", "1")
    assert is_verbose()
