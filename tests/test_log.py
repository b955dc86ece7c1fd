"""Tests for log.py — console echo of commands, results and sync progress."""

import re

import pytest

from flow_shell import log
from flow_shell.config import RepoConfig
from flow_shell.output import ShellError
from flow_shell.process import run
from flow_shell.sync import sync


def test_info_timestamp(capsys):
    log.info("fetching app")
    out = capsys.readouterr().out
    assert re.match(r"\[\d{2}:\d{2}:\d{2}\] fetching app\n", out)


def test_command_is_not_timestamped(capsys):
    log.command("git fetch --all")
    assert capsys.readouterr().out == "$ git fetch --all\n"


def test_output_verbatim(capsys):
    log.output("line one\nline two")
    assert capsys.readouterr().out == "line one\nline two\n"


def test_runner_echo_order(tmp_path, capsys):
    run("printf 'a\\nb\\n'", verbose=1, cwd=str(tmp_path))
    assert capsys.readouterr().out == "$ printf 'a\\nb\\n'\na\nb\n"


def test_runner_failure_line(tmp_path, capsys):
    with pytest.raises(ShellError):
        run("echo half-done; exit 9", verbose=2, cwd=str(tmp_path))
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "$ echo half-done; exit 9"
    assert re.match(r"\[\d{2}:\d{2}:\d{2}\]   ✗ Failed: half-done$", lines[1])
    assert len(lines) == 2


def test_runner_failure_github_actions(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    with pytest.raises(ShellError):
        run("echo nope; exit 1", verbose=1, cwd=str(tmp_path))
    assert "::error::Failed: nope" in capsys.readouterr().out


def test_sync_dry_run_layout(tmp_path, capsys):
    repo = RepoConfig(name="app", url="u", path=str(tmp_path), commit="abc", submodules=False)
    sync([repo], dry_run=True)
    out = capsys.readouterr().out
    assert "── sync (dry-run) " in out
    assert "▸ app" in out
    assert "  would check out abc" in out
    assert "── dry-run complete " in out
    assert "::group::" not in out


def test_sync_dry_run_github_actions_groups(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    repo = RepoConfig(name="app", url="u", path=str(tmp_path))
    sync([repo], dry_run=True)
    out = capsys.readouterr().out
    assert "::group::sync (dry-run)" in out
    assert "::group::app" in out
    assert out.count("::endgroup::") == 2


def test_success_and_failure_marks(capsys):
    log.success("app at 0123abcd")
    log.failure("lib FAILED (status 128)")
    out = capsys.readouterr().out
    assert "  ✓ app at 0123abcd" in out
    assert "  ✗ lib FAILED (status 128)" in out


def test_error_goes_to_stderr(capsys, monkeypatch):
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    log.error("No repositories to sync")
    captured = capsys.readouterr()
    assert "ERROR: No repositories to sync" in captured.err
    assert "::error::No repositories to sync" in captured.out
