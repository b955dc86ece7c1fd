"""Shared test fixtures."""

import pytest


@pytest.fixture(autouse=True)
def shell_env(monkeypatch):
    """Pin the interpreter and clear the process-wide default path."""
    from flow_shell import config

    monkeypatch.setenv("SHELL", "/bin/sh")
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
    monkeypatch.setattr(config, "_default_path", None)


@pytest.fixture
def mock_process(monkeypatch):
    """Mock process.run for tests.

    Queue strings (returned) or exceptions (raised) on .responses.
    """
    from flow_shell import process

    calls = []
    responses = []

    def fake_run(
        command, verbose=0, cwd=None, output_sink=None, capture_stderr=False, error_sink=None
    ):
        calls.append(("run", command, cwd, capture_stderr))
        if responses:
            response = responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        return ""

    monkeypatch.setattr(process, "run", fake_run)

    return type("MockProcess", (), {"calls": calls, "responses": responses})()
