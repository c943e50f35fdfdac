"""Pytest configuration and shared fixtures."""

import logging
import sys

import pytest
from click.testing import CliRunner

from piperelay.cli import cli


@pytest.fixture(autouse=True)
def reset_relay_logger():
    """Drop handlers a CLI run installed so tests don't leak log output."""
    yield
    logger = logging.getLogger("piperelay")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def clean_relay_env(monkeypatch):
    """Keep PIPERELAY_* settings from the caller's shell out of tests."""
    for name in ("PIPERELAY_BUFFER_SIZE", "PIPERELAY_LOG_LEVEL", "PIPERELAY_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner):
    """Helper to invoke the CLI with args and optional input.

    Usage:
        result = invoke([sys.executable, "-c", "print(1)"])
        result = invoke(["--command-line", "cat"], input_data=b"abc")

    Stdout and stderr are kept apart: ``result.stdout_bytes`` and
    ``result.stderr_bytes``.
    """

    def _invoke(args, input_data=None, env=None):
        return cli_runner.invoke(cli, args, input=input_data, env=env)

    return _invoke


@pytest.fixture
def python_cmd():
    """Argv prefix that runs an inline Python script in a child process."""

    def _cmd(source):
        return [sys.executable, "-c", source]

    return _cmd
