"""Tests for configuration resolution and logging setup."""

import logging

import pytest
from pydantic import ValidationError

from piperelay.config import RelayConfig, configure_logging, resolve_config
from piperelay.copier import DEFAULT_BUFFER_SIZE


def test_defaults():
    config = resolve_config(environ={})
    assert config.buffer_size == DEFAULT_BUFFER_SIZE
    assert config.log_level == "WARNING"
    assert config.log_file is None


def test_environment_used_when_no_option():
    env = {"PIPERELAY_BUFFER_SIZE": "64", "PIPERELAY_LOG_LEVEL": "debug"}
    config = resolve_config(environ=env)
    assert config.buffer_size == 64
    assert config.log_level == "DEBUG"


def test_option_overrides_environment(tmp_path):
    env = {
        "PIPERELAY_BUFFER_SIZE": "64",
        "PIPERELAY_LOG_LEVEL": "ERROR",
        "PIPERELAY_LOG_FILE": str(tmp_path / "env.log"),
    }
    config = resolve_config(
        buffer_size=16, log_level="INFO", log_file=str(tmp_path / "cli.log"), environ=env
    )
    assert config.buffer_size == 16
    assert config.log_level == "INFO"
    assert config.log_file == tmp_path / "cli.log"


@pytest.mark.parametrize("value", ["0", "-1", "lots"])
def test_invalid_buffer_size(value):
    with pytest.raises(ValidationError):
        resolve_config(environ={"PIPERELAY_BUFFER_SIZE": value})


def test_invalid_log_level():
    with pytest.raises(ValidationError, match="Unknown log level"):
        RelayConfig(log_level="chatty")


def test_config_is_frozen():
    config = RelayConfig()
    with pytest.raises(ValidationError):
        config.buffer_size = 1


def test_configure_logging_to_file(tmp_path):
    log_file = tmp_path / "relay.log"
    logger = configure_logging("DEBUG", log_file)
    logging.getLogger("piperelay.relay").debug("hello from relay")
    for handler in logger.handlers:
        handler.flush()
    assert "hello from relay" in log_file.read_text()
    assert logger.propagate is False


def test_configure_logging_replaces_handlers():
    configure_logging("INFO")
    logger = configure_logging("ERROR")
    assert len(logger.handlers) == 1
    assert logger.level == logging.ERROR
