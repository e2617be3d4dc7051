"""Pytest configuration and fixtures for binge tests."""

import logging
import os
import tempfile

import pytest

# Loggers are configured on first import; keep the log file out of $HOME
os.environ.setdefault("BINGE_LOG_DIR", tempfile.mkdtemp(prefix="binge-logs-"))


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("binge"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point every binge directory at tmp_path and drop ambient tokens."""
    monkeypatch.setenv("BINGE_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("BINGE_STATE_DIR", str(tmp_path / "state"))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
