"""Root pytest configuration for all tests."""

import logging

import pytest

# atlassian-python-api logs failed requests at ERROR level; tests provoke
# those failures on purpose.
logging.getLogger("atlassian").setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep tests away from the real config file and credential variables."""
    monkeypatch.setenv("MARKCLI_CONFIG", str(tmp_path / "config.json"))
    for name in ("MARKCLI_ATLASSIAN_URL", "MARKCLI_ATLASSIAN_EMAIL", "MARKCLI_ATLASSIAN_TOKEN"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_markcli_logger():
    """Drop handlers the CLI callback attached to streams that no longer exist."""
    yield
    app_logger = logging.getLogger("markcli")
    app_logger.handlers.clear()
    app_logger.setLevel(logging.NOTSET)
