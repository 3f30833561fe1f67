import os

import pytest

from envctl.settings import Settings


@pytest.fixture(autouse=True)
def _clean_envctl_environment(monkeypatch):
    """Keep ENVCTL_* variables from the host out of every test."""
    for name in list(os.environ):
        if name.startswith("ENVCTL_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def env_file(tmp_path):
    """Write content to tmp_path/name and return the path as a string."""

    def _write(content: str, name: str = ".env") -> str:
        path = tmp_path / name
        path.write_text(content)
        return str(path)

    return _write
