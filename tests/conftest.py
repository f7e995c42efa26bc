"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pocket_todo.config import ConfigModel  # noqa: E402
from pocket_todo.storage import Storage  # noqa: E402
from pocket_todo.commands import TodoCommands  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at a temp dir so nothing touches the real ~/.todo."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("TODO_DATA_DIR", raising=False)
    return home


@pytest.fixture
def config(tmp_path):
    """Config whose storage root is a fresh temp directory."""
    return ConfigModel(data_dir=str(tmp_path / "data"))


@pytest.fixture
def storage(config):
    """Storage with an initialized, empty todo list."""
    storage = Storage(config)
    storage.data_dir.mkdir(parents=True)
    storage.storage_path.write_text("[]")
    return storage


@pytest.fixture
def commands(storage):
    return TodoCommands(storage)
