"""Shared fixtures: an on-disk version store and isolated configuration."""

import logging
import os
import stat

import pytest

from constants import Constants


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep the user's environment and config file out of every test."""
    monkeypatch.setenv(Constants.ENV_CONFIG_FILE, str(tmp_path / "no-such-config.yml"))
    monkeypatch.delenv(Constants.ENV_STORE_DIR, raising=False)
    monkeypatch.delenv(Constants.ENV_LOG_LEVEL, raising=False)
    monkeypatch.delenv(Constants.ENV_EXECUTABLE, raising=False)
    monkeypatch.setattr(Constants, "STORE_DIR", None)
    monkeypatch.setattr(Constants, "CONFIG_LOG_LEVEL", None)
    monkeypatch.setattr(Constants, "CONFIG_EXECUTABLE", None)


def write_executable(path, body="#!/bin/sh\nexit 0\n"):
    """Create an executable script at path (parents included)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def make_store(tmp_path, monkeypatch):
    """Build a store under tmp_path with the given version directories.

    Returns a factory: make_store(["v18.16.0", ...]) -> store root. Each
    version gets a bin/node script; NVM_DIR points at the store.
    """

    def _make(version_dirs, with_executables=True):
        root = tmp_path / "nvm"
        versions_dir = root / "versions" / "node"
        versions_dir.mkdir(parents=True, exist_ok=True)
        for name in version_dirs:
            vdir = versions_dir / name
            vdir.mkdir(exist_ok=True)
            if with_executables:
                write_executable(vdir / "bin" / "node")
        monkeypatch.setenv(Constants.ENV_STORE_DIR, str(root))
        return root

    return _make


@pytest.fixture
def project(tmp_path):
    """A nested project directory tree: <tmp>/work/repo/pkg/src."""
    deep = tmp_path / "work" / "repo" / "pkg" / "src"
    deep.mkdir(parents=True)
    return deep


def pytest_collection_modifyitems(config, items):  # pylint: disable=unused-argument
    """Skip tests that spawn shell scripts on platforms without /bin/sh."""
    if os.path.exists("/bin/sh"):
        return
    skip = pytest.mark.skip(reason="requires /bin/sh")
    for item in items:
        if "spawns_process" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def write_exe():
    """Expose write_executable to tests."""
    return write_executable


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the CLI's stderr handler so it never outlives a captured stream."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if handler.get_name() == "nodeclerk-stderr":
            root.removeHandler(handler)
