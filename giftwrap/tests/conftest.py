"""Unit tests configuration file."""

import os

import pytest

FIXTURE_DIR = os.path.join(os.path.dirname(os.path.realpath(__file__)), "generator")


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def fixture_path():
    """Return the path of a declaration file next to the generator tests."""

    def _path(name: str) -> str:
        return os.path.join(FIXTURE_DIR, name)

    return _path
