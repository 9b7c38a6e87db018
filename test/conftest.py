# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import os
import tempfile
import time
from collections.abc import Generator

# Run headless unless test.py --visual says otherwise
if not os.environ.get("APP_VISUAL_TESTS"):
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pygit2
import pytest

from heatgutter.application import HGApplication


def setUpGitConfigSearchPaths():
    """
    Prevent unit tests from accessing the host system's git config files.
    This modifies libgit2 search paths and GIT_CONFIG environment variables
    for vanilla git.
    """
    ConfigLevel = pygit2.enums.ConfigLevel

    for level in [ConfigLevel.GLOBAL, ConfigLevel.XDG, ConfigLevel.SYSTEM]:
        pygit2.settings.search_path[level] = ""

    os.environ["GIT_CONFIG_GLOBAL"] = os.devnull
    os.environ["GIT_CONFIG_NOSYSTEM"] = "1"


@pytest.fixture(scope='session', autouse=True)
def maskHostGitConfig():
    setUpGitConfigSearchPaths()


@pytest.fixture(scope='session', autouse=True)
def setUpLogging():
    rootLogger = logging.root
    rootLogger.setLevel(logging.DEBUG)

    yield

    # Chatty destructors may cause spam after pytest has wound down.
    # Work around https://github.com/pytest-dev/pytest/issues/5502
    for handler in rootLogger.handlers:
        rootLogger.removeHandler(handler)


@pytest.fixture(scope="session")
def qapp_cls():
    yield HGApplication


@pytest.fixture(autouse=True)
def resetPrefs(qapp):
    from heatgutter import settings, qt
    from heatgutter.gitdriver import GitDriver

    # Prevent unit tests from reading actual user settings
    qt.QStandardPaths.setTestModeEnabled(True)

    settings.prefs.reset()
    yield settings.prefs
    settings.prefs.reset()
    GitDriver.setGitPath(settings.prefs.gitPath)


@pytest.fixture
def localTimeUTC(monkeypatch):
    """ Format dates in UTC regardless of the host's time zone. """
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def tempDir() -> Generator[tempfile.TemporaryDirectory, None, None]:
    td = tempfile.TemporaryDirectory(prefix="heatguttertest-")
    yield td
    td.cleanup()
