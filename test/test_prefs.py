# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import json
import logging

from heatgutter import settings
from heatgutter.blameview.blamecontroller import BlameController
from heatgutter.settings import LoggingLevel, ThemePreference
from .util import *


@pytest.fixture
def prefsPath(tempDir, monkeypatch):
    # Keep prefs files of parallel test workers apart
    monkeypatch.setattr(settings.Prefs, "getParentDir", lambda self: tempDir.name)
    return settings.prefs.fullPath()


def testDefaults():
    prefs = settings.prefs
    assert prefs.enabled
    assert prefs.theme == ThemePreference.Automatic
    assert prefs.debounceDelayMs == 150
    assert prefs.maxBlameOutputKB == 10 * 1024
    assert prefs.gitPath == "git"
    assert not prefs.isDirty()


def testLoadMissingFile(prefsPath):
    assert not settings.prefs.load()
    assert settings.prefs.debounceDelayMs == 150


def testLoadPrefs(prefsPath):
    writeFile(prefsPath, json.dumps({
        "enabled": False,
        "theme": "dark",
        "debounceDelayMs": 400,
        "gitPath": "/usr/local/bin/git",
        "verbosity": logging.INFO,
    }))

    assert settings.prefs.load()
    assert not settings.prefs.enabled
    assert settings.prefs.theme == ThemePreference.Dark
    assert settings.prefs.debounceDelayMs == 400
    assert settings.prefs.gitPath == "/usr/local/bin/git"
    assert settings.prefs.verbosity == LoggingLevel.Info
    assert settings.prefs.resolveDarkTheme(paletteIsDark=False)


def testLoadPrefsIgnoresJunk(prefsPath, caplog):
    writeFile(prefsPath, json.dumps({
        "debounceDelayMs": "fast",
        "enabled": 1,
        "theme": "sepia",
        "maxBlameOutputKB": 64,
        "someKeyFromTheFuture": True,
    }))

    with caplog.at_level(logging.WARNING):
        assert settings.prefs.load()

    assert settings.prefs.debounceDelayMs == 150
    assert settings.prefs.enabled
    assert settings.prefs.theme == ThemePreference.Automatic
    assert settings.prefs.maxBlameOutputKB == 64
    assert "someKeyFromTheFuture" in caplog.text
    assert "debounceDelayMs" in caplog.text
    assert "theme" in caplog.text


def testLoadPrefsNotAnObject(prefsPath):
    writeFile(prefsPath, "[1, 2, 3]")
    assert not settings.prefs.load()
    assert settings.prefs.debounceDelayMs == 150


def testLoadCorruptPrefs(prefsPath):
    writeFile(prefsPath, "{ this isn't json")
    with pytest.raises(ValueError):
        settings.prefs.load()


def testWritePrefs(prefsPath):
    prefs = settings.prefs

    # Nothing to write unless dirty
    assert prefs.write() == ""
    assert not os.path.exists(prefsPath)

    prefs.theme = ThemePreference.Light
    prefs.debounceDelayMs = 75
    prefs.setDirty()
    assert prefs.write() == prefsPath
    assert not prefs.isDirty()

    obj = json.loads(readTextFile(prefsPath))
    assert obj["theme"] == "light"
    assert obj["debounceDelayMs"] == 75
    assert not any(k.startswith("_") for k in obj)

    prefs.reset()
    assert prefs.debounceDelayMs == 150
    prefs.load()
    assert prefs.theme == ThemePreference.Light
    assert prefs.debounceDelayMs == 75


def testApplicationSessionLoadsPrefs(prefsPath, qapp):
    writeFile(prefsPath, json.dumps({"verbosity": logging.INFO, "enabled": False}))
    try:
        qapp.beginSession()
        assert logging.root.level == logging.INFO
        assert not settings.prefs.enabled
        assert not BlameController().enabled
    finally:
        logging.root.setLevel(logging.DEBUG)
