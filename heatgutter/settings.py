# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import enum
import logging

from heatgutter.prefsfile import PrefsFile
from heatgutter.qt import *
from heatgutter.toolbox.benchmark import BENCHMARK_LOGGING_LEVEL

logger = logging.getLogger(__name__)


class ThemePreference(enum.StrEnum):
    Automatic = ""
    Dark = "dark"
    Light = "light"


class QtApiNames(enum.StrEnum):
    Automatic = ""
    PyQt6 = "pyqt6"
    PySide6 = "pyside6"


class LoggingLevel(enum.IntEnum):
    Benchmark = BENCHMARK_LOGGING_LEVEL
    Debug = logging.DEBUG
    Info = logging.INFO
    Warning = logging.WARNING


@dataclasses.dataclass
class Prefs(PrefsFile):
    _filename = "prefs.json"

    enabled                     : bool                  = True
    theme                       : ThemePreference       = ThemePreference.Automatic
    debounceDelayMs             : int                   = 150
    maxBlameOutputKB            : int                   = 10 * 1024
    gitPath                     : str                   = "git"
    statusMessageMs             : int                   = 2000
    font                        : str                   = ""
    fontSize                    : int                   = 0
    verbosity                   : LoggingLevel          = LoggingLevel.Debug if APP_TESTMODE else LoggingLevel.Warning
    forceQtApi                  : QtApiNames            = QtApiNames.Automatic

    def monoFont(self):
        monoFont = QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont)
        if self.font:
            monoFont.fromString(self.font)
        if self.fontSize > 0:
            monoFont.setPointSize(self.fontSize)
        return monoFont

    def resolveDarkTheme(self, paletteIsDark: bool) -> bool:
        if self.theme == ThemePreference.Dark:
            return True
        elif self.theme == ThemePreference.Light:
            return False
        return paletteIsDark


# Initialize default prefs.
# The app should load the user's prefs with prefs.load().
prefs = Prefs()
