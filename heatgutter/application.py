# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

# Import as few internal modules as possible here to avoid premature initialization
# from cascading imports before the QApplication has booted.
from heatgutter.localization import *
from heatgutter.qt import *

if TYPE_CHECKING:
    from heatgutter.blameview.blamewindow import BlameWindow

logger = logging.getLogger(__name__)


class HGApplication(QApplication):
    blameWindows: list[BlameWindow]

    @staticmethod
    def instance() -> HGApplication:
        me = QApplication.instance()
        assert isinstance(me, HGApplication)
        return me

    def __init__(self, argv: list[str]):
        super().__init__(argv)
        self.setObjectName("HGApplication")

        self.blameWindows = []

        self.setApplicationName(APP_SYSTEM_NAME)  # used by QStandardPaths
        self.setApplicationDisplayName(APP_DISPLAY_NAME)  # user-friendly name
        self.setApplicationVersion(APP_VERSION)
        self.setDesktopFileName(APP_IDENTIFIER)

        # Schedule cleanup on quit
        self.aboutToQuit.connect(self.endSession)

    def beginSession(self):
        from heatgutter import settings

        # Load prefs file
        settings.prefs.reset()
        try:
            settings.prefs.load()
        except (OSError, ValueError) as exc:
            logger.warning(f"Couldn't load prefs: {exc}")

        self.applyLoggingLevelPref()
        self.applyLanguage()

    def endSession(self):
        from heatgutter import settings
        if settings.prefs.isDirty():
            settings.prefs.write()

    def applyLanguage(self):
        # Catalogs are named after the locale, e.g. "fr_FR.mo"
        localeName = QLocale().name()
        moPath = os.path.join(os.path.dirname(__file__), "assets", "lang", f"{localeName}.mo")
        if installGettextTranslator(moPath):
            logger.info(f"Loaded translations: {localeName}")

    def applyLoggingLevelPref(self):
        from heatgutter import settings

        logging.root.setLevel(settings.prefs.verbosity.value)

    def openBlameWindow(self, path: str = "") -> BlameWindow:
        from heatgutter.blameview.blamewindow import BlameWindow

        window = BlameWindow()
        window.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
        window.destroyed.connect(lambda: self.blameWindows.remove(window))
        self.blameWindows.append(window)

        if path:
            window.openFile(path)

        window.resize(window.codeView.gutter.calcWidth() + window.fontMetrics().horizontalAdvance("M" * 100), 700)
        window.show()
        return window
