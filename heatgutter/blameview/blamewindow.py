# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import os

from heatgutter.blameview.blamecontroller import BlameController
from heatgutter.blameview.codeview import CodeView
from heatgutter.localization import *
from heatgutter.qt import *

logger = logging.getLogger(__name__)


class BlameWindow(QMainWindow):
    """
    Minimal editor window: one CodeView with a heat gutter, a toolbar to
    toggle the gutter and save the file, and a status bar.
    """

    codeView: CodeView
    controller: BlameController

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("BlameWindow")

        self.controller = BlameController(self)
        self.controller.statusMessage.connect(lambda text, ms: self.statusBar().showMessage(text, ms))

        self.codeView = CodeView(self)
        self.codeView.document().modificationChanged.connect(self.refreshWindowTitle)
        self.codeView.fileLoaded.connect(self.refreshWindowTitle)
        self.setCentralWidget(self.codeView)

        self.toggleAction = QAction(_("Heat Gutter"), self)
        self.toggleAction.setCheckable(True)
        self.toggleAction.setChecked(self.controller.enabled)
        self.toggleAction.setShortcut(QKeySequence("Ctrl+Shift+B"))
        self.toggleAction.setToolTip(_("Show or hide blame annotations"))
        self.toggleAction.triggered.connect(self.onToggleTriggered)

        self.saveAction = QAction(_("Save"), self)
        self.saveAction.setShortcut(QKeySequence.StandardKey.Save)
        self.saveAction.triggered.connect(self.saveFile)

        toolBar = self.addToolBar(_("Main"))
        toolBar.setObjectName("MainToolBar")
        toolBar.setMovable(False)
        toolBar.addAction(self.saveAction)
        toolBar.addAction(self.toggleAction)

        self.controller.attach(self.codeView)
        self.refreshWindowTitle()

    def openFile(self, path: str):
        self.codeView.loadFile(path)

    def saveFile(self):
        if self.codeView.isUntitled():
            return
        self.codeView.saveFile()
        self.controller.update(self.codeView)

    def onToggleTriggered(self):
        self.controller.toggle()
        self.toggleAction.setChecked(self.controller.enabled)

    def refreshWindowTitle(self):
        if self.codeView.isUntitled():
            name = _("Untitled")
        else:
            name = os.path.basename(self.codeView.filePath)
        if self.codeView.document().isModified():
            name += "*"
        self.setWindowTitle(f"{name} – {qAppName()}")

    # -------------------------------------------------------------------------
    # Qt events

    def changeEvent(self, event: QEvent):
        super().changeEvent(event)
        if event.type() == QEvent.Type.PaletteChange:
            # Light to dark or vice-versa
            self.controller.updateTheme()

    def closeEvent(self, event: QCloseEvent):
        self.controller.dispose()
        super().closeEvent(event)
