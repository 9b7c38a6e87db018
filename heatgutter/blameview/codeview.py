# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from pathlib import Path

from heatgutter import settings
from heatgutter.blameview.heatgutter import HeatGutter
from heatgutter.qt import *

logger = logging.getLogger(__name__)


def detectLineEnding(text: str) -> str:
    """ Return the line ending used by the first line break in `text`. """
    newline = text.find("\n")
    if newline > 0 and text[newline - 1] == "\r":
        return "\r\n"
    return "\n"


class CodeView(QPlainTextEdit):
    """
    Plain text editor for one file, with a HeatGutter on its left side.

    The document's revision number (QTextDocument.revision) serves as the
    document version: it changes whenever the text is edited.

    The file's line ending is remembered on load, so that the text handed to
    git and the text written back to disk match the file byte for byte.
    """

    fileLoaded = Signal(str)
    fileSaved = Signal(str)

    gutter: HeatGutter
    filePath: str
    lineEnding: str

    def __init__(self, parent=None):
        super().__init__(parent)

        self.filePath = ""
        self.lineEnding = "\n"
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)

        self.gutter = HeatGutter(self)
        self.updateRequest.connect(self.gutter.onParentUpdateRequest)

        self.refreshPrefs()

    # ---------------------------------------------
    # Qt events

    def resizeEvent(self, event: QResizeEvent):
        super().resizeEvent(event)
        self.resizeGutter()

    # ---------------------------------------------
    # File I/O

    def isUntitled(self) -> bool:
        return not self.filePath

    def documentVersion(self) -> int:
        return self.document().revision()

    def loadFile(self, path: str):
        path = str(Path(path).resolve())
        with open(path, encoding="utf-8", errors="replace", newline="") as f:
            text = f.read()
        self.filePath = path
        self.lineEnding = detectLineEnding(text)
        self.gutter.clearRenderInstructions()
        self.setPlainText(text.replace("\r\n", "\n"))
        logger.debug(f"Loaded {path}")
        self.fileLoaded.emit(path)

    def saveFile(self):
        assert not self.isUntitled(), "can't save an untitled document"
        with open(self.filePath, "w", encoding="utf-8", newline="") as f:
            f.write(self.bufferText())
        self.document().setModified(False)
        logger.debug(f"Saved {self.filePath}")
        self.fileSaved.emit(self.filePath)

    def bufferText(self) -> str:
        """
        Return the document's text exactly as it would be saved.

        Unlike toPlainText, this keeps non-breaking spaces intact.
        """
        text = self.document().toRawText()
        # Qt stores paragraph and line separators in place of newlines
        text = text.replace("\u2029", self.lineEnding)
        text = text.replace("\u2028", self.lineEnding)
        return text

    def lineCount(self) -> int:
        return self.document().blockCount()

    # ---------------------------------------------
    # Prefs & metrics

    def refreshPrefs(self):
        monoFont = settings.prefs.monoFont()
        self.setFont(monoFont)

        currentDocument = self.document()
        if currentDocument:
            currentDocument.setDefaultFont(monoFont)

        self.gutter.syncFont(monoFont)
        self.syncViewportMarginsWithGutter()

    def resizeGutter(self):
        cr: QRect = self.contentsRect()
        cr.setWidth(self.gutter.calcWidth())
        self.gutter.setGeometry(cr)

    def syncViewportMarginsWithGutter(self):
        gutterWidth = self.gutter.calcWidth()

        # Prevent Qt freeze if margin width exceeds widget width, e.g. when window is very narrow
        self.setMinimumWidth(gutterWidth * 2)

        self.setViewportMargins(gutterWidth, 0, 0, 0)
        self.resizeGutter()
