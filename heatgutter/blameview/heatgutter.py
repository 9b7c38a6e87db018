# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import TYPE_CHECKING

from heatgutter.blame import GUTTER_WIDTH_CHARS, RenderInstruction
from heatgutter.qt import *
from heatgutter.toolbox import *

if TYPE_CHECKING:
    from heatgutter.blameview.codeview import CodeView


class HeatGutter(QWidget):
    """
    Gutter that shows a date/author caption for each line of a CodeView,
    on a background whose color reflects the age of the line.
    """
    # Inspired by https://doc.qt.io/qt-6.2/qtwidgets-widgets-codeeditor-example.html

    codeView: CodeView
    instructions: list[RenderInstruction]

    PaddingChars = 1
    MarginRight = 15

    def __init__(self, parent: CodeView):
        super().__init__(parent)
        self.codeView = parent
        self.instructions = []
        self.syncFont(parent.font())

    def syncFont(self, codeFont: QFont):
        font = QFont(codeFont)
        setFontFeature(font, "tnum")  # Tabular numbers
        self.setFont(font)

    def charWidth(self) -> int:
        return self.fontMetrics().horizontalAdvance("M")

    def calcWidth(self) -> int:
        return self.charWidth() * (GUTTER_WIDTH_CHARS + self.PaddingChars) + self.MarginRight

    def sizeHint(self) -> QSize:
        return QSize(self.calcWidth(), 0)

    def setRenderInstructions(self, instructions: list[RenderInstruction]):
        self.instructions = list(instructions)
        self.update()

    def clearRenderInstructions(self):
        self.setRenderInstructions([])

    def onParentUpdateRequest(self, rect: QRect, dy: int):
        if dy != 0:
            self.scroll(0, dy)
        else:
            self.update(0, rect.y(), self.width(), rect.height())

    def wheelEvent(self, event: QWheelEvent):
        # Forward mouse wheel to parent widget
        self.parentWidget().wheelEvent(event)

    def paintBlocks(self, event: QPaintEvent, painter: QPainter):
        paintRect = event.rect()

        # Clip painting to viewport rect (don't draw beneath horizontal scroll bar)
        vpRect = self.codeView.viewport().rect()
        vpRect.setWidth(paintRect.width())  # vpRect is adjusted by gutter width, so undo this
        paintRect = paintRect.intersected(vpRect)
        painter.setClipRect(paintRect)

        block: QTextBlock = self.codeView.firstVisibleBlock()
        top = round(self.codeView.blockBoundingGeometry(block).translated(self.codeView.contentOffset()).top())
        bottom = top + round(self.codeView.blockBoundingRect(block).height())

        while block.isValid() and top <= paintRect.bottom():
            if block.isVisible() and bottom >= paintRect.top():
                yield block, top, bottom

            block = block.next()
            top = bottom
            bottom = top + round(self.codeView.blockBoundingRect(block).height())

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)

        palette = self.palette()
        defaultTextColor = palette.color(QPalette.ColorRole.Text)

        captionLeft = self.charWidth() * self.PaddingChars
        captionWidth = self.width() - captionLeft - self.MarginRight
        bandWidth = self.width() - self.MarginRight
        alignLeft = Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter

        for block, top, bottom in self.paintBlocks(event, painter):
            try:
                instruction = self.instructions[block.blockNumber()]
            except IndexError:
                break

            if instruction.isPlaceholder:
                continue

            painter.fillRect(QRect(0, top, bandWidth, bottom - top), cssColor(instruction.backgroundColor))

            textColor = cssColor(instruction.textColor)
            painter.setPen(textColor if textColor.isValid() else defaultTextColor)
            painter.drawText(captionLeft, top, captionWidth, bottom - top, alignLeft, instruction.text)

        painter.end()
