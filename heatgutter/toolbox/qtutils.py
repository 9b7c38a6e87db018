# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import re

from heatgutter.qt import *

_hslPattern = re.compile(r"^hsl\(\s*(\d+)\s*,\s*(\d+)%\s*,\s*(\d+)%\s*\)$")


def setFontFeature(font: QFont, fourCC: str, value: int = 1):
    try:
        font.setFeature(QFont.Tag(fourCC), value)
    except AttributeError:  # pragma: no cover
        # Mitigation for pre-Qt 6.7 bindings
        pass
    return font


def isDarkTheme(palette: QPalette | None = None):
    if palette is None:
        palette = QApplication.palette()
    themeBG = palette.color(QPalette.ColorRole.Base)  # standard theme background color
    themeFG = palette.color(QPalette.ColorRole.Text)  # standard theme foreground color
    return themeBG.value() < themeFG.value()


def cssColor(css: str) -> QColor:
    """
    Convert a CSS color to a QColor.
    Understands "hsl(h, s%, l%)" and "transparent" on top of the
    formats that QColor parses natively ("#rrggbb", SVG color names).
    An empty string yields an invalid QColor.
    """
    if not css:
        return QColor()

    if css == "transparent":
        return QColor(Qt.GlobalColor.transparent)

    match = _hslPattern.match(css)
    if match:
        h, s, l = (int(g) for g in match.groups())
        return QColor.fromHslF(h / 360, s / 100, l / 100)

    return QColor(css)
