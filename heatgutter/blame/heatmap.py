# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Turn an AttributionTable into per-line gutter captions colored by age.

The newest commit in the file gets the most saturated blue; the oldest one
fades into the background.
"""

from __future__ import annotations

import dataclasses
import math
from datetime import datetime

from heatgutter.blame.attribution import AttributionTable, CommitInfo

GUTTER_WIDTH_CHARS = 18
AUTHOR_WIDTH_CHARS = 6
HEAT_HUE = 210

PLACEHOLDER_BACKGROUND = "transparent"
DARK_TEXT_COLOR = "#cccccc"
LIGHT_TEXT_COLOR = "#555555"


@dataclasses.dataclass(frozen=True)
class RenderInstruction:
    text: str
    backgroundColor: str
    textColor: str = ""

    @property
    def isPlaceholder(self) -> bool:
        return self.backgroundColor == PLACEHOLDER_BACKGROUND


def placeholderInstruction() -> RenderInstruction:
    # Non-breaking spaces keep the gutter column from collapsing
    return RenderInstruction("\u00A0" * GUTTER_WIDTH_CHARS, PLACEHOLDER_BACKGROUND)


def _roundHalfUp(x: float) -> int:
    return math.floor(x + 0.5)


def timeRange(table: AttributionTable) -> tuple[int, int] | None:
    """
    Return (oldest, newest) author time among attributed lines,
    or None if no line has a known time.
    """
    times = [la.commit.authorTime for la in table if la.commit.authorTime > 0]
    if not times:
        return None
    return min(times), max(times)


def heatRatio(authorTime: int, minTime: int, maxTime: int) -> float:
    """ 0 for the newest commit in the file, 1 for the oldest. """
    if maxTime == minTime:
        return 0.0
    return (maxTime - authorTime) / (maxTime - minTime)


def heatColor(ratio: float, isDarkMode: bool) -> str:
    saturation = _roundHalfUp(50 - ratio * 40)  # 50% -> 10%
    if isDarkMode:
        lightness = _roundHalfUp(30 - ratio * 15)  # 30% -> 15%
    else:
        lightness = _roundHalfUp(85 + ratio * 11)  # 85% -> 96%
    return f"hsl({HEAT_HUE}, {saturation}%, {lightness}%)"


def formatAuthor(author: str) -> str:
    author = author or "Unknown"
    return author[:AUTHOR_WIDTH_CHARS].ljust(AUTHOR_WIDTH_CHARS)


def formatLabel(commit: CommitInfo) -> str:
    date = datetime.fromtimestamp(commit.authorTime)
    return f"{date.year:04d}/{date.month:02d}/{date.day:02d} {formatAuthor(commit.author)}"


def computeRender(table: AttributionTable, totalLines: int, isDarkMode: bool) -> list[RenderInstruction]:
    span = timeRange(table)
    minTime, maxTime = span if span else (0, 0)

    textColor = DARK_TEXT_COLOR if isDarkMode else LIGHT_TEXT_COLOR
    placeholder = placeholderInstruction()
    instructions = [placeholder] * totalLines

    # A commit maps to the same instruction wherever it appears
    memo: dict[str, RenderInstruction] = {}

    for la in table:
        i = la.lineNumber - 1
        if not (0 <= i < totalLines):
            continue

        commit = la.commit
        if commit.authorTime <= 0:
            continue

        try:
            instructions[i] = memo[commit.hash]
        except KeyError:
            ratio = heatRatio(commit.authorTime, minTime, maxTime)
            instruction = RenderInstruction(formatLabel(commit), heatColor(ratio, isDarkMode), textColor)
            memo[commit.hash] = instruction
            instructions[i] = instruction

    return instructions
