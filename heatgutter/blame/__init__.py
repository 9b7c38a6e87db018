# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Annotate (blame) a file's in-memory contents and turn the result into a
heat map of commit ages.
"""

from heatgutter.blame.attribution import (
    AttributionTable,
    CommitInfo,
    LineAttribution,
    UNCOMMITTED_HASH,
)
from heatgutter.blame.heatmap import (
    GUTTER_WIDTH_CHARS,
    RenderInstruction,
    computeRender,
    formatAuthor,
    formatLabel,
    heatColor,
    heatRatio,
    placeholderInstruction,
    timeRange,
)
from heatgutter.blame.incrementalparser import (
    IncrementalBlameParser,
    parseIncrementalBlame,
)
