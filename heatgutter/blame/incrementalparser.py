# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Parser for the output of "git blame --incremental".

The incremental format is a stream of records. Each record starts with a
hunk header, followed by metadata about the commit. Git only sends the full
metadata the first time it mentions a commit, and it may send hunks in any
order:

    <40-hex hash> <orig line> <final line> <line count>
    author Jane Doe
    author-mail <jane@example.com>
    author-time 1700000000
    author-tz +0100
    committer ...
    summary Fix frobnicator
    previous <hash> <path>
    filename src/frob.c
"""

from __future__ import annotations

import logging
import re

from heatgutter.blame.attribution import AttributionTable, CommitInfo, LineAttribution, UNCOMMITTED_HASH

logger = logging.getLogger(__name__)

_hunkHeaderPattern = re.compile(r"^([0-9a-f]{40}) (\d+) (\d+) (\d+)$")


def iterateLines(text: str):
    pos = 0
    limit = len(text)

    while pos < limit:
        nextPos = text.find('\n', pos)
        if nextPos < 0:
            nextPos = limit
        yield text[pos:nextPos].removesuffix('\r')
        pos = nextPos + 1


class IncrementalBlameParser:
    """
    State machine that accumulates an AttributionTable from a blame stream.

    The only state is `currentHash`: the commit opened by the most recent hunk
    header. Metadata lines apply to that commit. Because every line in a hunk
    points to the same CommitInfo object, metadata that arrives after the
    hunk header is visible through all of the hunk's lines.
    """

    currentHash: str | None

    def __init__(self):
        self.currentHash = None
        self.commits: dict[str, CommitInfo] = {}
        self.lines: list[LineAttribution] = []

    def feedLine(self, line: str):
        match = _hunkHeaderPattern.match(line)
        if match:
            self._openHunk(match.group(1), int(match.group(3)), int(match.group(4)))
            return

        if self.currentHash is None:
            # Metadata before the first hunk header has no owner
            return

        commit = self.commits[self.currentHash]

        if line.startswith("author "):
            commit.author = line.removeprefix("author ").strip()
        elif line.startswith("author-time "):
            value = line.removeprefix("author-time ").strip()
            try:
                commit.authorTime = int(value)
            except ValueError:
                logger.debug(f"Ignoring unparsable author-time: {value!r}")
        elif line.startswith("summary "):
            commit.summary = line.removeprefix("summary ").strip()
        else:
            # Ignore author-mail, committer, previous, filename, boundary, etc.
            pass

    def _openHunk(self, commitHash: str, finalLine: int, lineCount: int):
        self.currentHash = commitHash

        try:
            commit = self.commits[commitHash]
        except KeyError:
            commit = CommitInfo(commitHash)
            self.commits[commitHash] = commit

        # Uncommitted lines are left unattributed
        if commitHash == UNCOMMITTED_HASH:
            return

        self.lines.extend(LineAttribution(lineNumber, commit)
                          for lineNumber in range(max(1, finalLine), finalLine + lineCount))

    def table(self) -> AttributionTable:
        return AttributionTable(self.lines, self.commits)


def parseIncrementalBlame(stdout: str) -> AttributionTable:
    parser = IncrementalBlameParser()
    for line in iterateLines(stdout):
        parser.feedLine(line)
    return parser.table()
