# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
from collections.abc import Iterator

UNCOMMITTED_HASH = "0" * 40
"Hash that git blame reports for buffer content that isn't in any commit"


@dataclasses.dataclass
class CommitInfo:
    hash: str
    author: str = ""
    authorTime: int = 0
    summary: str | None = None

    @property
    def isUncommitted(self) -> bool:
        return self.hash == UNCOMMITTED_HASH


@dataclasses.dataclass(frozen=True)
class LineAttribution:
    lineNumber: int
    "1-based line number in the blamed content"

    commit: CommitInfo = dataclasses.field(hash=False)
    "Shared with every other line that was last changed by the same commit"


class AttributionTable:
    """
    Per-line blame result for one snapshot of a file.

    Lines are kept in the order git reported them. Lines without an entry
    are unattributed (uncommitted content, or trailing lines git didn't
    report on).
    """

    lines: list[LineAttribution]
    commits: dict[str, CommitInfo]

    def __init__(self, lines: list[LineAttribution] | None = None, commits: dict[str, CommitInfo] | None = None):
        self.lines = lines if lines is not None else []
        self.commits = commits if commits is not None else {}
        self._byLineNumber = None

    def __len__(self):
        return len(self.lines)

    def __iter__(self) -> Iterator[LineAttribution]:
        return iter(self.lines)

    def __bool__(self):
        return bool(self.lines)

    def __eq__(self, other):
        if not isinstance(other, AttributionTable):
            return NotImplemented
        return self.lines == other.lines

    def __repr__(self):
        return f"AttributionTable({len(self.lines)} lines, {len(self.commits)} commits)"

    def commitForLine(self, lineNumber: int) -> CommitInfo | None:
        """ Look up the commit that last changed a 1-based line number. """
        if self._byLineNumber is None:
            self._byLineNumber = {la.lineNumber: la.commit for la in self.lines}
        return self._byLineNumber.get(lineNumber, None)

    def lineNumbers(self) -> list[int]:
        return [la.lineNumber for la in self.lines]
