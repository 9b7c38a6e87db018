# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
import logging
import os
from contextlib import suppress

import pygit2

from heatgutter import settings
from heatgutter.blame import AttributionTable, computeRender
from heatgutter.blameview.codeview import CodeView
from heatgutter.gitdriver import GitDriver
from heatgutter.localization import *
from heatgutter.qt import *
from heatgutter.toolbox import *

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class BlameRequest:
    codeView: CodeView
    path: str
    version: int
    driver: GitDriver

    def isStale(self) -> bool:
        return (self.codeView.filePath != self.path
                or self.codeView.documentVersion() != self.version)


class BlameController(QObject):
    """
    Keeps the HeatGutters of one or more CodeViews in sync with git blame.

    Requests are debounced, and a newer request for a file supersedes any
    request for the same file that is still running. Results that come back
    after the document has changed are thrown away.
    """

    statusMessage = Signal(str, int)
    blameApplied = Signal(str)
    blameFailed = Signal(str)

    enabled: bool
    isDarkTheme: bool
    blameCache: dict[str, AttributionTable]
    codeViews: list[CodeView]

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)
        self.setObjectName("BlameController")

        self.enabled = settings.prefs.enabled
        self.isDarkTheme = False
        self.blameCache = {}
        self.codeViews = []
        self.pendingViews = []
        self.inFlight: dict[str, BlameRequest] = {}
        self.connections: dict[str, QProcessConnection] = {}

        self.updateTimer = QTimer(self)
        self.updateTimer.setSingleShot(True)
        self.updateTimer.timeout.connect(self._flushPendingUpdates)

        GitDriver.setGitPath(settings.prefs.gitPath)

        self.updateTheme()

    # -------------------------------------------------------------------------
    # Control surface

    def toggle(self):
        self.enabled = not self.enabled

        if self.enabled:
            for codeView in self.codeViews:
                self.update(codeView)
        else:
            self.pendingViews.clear()
            self.updateTimer.stop()
            self.clearDecorations()

        if self.enabled:
            message = _("{0}: Enabled", qAppName())
        else:
            message = _("{0}: Disabled", qAppName())
        self.statusMessage.emit(message, settings.prefs.statusMessageMs)

    def updateTheme(self, isDark: bool | None = None):
        if isDark is None:
            isDark = settings.prefs.resolveDarkTheme(isDarkTheme())

        if isDark == self.isDarkTheme:
            return

        self.isDarkTheme = isDark
        logger.debug(f"Dark theme: {isDark}")

        # Recolor from the cache; no need to ask git again
        if self.enabled:
            for codeView in self.codeViews:
                table = self.blameCache.get(codeView.filePath, None)
                if table is not None:
                    self.applyRender(codeView, table)

    def update(self, codeView: CodeView):
        if not self.enabled:
            return

        self.attach(codeView)

        if codeView not in self.pendingViews:
            self.pendingViews.append(codeView)

        # Restarting the timer coalesces bursts of edits into a single request
        self.updateTimer.start(settings.prefs.debounceDelayMs)

    def dispose(self):
        self.updateTimer.stop()
        self.pendingViews.clear()
        for connection in self.connections.values():
            connection.abandon()
        self.inFlight.clear()

    # -------------------------------------------------------------------------

    def attach(self, codeView: CodeView):
        if codeView in self.codeViews:
            return
        self.codeViews.append(codeView)
        codeView.textChanged.connect(lambda: self.update(codeView))
        codeView.fileLoaded.connect(lambda: self.update(codeView))
        codeView.destroyed.connect(lambda: self.detach(codeView))

    def detach(self, codeView: CodeView):
        with suppress(ValueError):
            self.codeViews.remove(codeView)
        with suppress(ValueError):
            self.pendingViews.remove(codeView)

    def cachedTable(self, path: str) -> AttributionTable | None:
        return self.blameCache.get(path, None)

    def clearDecorations(self):
        for codeView in self.codeViews:
            codeView.gutter.clearRenderInstructions()

    def applyRender(self, codeView: CodeView, table: AttributionTable):
        instructions = computeRender(table, codeView.lineCount(), self.isDarkTheme)
        codeView.gutter.setRenderInstructions(instructions)

    # -------------------------------------------------------------------------
    # Blame cycle

    def _flushPendingUpdates(self):
        pending = self.pendingViews
        self.pendingViews = []
        for codeView in pending:
            self._startBlame(codeView)

    def _startBlame(self, codeView: CodeView):
        if not self.enabled or codeView.isUntitled():
            return

        path = codeView.filePath

        if not pygit2.discover_repository(os.path.dirname(path)):
            # Drop any older request for this path
            with suppress(KeyError):
                self.connections[path].abandon()
            self.inFlight.pop(path, None)
            self._onBlameFailed(codeView, path, "not in a git repository")
            return

        driver = GitDriver.blame(path, codeView.bufferText(),
                                 maxOutputBytes=settings.prefs.maxBlameOutputKB * 1024,
                                 parent=self)
        request = BlameRequest(codeView, path, codeView.documentVersion(), driver)

        try:
            connection = self.connections[path]
        except KeyError:
            connection = QProcessConnection(self)
            self.connections[path] = connection

        # Supersede any request for this file that's still running
        connection.abandon()
        self.inFlight[path] = request
        connection.track(driver)

        driver.done.connect(lambda: self._onDriverDone(request))
        driver.start()

    def _onDriverDone(self, request: BlameRequest):
        driver = request.driver
        driver.deleteLater()

        if self.inFlight.get(request.path, None) is not request:
            logger.debug(f"Superseded blame request discarded: {request.path}")
            return
        del self.inFlight[request.path]

        codeView = request.codeView
        if codeView not in self.codeViews or not self.enabled:
            return

        if not driver.succeeded():
            self._onBlameFailed(codeView, request.path, driver.describeFailure())
            return

        with Benchmark("Parse blame"):
            table = driver.readBlameTable()

        if request.isStale():
            logger.debug(f"Document changed during blame, discarding result: {request.path}")
            return

        self.blameCache[request.path] = table
        self.applyRender(codeView, table)
        self.blameApplied.emit(request.path)

    def _onBlameFailed(self, codeView: CodeView, path: str, reason: str):
        # Probably not a git repo or git not installed. This isn't worth bugging the user about.
        logger.info(f"No blame for {path}: {reason}")
        self.blameCache.pop(path, None)
        self.applyRender(codeView, AttributionTable())
        self.blameFailed.emit(path)
