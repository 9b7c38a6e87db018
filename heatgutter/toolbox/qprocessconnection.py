# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from contextlib import suppress

from heatgutter.qt import *


class QProcessConnection(QObject):
    """
    Keeps track of at most one running QProcess.

    Tracking a new process abandons the previous one: it gets killed.
    """
    process: QProcess | None

    def __init__(self, parent):
        super().__init__(parent)
        self.process = None

    def __bool__(self):
        return self.process is not None

    def track(self, process: QProcess):
        assert process is not self.process, "reconnecting to same process"

        self.abandon()
        assert self.process is None

        self.process = process
        process.errorOccurred.connect(self.stopTracking)
        process.finished.connect(self.stopTracking)

    def stopTracking(self):
        process = self.process

        if process is not None:
            with suppress(TypeError, RuntimeError):
                process.finished.disconnect(self.stopTracking)
            with suppress(TypeError, RuntimeError):
                process.errorOccurred.disconnect(self.stopTracking)

        self.process = None
        return process

    def abandon(self):
        """ Stop tracking the current process and kill it if it's still running. """
        process = self.stopTracking()
        if process is not None and process.state() != QProcess.ProcessState.NotRunning:
            process.kill()
        return process
