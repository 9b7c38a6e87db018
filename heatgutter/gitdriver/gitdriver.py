# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import io
import logging
import os
import shlex
import signal

from heatgutter.blame import AttributionTable, parseIncrementalBlame
from heatgutter.qt import *

logger = logging.getLogger(__name__)

DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024


class GitDriverError(Exception):
    """
    Git couldn't produce a usable result: it isn't installed, the file isn't
    in a repository, git exited with an error, or its output was too large.
    """
    pass


class GitDriver(QProcess):
    _commandStem = ["git"]

    done = Signal()
    "Emitted exactly once, whether the process ran to completion or failed to start"

    maxOutputBytes: int
    outputOverflow: bool

    @classmethod
    def setGitPath(cls, gitPath: str):
        # Treat command as POSIX even on Windows!
        cls._commandStem = shlex.split(gitPath, posix=True) or ["git"]

    @classmethod
    def buildBlameCommand(cls, fileName: str) -> list[str]:
        return [
            "blame",
            "--incremental",
            "--contents", "-",  # read the buffer from stdin instead of the file on disk
            "--",
            fileName,
        ]

    @classmethod
    def blame(
            cls,
            filePath: str,
            content: str,
            maxOutputBytes: int = DEFAULT_MAX_OUTPUT_BYTES,
            parent: QObject | None = None
    ) -> GitDriver:
        """
        Prepare (but don't start) a process that blames `content` as if it
        were the contents of `filePath`.
        """
        directory, fileName = os.path.split(os.path.abspath(filePath))
        driver = cls(*cls.buildBlameCommand(fileName), parent=parent)
        driver.setWorkingDirectory(directory)
        driver.stdinData = content.encode("utf-8")
        driver.maxOutputBytes = maxOutputBytes
        return driver

    @classmethod
    def blameSync(cls, filePath: str, content: str, maxOutputBytes: int = DEFAULT_MAX_OUTPUT_BYTES,
                  timeoutMs: int = 30_000) -> AttributionTable:
        driver = cls.blame(filePath, content, maxOutputBytes)
        driver.start()
        finished = driver.waitForFinished(timeoutMs)
        if driver.error() == QProcess.ProcessError.FailedToStart:
            raise GitDriverError(driver.describeFailure())
        if not finished:
            driver.kill()
            driver.waitForFinished()
            raise GitDriverError(f"{driver.formatCommandLine()} timed out")
        if not driver.succeeded():
            raise GitDriverError(driver.describeFailure())
        return driver.readBlameTable()

    def __init__(self, *args: str, parent: QObject | None = None):
        super().__init__(parent)

        self.setObjectName("GitDriver")

        tokens = GitDriver._commandStem + list(args)
        self.setProgram(tokens[0])
        self.setArguments(tokens[1:])

        self.stdinData = b""
        self.maxOutputBytes = DEFAULT_MAX_OUTPUT_BYTES
        self.outputOverflow = False
        self._stdoutScrollback = io.BytesIO()
        self._stderrScrollback = io.BytesIO()
        self._stdout = None
        self._doneEmitted = False

        self.readyReadStandardOutput.connect(self._onReadyReadStandardOutput)
        self.readyReadStandardError.connect(self._onReadyReadStandardError)
        self.finished.connect(self._emitDone)
        self.errorOccurred.connect(self._onErrorOccurred)

    def start(self):
        logger.debug(f"Starting: {self.formatCommandLine()} (in {self.workingDirectory()})")
        super().start()
        if self.state() != QProcess.ProcessState.NotRunning:
            # QProcess buffers stdin until the process has started
            self.write(self.stdinData)
            self.closeWriteChannel()

    def _onReadyReadStandardOutput(self):
        if self.outputOverflow:
            self.readAllStandardOutput()  # drain
            return

        raw = self.readAllStandardOutput().data()
        self._stdoutScrollback.write(raw)

        if self._stdoutScrollback.tell() > self.maxOutputBytes:
            logger.info(f"Output exceeds {self.maxOutputBytes} bytes, killing: {self.formatCommandLine()}")
            self.outputOverflow = True
            self._stdoutScrollback = io.BytesIO()
            self.kill()

    def _onReadyReadStandardError(self):
        self._stderrScrollback.write(self.readAllStandardError().data())

    def _onErrorOccurred(self, error: QProcess.ProcessError):
        # 'finished' isn't emitted if the program couldn't be launched at all
        if error == QProcess.ProcessError.FailedToStart:
            self._emitDone()

    def _emitDone(self):
        if not self._doneEmitted:
            self._doneEmitted = True
            self.done.emit()

    def succeeded(self) -> bool:
        return (not self.outputOverflow
                and self.error() == QProcess.ProcessError.UnknownError
                and self.exitStatus() == QProcess.ExitStatus.NormalExit
                and self.exitCode() == 0)

    def stderrScrollback(self) -> str:
        return self._stderrScrollback.getvalue().decode("utf-8", errors="replace")

    def stdoutScrollback(self) -> str:
        if self._stdout is None:
            # Catch whatever is still sitting in the read buffer
            self._onReadyReadStandardOutput()
            self._stdout = self._stdoutScrollback.getvalue().decode("utf-8", errors="replace")
        return self._stdout

    def readBlameTable(self) -> AttributionTable:
        return parseIncrementalBlame(self.stdoutScrollback())

    def formatExitCode(self) -> str:
        code = self.exitCode()

        if WINDOWS:
            code32 = code & 0xFFFFFFFF
            if code32 == 0xC000013A:
                return f"SIGTERM equivalent (0x{code32:08X})"
            elif code32 == 0xF291:
                return f"SIGKILL equivalent (0x{code32:08X})"
            else:
                return f"{code}"

        try:
            s = signal.Signals(code)
            return f"{code} ({s.name})"
        except ValueError:
            pass

        return f"{code}"

    def formatCommandLine(self):
        return shlex.join([self.program()] + self.arguments())

    def describeFailure(self) -> str:
        command = self.formatCommandLine()

        if self.outputOverflow:
            return f"{command}: output exceeds {self.maxOutputBytes} bytes"
        elif self.error() == QProcess.ProcessError.FailedToStart:
            return f"{command}: failed to start ({self.errorString()})"
        elif self.exitStatus() == QProcess.ExitStatus.CrashExit:
            return f"{command}: crashed"

        stderr = self.stderrScrollback().strip()
        text = f"{command}: exited with code {self.formatExitCode()}"
        if stderr:
            text += f": {stderr}"
        return text
