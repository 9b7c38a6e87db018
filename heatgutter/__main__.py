# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging
import signal
import sys
from argparse import ArgumentParser
from pathlib import Path

from heatgutter.qt import *


def printBlame(path: str, isDark: bool) -> int:
    """ Print the gutter captions next to the file's lines, without booting the UI. """

    from heatgutter import settings
    from heatgutter.blame import computeRender
    from heatgutter.gitdriver import GitDriver, GitDriverError
    from heatgutter.toolbox import Benchmark

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv[:1])
        app.setApplicationName(APP_SYSTEM_NAME)  # used by QStandardPaths
    try:
        settings.prefs.load()
    except (OSError, ValueError) as exc:
        logging.warning(f"Couldn't load prefs: {exc}")

    # Keep CRLF line endings: git compares the buffer with the committed blob byte for byte
    with open(path, encoding="utf-8", errors="replace", newline="") as f:
        text = f.read()
    lines = text.split("\n")

    GitDriver.setGitPath(settings.prefs.gitPath)

    try:
        with Benchmark("Blame"):
            table = GitDriver.blameSync(path, text, maxOutputBytes=settings.prefs.maxBlameOutputKB * 1024)
    except GitDriverError as exc:
        print(f"{path}: {exc}", file=sys.stderr)
        return 1

    instructions = computeRender(table, len(lines), isDark)
    for instruction, line in zip(instructions, lines, strict=True):
        caption = instruction.text.replace("\u00A0", " ")
        color = "" if instruction.isPlaceholder else instruction.backgroundColor
        line = line.removesuffix("\r")
        print(f"{caption} {color:20} | {line}")

    return 0


def main():
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.WARNING,
        format='%(levelname).1s %(asctime)s %(filename)-16s | %(message)s',
        datefmt="%H:%M:%S")
    logging.captureWarnings(True)

    parser = ArgumentParser(description="Git blame heat map for the current contents of a file")
    parser.add_argument("path", nargs="?", default="", help="File to open")
    parser.add_argument("-p", "--print", action="store_true", help="Print annotations to stdout instead of opening a window")
    parser.add_argument("--dark", action="store_true", help="Use dark theme colors when printing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")
    args, qtArgs = parser.parse_known_args()

    if args.verbose or APP_DEBUG:
        logging.root.setLevel(logging.DEBUG)

    if args.print:
        if not args.path:
            parser.error("--print requires a path")
        sys.exit(printBlame(args.path, args.dark))

    from heatgutter.application import HGApplication
    app = HGApplication(sys.argv[:1] + qtArgs)

    # Quit app cleanly on Ctrl+C
    def onSigint(*_dummy):
        QTimer.singleShot(0, app.quit)
    signal.signal(signal.SIGINT, onSigint)

    # Force Python interpreter to run every now and then so it can run the Ctrl+C signal handler
    if __debug__:
        timer = QTimer()
        timer.start(300)
        timer.timeout.connect(lambda: None)

    app.beginSession()
    if args.verbose:
        logging.root.setLevel(logging.DEBUG)

    app.openBlameWindow(str(Path(args.path).resolve()) if args.path else "")

    returnCode = app.exec()
    sys.exit(returnCode)


if __name__ == "__main__":
    main()
