# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import os
import shutil
import tempfile
import time
from collections.abc import Callable

import pygit2
import pytest

from . import *

# Author times for the test repository, oldest first
T_OLD = 1600000000
T_MID = 1650000000
T_NEW = 1700000000

TEST_SIGNATURE = pygit2.Signature("Test Person", "toto@example.com", T_NEW, 0)

requiresGit = pytest.mark.skipif(
    not shutil.which("git"),
    reason="Requires vanilla git")


def waitUntilTrue(callback: Callable[[], bool], timeout: int = 5000):
    deadline = time.monotonic() + timeout / 1000
    while not callback():
        if time.monotonic() > deadline:
            raise TimeoutError(f"waitUntilTrue timed out after {timeout} ms")
        QTest.qWait(10)


def writeFile(path, text):
    # Prevent accidental littering of current working directory
    assert os.path.isabs(path), "pass me an absolute path"

    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(text.encode("utf-8"))


def readTextFile(path):
    with open(path, encoding="utf-8") as f:
        return f.read()


def commitFile(repo: pygit2.Repository, relPath: str, text: str, author: pygit2.Signature, message: str):
    writeFile(os.path.join(repo.workdir, relPath), text)
    repo.index.read()
    repo.index.add(relPath)
    repo.index.write()
    tree = repo.index.write_tree()
    parents = [] if repo.head_is_unborn else [repo.head.target]
    return repo.create_commit("HEAD", author, author, message, tree, parents)


def makeHistoryRepo(tempDir: tempfile.TemporaryDirectory | str) -> str:
    """
    Create a repository where hello.txt has lines from three commits:

        line 1  (Alexandria, T_OLD)
        line 2  (Bob,        T_MID)
        line 3  (Al,         T_NEW)
        line 4  (Alexandria, T_OLD)

    Return the absolute path to hello.txt.
    """
    tempDirPath = tempDir if isinstance(tempDir, str) else tempDir.name
    wd = os.path.realpath(os.path.join(tempDirPath, "HistoryRepo"))

    repo = pygit2.init_repository(wd, initial_head="master")

    alexandria = pygit2.Signature("Alexandria", "alexandria@example.com", T_OLD, 0)
    bob = pygit2.Signature("Bob", "bob@example.com", T_MID, 0)
    al = pygit2.Signature("Al", "al@example.com", T_NEW, 0)

    commitFile(repo, "hello.txt", "line 1\nline 4\n", alexandria, "Initial commit")
    commitFile(repo, "hello.txt", "line 1\nline 2\nline 4\n", bob, "Add line 2")
    commitFile(repo, "hello.txt", "line 1\nline 2\nline 3\nline 4\n", al, "Add line 3")

    repo.free()
    return os.path.join(wd, "hello.txt")
