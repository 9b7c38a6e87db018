# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import textwrap

from heatgutter.blame import *

HASH_A = "a" * 40
HASH_B = "b" * 40
HASH_C = "c" * 40
HASH_0 = "0" * 40

# Typical output of "git blame --incremental" with several hunks per commit.
# Git only sends full metadata the first time it mentions a commit.
SAMPLE_STREAM = textwrap.dedent(f"""\
    {HASH_B} 2 2 1
    author Bob
    author-mail <bob@example.com>
    author-time 1650000000
    author-tz +0000
    committer Bob
    committer-mail <bob@example.com>
    committer-time 1650000000
    committer-tz +0000
    summary Add line 2
    previous {HASH_A} hello.txt
    filename hello.txt
    {HASH_A} 1 1 1
    author Alexandria
    author-mail <alexandria@example.com>
    author-time 1600000000
    author-tz +0000
    committer Alexandria
    committer-mail <alexandria@example.com>
    committer-time 1600000000
    committer-tz +0000
    summary Initial commit
    boundary
    filename hello.txt
    {HASH_A} 2 3 2
    filename hello.txt
    """)


def testEndToEndExample():
    table = parseIncrementalBlame(f"{HASH_A} 1 1 2\nauthor Bob\nauthor-time 1000\n")

    assert table.lineNumbers() == [1, 2]
    for la in table:
        assert la.commit.hash == HASH_A
        assert la.commit.author == "Bob"
        assert la.commit.authorTime == 1000
    assert table.commitForLine(3) is None


def testSampleStream():
    table = parseIncrementalBlame(SAMPLE_STREAM)

    assert table.lineNumbers() == [2, 1, 3, 4]
    assert table.commitForLine(1).author == "Alexandria"
    assert table.commitForLine(1).summary == "Initial commit"
    assert table.commitForLine(2).author == "Bob"
    assert table.commitForLine(2).authorTime == 1650000000
    assert table.commitForLine(2).summary == "Add line 2"
    assert table.commitForLine(3) is table.commitForLine(1)
    assert table.commitForLine(4) is table.commitForLine(1)
    assert set(table.commits) == {HASH_A, HASH_B}


def testLinesInHunkShareCommitObject():
    table = parseIncrementalBlame(f"{HASH_A} 10 5 3\nauthor Carol\n")

    assert table.lineNumbers() == [5, 6, 7]
    first = table.lines[0].commit
    assert all(la.commit is first for la in table)
    assert first is table.commits[HASH_A]


def testUncommittedLinesAreExcluded():
    table = parseIncrementalBlame(f"{HASH_0} 1 1 1\nauthor Not Committed Yet\nauthor-time 1700000000\n")
    assert len(table) == 0
    assert not table
    assert table.commitForLine(1) is None


def testUncommittedHunkBetweenCommittedHunks():
    stream = (f"{HASH_A} 1 1 1\nauthor Alice\nauthor-time 100\n"
              f"{HASH_0} 2 2 2\nauthor Not Committed Yet\nauthor-time 999\n"
              f"{HASH_A} 2 4 1\n")
    table = parseIncrementalBlame(stream)

    assert table.lineNumbers() == [1, 4]
    # Metadata for the sentinel hash must not leak into the previous commit
    assert table.commitForLine(1).author == "Alice"
    assert table.commitForLine(1).authorTime == 100


def testMetadataAppliesToMostRecentHunk():
    stream = (f"{HASH_A} 1 1 1\n"
              f"{HASH_B} 2 2 1\n"
              f"{HASH_C} 3 3 1\n"
              f"author Carol\n"
              f"{HASH_A} 4 4 1\n"
              f"author Alice\n"
              f"author-time 42\n"
              f"summary late metadata\n")
    table = parseIncrementalBlame(stream)

    # Line 1 was emitted before A's metadata arrived, yet it sees the final values
    commitA = table.commitForLine(1)
    assert commitA.author == "Alice"
    assert commitA.authorTime == 42
    assert commitA.summary == "late metadata"
    assert table.commitForLine(4) is commitA

    assert table.commitForLine(2).author == ""
    assert table.commitForLine(2).authorTime == 0
    assert table.commitForLine(2).summary is None
    assert table.commitForLine(3).author == "Carol"


def testMetadataBeforeFirstHunkIsIgnored():
    table = parseIncrementalBlame(f"author Ghost\nauthor-time 5\n{HASH_A} 1 1 1\n")
    assert table.commitForLine(1).author == ""
    assert table.commitForLine(1).authorTime == 0


def testUnrecognizedLinesAreIgnored():
    stream = (f"{HASH_A} 1 1 1\n"
              f"author  Padded Name  \n"
              f"author-time not-a-number\n"
              f"some-future-field with a value\n"
              f"\n"
              f"{HASH_A[:39]} 1 2 1\n"  # 39 hex chars: not a hunk header
              f"{HASH_A.upper()} 1 3 1\n"  # uppercase: not a hunk header
              f"{HASH_A} 1 5\n")  # missing field: not a hunk header
    table = parseIncrementalBlame(stream)

    assert table.lineNumbers() == [1]
    assert table.commitForLine(1).author == "Padded Name"
    assert table.commitForLine(1).authorTime == 0


def testCrlfLineEndings():
    table = parseIncrementalBlame(f"{HASH_A} 1 1 2\r\nauthor Bob\r\nauthor-time 1000\r\n")
    assert table.lineNumbers() == [1, 2]
    assert table.commitForLine(1).author == "Bob"
    assert table.commitForLine(1).authorTime == 1000


def testNoTrailingNewline():
    table = parseIncrementalBlame(f"{HASH_A} 1 1 1\nauthor-time 77")
    assert table.commitForLine(1).authorTime == 77


def testEmptyStream():
    table = parseIncrementalBlame("")
    assert len(table) == 0
    assert table.commits == {}


def testParsingIsDeterministic():
    table1 = parseIncrementalBlame(SAMPLE_STREAM)
    table2 = parseIncrementalBlame(SAMPLE_STREAM)
    assert table1 == table2
    assert table1.lines[0].commit is not table2.lines[0].commit


def testStateMachineTracksCurrentHash():
    parser = IncrementalBlameParser()
    assert parser.currentHash is None

    parser.feedLine(f"{HASH_A} 1 1 1")
    assert parser.currentHash == HASH_A

    parser.feedLine("author Alice")
    parser.feedLine(f"{HASH_0} 2 2 1")
    assert parser.currentHash == HASH_0

    parser.feedLine("filename hello.txt")
    assert parser.currentHash == HASH_0

    table = parser.table()
    assert table.lineNumbers() == [1]
    assert table.commits[HASH_A].author == "Alice"
    assert table.commits[HASH_0].isUncommitted


def testLineAttributionsAreHashable():
    table = parseIncrementalBlame(f"{HASH_A} 1 1 2\nauthor Bob\n")
    assert len(set(table.lines)) == 2
    assert hash(table.lines[0]) != hash(table.lines[1])
