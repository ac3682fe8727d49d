from conftest import commit_payload
from gitinternals.objects import BlobObject, CommitObject, TreeEntry, TreeObject
from gitinternals.refs import Branch
from gitinternals.render import (
    format_branches,
    format_log,
    format_object,
    format_paths,
)
from gitinternals.traverse import LogEntry

TREE_ID = "abcdef01" * 5


def test_commit_with_parents():
    commit = CommitObject.from_payload(
        commit_payload(TREE_ID, ["1" * 40, "2" * 40], "Merge branch dev\n")
    )
    assert format_object(commit) == (
        "*COMMIT*\n"
        f"tree: {TREE_ID}\n"
        f"parents: {'1' * 40} | {'2' * 40}\n"
        "author: Smith mr.smith@matrix original timestamp: 2020-03-29 17:18:20 +03:00\n"
        "committer: Cypher cypher@matrix commit timestamp: 2020-03-29 17:18:20 +03:00\n"
        "commit message:\n"
        "Merge branch dev\n"
    )


def test_root_commit_has_no_parents_line():
    text = format_object(CommitObject.from_payload(commit_payload(TREE_ID)))
    assert "parents:" not in text


def test_tree():
    tree = TreeObject(
        [
            TreeEntry("100644", "main.kt", "2" * 40),
            TreeEntry("40000", "src", "3" * 40),
        ]
    )
    assert format_object(tree) == (
        f"*TREE*\n100644 {'2' * 40} main.kt\n40000 {'3' * 40} src"
    )


def test_blob():
    assert format_object(BlobObject(b"hello\n")) == "*BLOB*\nhello\n"


def test_branches():
    branches = [Branch("dev", "1" * 40, False), Branch("main", "2" * 40, True)]
    assert format_branches(branches) == "  dev\n* main"


def test_log():
    first = CommitObject.from_payload(commit_payload(TREE_ID, ["1" * 40, "2" * 40], "merge\n"))
    second = CommitObject.from_payload(commit_payload(TREE_ID, message="side\n"))
    committer = "Cypher cypher@matrix commit timestamp: 2020-03-29 17:18:20 +03:00"

    text = format_log([LogEntry("a" * 40, first, False), LogEntry("2" * 40, second, True)])
    assert text == (
        f"Commit: {'a' * 40}\n{committer}\nmerge\n"
        "\n"
        f"Commit: {'2' * 40} (merged)\n{committer}\nside\n"
    )


def test_paths():
    assert format_paths(iter(["a", "src/b"])) == "a\nsrc/b"
