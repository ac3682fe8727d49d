"""Plain text views, matching the classic git-internals output formats."""

from typing import Iterable

from .objects import BlobObject, CommitObject, GitObject, TreeObject
from .refs import Branch
from .traverse import LogEntry


def format_commit(commit: CommitObject) -> str:
    lines = [f"tree: {commit.tree}"]
    if commit.parents:
        lines.append(f"parents: {' | '.join(commit.parents)}")
    lines.append(f"author: {commit.author}")
    lines.append(f"committer: {commit.committer}")
    lines.append("commit message:")
    return "\n".join(lines) + "\n" + commit.message


def format_tree(tree: TreeObject) -> str:
    return "\n".join(str(entry) for entry in tree.entries)


def format_object(obj: GitObject) -> str:
    match obj:
        case CommitObject():
            body = format_commit(obj)
        case TreeObject():
            body = format_tree(obj)
        case BlobObject():
            body = obj.text
        case _:
            raise TypeError(f"Cannot render {obj!r}")

    return f"*{obj.kind.name}*\n{body}"


def format_branches(branches: Iterable[Branch]) -> str:
    return "\n".join(
        f"{'*' if branch.current else ' '} {branch.name}" for branch in branches
    )


def format_log_entry(entry: LogEntry) -> str:
    merged = " (merged)" if entry.merged else ""
    return f"Commit: {entry.hash}{merged}\n{entry.commit.committer}\n{entry.commit.message}"


def format_log(entries: Iterable[LogEntry]) -> str:
    return "\n".join(format_log_entry(entry) for entry in entries)


def format_paths(paths: Iterable[str]) -> str:
    return "\n".join(paths)
