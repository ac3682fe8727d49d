from logging import debug
from typing import Iterator, NamedTuple

from .errors import CorruptObjectError
from .objects import CommitObject, ObjectKind, TreeObject
from .store import ObjectStore, normalize_id

# submodule commits recorded in a tree; they live in another repository
GITLINK_MODE = "160000"


class LogEntry(NamedTuple):
    hash: str
    commit: CommitObject
    merged: bool


def load_commit(store: ObjectStore, commit_id: str) -> CommitObject:
    raw = store.load(commit_id)
    if raw.kind is not ObjectKind.COMMIT:
        raise CorruptObjectError(f"{commit_id} is a {raw.kind.name.lower()}, not a commit")
    return CommitObject.from_payload(raw.contents, raw.hash)


def load_tree(store: ObjectStore, tree_id: str) -> TreeObject:
    raw = store.load(tree_id)
    if raw.kind is not ObjectKind.TREE:
        raise CorruptObjectError(f"{tree_id} is a {raw.kind.name.lower()}, not a tree")
    return TreeObject.from_payload(raw.contents, raw.hash)


def traverse_history(store: ObjectStore, start: str) -> list[LogEntry]:
    """Walk first-parent history from ``start``, most recent first.

    For a merge commit the second parent is listed right after it, flagged as
    merged, but its own ancestry is not followed.
    """
    logs = []
    seen = set()
    commit_id = normalize_id(start)

    while True:
        if commit_id in seen:
            raise CorruptObjectError(f"Cycle in commit history at {commit_id}")
        seen.add(commit_id)

        commit = load_commit(store, commit_id)
        logs.append(LogEntry(commit_id, commit, False))

        if not commit.parents:
            break
        if len(commit.parents) >= 2:
            merged_id = normalize_id(commit.parents[1])
            logs.append(LogEntry(merged_id, load_commit(store, merged_id), True))

        commit_id = normalize_id(commit.parents[0])

    debug(f"Traversed {len(logs)} commits from {start}")
    return logs


def walk_tree(store: ObjectStore, tree_id: str) -> Iterator[str]:
    """Yield the path of every blob reachable from a tree, depth first."""
    stack = [("", iter(load_tree(store, tree_id).entries))]

    while stack:
        prefix, entries = stack[-1]
        entry = next(entries, None)
        if entry is None:
            stack.pop()
            continue

        if entry.mode == GITLINK_MODE:
            debug(f"Skipping submodule {prefix}{entry.name} at {entry.hash}")
            continue

        raw = store.load(entry.hash)
        if raw.kind is ObjectKind.TREE:
            subtree = TreeObject.from_payload(raw.contents, raw.hash)
            stack.append((f"{prefix}{entry.name}/", iter(subtree.entries)))
        else:
            yield f"{prefix}{entry.name}"


def commit_files(store: ObjectStore, commit_id: str) -> Iterator[str]:
    """Paths of every file in a commit's snapshot."""
    return walk_tree(store, load_commit(store, commit_id).tree)
