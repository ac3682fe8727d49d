"""Fixtures that build real loose-object stores on disk."""

import hashlib
import zlib
from pathlib import Path

import pytest

AUTHOR = "Smith <mr.smith@matrix> 1585491500 +0300"
COMMITTER = "Cypher <cypher@matrix> 1585491500 +0300"


def encode_object(kind: str, payload: bytes) -> bytes:
    return kind.encode() + b" " + str(len(payload)).encode() + b"\0" + payload


def write_raw(git_dir: Path, data: bytes, object_id: str | None = None) -> str:
    """Compress ``data`` into the store, returning its id."""
    object_id = object_id or hashlib.sha1(data).hexdigest()
    path = git_dir / "objects" / object_id[0:2] / object_id[2:]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(zlib.compress(data))
    return object_id


def write_object(git_dir: Path, kind: str, payload: bytes) -> str:
    return write_raw(git_dir, encode_object(kind, payload))


def tree_payload(*entries: tuple[str, str, str]) -> bytes:
    payload = b""
    for mode, name, object_id in entries:
        payload += f"{mode} {name}".encode() + b"\0" + bytes.fromhex(object_id)
    return payload


def commit_payload(
    tree: str,
    parents=(),
    message: str = "message\n",
    author: str = AUTHOR,
    committer: str = COMMITTER,
) -> bytes:
    lines = [f"tree {tree}"]
    lines += [f"parent {parent}" for parent in parents]
    lines += [f"author {author}", f"committer {committer}"]
    return ("\n".join(lines) + "\n\n" + message).encode()


class Repo:
    """Handles to a small history:

    initial <- second <- merge (main)
           \\- side  -/
    """

    def __init__(self, git_dir: Path):
        self.git_dir = git_dir

        self.readme = write_object(git_dir, "blob", b"# readme\n")
        self.main = write_object(git_dir, "blob", b"fun main() {}\n")
        self.src = write_object(
            git_dir, "tree", tree_payload(("100644", "main", self.main))
        )
        self.root = write_object(
            git_dir,
            "tree",
            tree_payload(("100644", "README.md", self.readme), ("40000", "src", self.src)),
        )

        self.initial = write_object(
            git_dir, "commit", commit_payload(self.root, message="initial\n")
        )
        self.second = write_object(
            git_dir, "commit", commit_payload(self.root, [self.initial], "second\n")
        )
        self.side = write_object(
            git_dir, "commit", commit_payload(self.root, [self.initial], "side\n")
        )
        self.merge = write_object(
            git_dir,
            "commit",
            commit_payload(self.root, [self.second, self.side], "merge side\n"),
        )

        heads = git_dir / "refs" / "heads"
        heads.mkdir(parents=True)
        (heads / "main").write_text(self.merge + "\n")
        (heads / "dev").write_text(self.second + "\n")
        (git_dir / "HEAD").write_text("ref: refs/heads/main\n")


@pytest.fixture
def git_dir(tmp_path) -> Path:
    path = tmp_path / ".git"
    (path / "objects").mkdir(parents=True)
    return path


@pytest.fixture
def repo(git_dir) -> Repo:
    return Repo(git_dir)
