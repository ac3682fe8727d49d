from logging import debug
from typing import NamedTuple

from .store import ObjectStore

HEADS_PREFIX = "refs/heads/"


class Branch(NamedTuple):
    name: str
    commit: str
    current: bool


class Refs:
    """Ref name -> commit id map, as advertised by a dumb HTTP remote."""

    def __init__(self, refs: dict[str, str] | None = None):
        self.refs = refs if refs is not None else {}

    def __repr__(self):
        return f"<Refs {self.refs}>"

    def heads(self) -> dict[str, str]:
        return {
            ref[len(HEADS_PREFIX) :]: hash
            for ref, hash in self.refs.items()
            if ref.startswith(HEADS_PREFIX)
        }

    @classmethod
    def from_dumb_bytes(cls, init: bytes):
        refs = {}
        for refline in init.decode("utf-8").split("\n"):
            if "\t" in refline:
                hash, ref = refline.split("\t", 1)
                refs[ref.strip()] = hash.strip()
        return cls(refs)


def head_branch(store: ObjectStore) -> str | None:
    """Name of the branch HEAD points at, or None when HEAD is detached."""
    head = store.read_head()
    if not head.startswith("ref:"):
        debug(f"Detached HEAD at {head}")
        return None
    return head[4:].strip().rsplit("/", 1)[-1]


def resolve_branch(store: ObjectStore, name: str) -> str:
    return store.read_ref(name.strip())


def list_branches(store: ObjectStore) -> list[Branch]:
    current = head_branch(store)
    return [
        Branch(name, store.read_ref(name), name == current)
        for name in sorted(store.branch_names())
    ]
