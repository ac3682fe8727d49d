from .errors import (
    CorruptObjectError,
    GitObjectError,
    MalformedCommitError,
    MalformedPersonError,
    MalformedTreeError,
    NotFoundError,
    RemoteError,
    UnknownKindError,
)
from .objects import (
    BlobObject,
    CommitObject,
    GitObject,
    ObjectKind,
    Person,
    RawObject,
    TreeEntry,
    TreeObject,
    parse_object,
)
from .refs import Branch, head_branch, list_branches, resolve_branch
from .remote import DumbHttpStore
from .render import (
    format_branches,
    format_log,
    format_object,
    format_paths,
)
from .store import LooseObjectStore, ObjectStore
from .traverse import LogEntry, commit_files, traverse_history, walk_tree

__version__ = "0.1.0"
