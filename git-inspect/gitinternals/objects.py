import abc
import hashlib
import re
import zlib
from datetime import datetime, timedelta, timezone
from enum import Enum
from logging import debug

from .errors import (
    CorruptObjectError,
    MalformedCommitError,
    MalformedPersonError,
    MalformedTreeError,
    UnknownKindError,
)

# Commit and tree text is decoded with surrogateescape so that undecodable
# bytes survive re-serialization untouched
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"

HASH_LENGTH = 20


class ObjectKind(Enum):
    COMMIT = b"commit"
    TREE = b"tree"
    BLOB = b"blob"

    @classmethod
    def from_token(cls, token: bytes) -> "ObjectKind":
        try:
            return cls(token.lower())
        except ValueError:
            raise UnknownKindError(
                f"Unknown object kind: {token.decode(errors='replace')}"
            ) from None


class RawObject:
    """A loose object split into header and payload, not decoded any further.

    ``size`` is the size declared in the header. It is advisory and never
    checked against ``len(contents)``.
    """

    def __init__(
        self, kind: ObjectKind, size: int, contents: bytes, hash: str | None = None
    ):
        self.kind = kind
        self.size = size
        self.contents = contents
        self.hash = hash

    def __repr__(self) -> str:
        short = self.hash[0:6] if self.hash else "?"
        return f"<Raw Obj {self.kind.name.lower()} {short} size={self.size}>"

    def raw_contents(self) -> bytes:
        """Get raw contents, including header, as stored."""
        return self.kind.value + b" " + str(self.size).encode() + b"\0" + self.contents

    def calc_hash(self) -> str:
        return get_hash(self.raw_contents())

    def decode(self) -> "GitObject":
        return parse_object(self)

    @classmethod
    def from_bytes(cls, contents: bytes, hash: str | None = None, compressed=False):
        if compressed:
            contents = decompress_object(contents)

        if b"\0" not in contents:
            raise CorruptObjectError(f"Object {hash} has no header separator")
        header, payload = contents.split(b"\0", 1)

        parts = header.split(b" ")
        if len(parts) != 2:
            raise CorruptObjectError(f"Invalid object header: {header!r}")
        kind = ObjectKind.from_token(parts[0])
        try:
            size = int(parts[1])
        except ValueError:
            raise CorruptObjectError(f"Invalid object size: {parts[1]!r}") from None

        if size != len(payload):
            debug(
                "Object %s declares size %d but has %d bytes", hash, size, len(payload)
            )

        return cls(kind, size, payload, hash)


class GitObject(abc.ABC):
    kind: ObjectKind

    def __init__(self, hash: str | None):
        self.hash = hash

    # Payload without header. MUST be redefined in subclasses
    @abc.abstractmethod
    def raw_payload(self) -> bytes:
        raise NotImplementedError()

    def raw_contents(self) -> bytes:
        """Get raw contents, including a header computed from the payload."""
        payload = self.raw_payload()
        return self.kind.value + b" " + str(len(payload)).encode() + b"\0" + payload

    def calc_hash(self) -> str:
        return get_hash(self.raw_contents())


class BlobObject(GitObject):
    kind = ObjectKind.BLOB

    def __init__(self, contents: bytes, hash: str | None = None):
        super().__init__(hash)
        self.contents = contents

    def __repr__(self) -> str:
        return f"<Blob Obj {(self.hash or '?')[0:6]} len={len(self.contents)}>"

    @property
    def text(self) -> str:
        return self.contents.decode(TEXT_ENCODING, errors="replace")

    @classmethod
    def from_payload(cls, payload: bytes, hash: str | None = None):
        return cls(payload, hash)

    def raw_payload(self) -> bytes:
        return self.contents


class Person:
    # "Smith <mr.smith@matrix> 1585491500 +0300", read from the right so that
    # names with spaces survive
    PATTERN = re.compile(
        r"^(?P<name>.*?) ?<(?P<email>[^<>]*)> (?P<timestamp>-?\d+) (?P<offset>[+-]\d{4})$"
    )

    def __init__(self, name: str, email: str, role: str, timestamp: int, offset: str):
        self.name = name
        self.email = email
        self.role = role
        self.timestamp = timestamp
        self.offset = offset

    def __repr__(self) -> str:
        return f"<Person {self.name} <{self.email}> {self.role} {self.timestamp} {self.offset}>"

    def __str__(self) -> str:
        return f"{self.name} {self.email} {self.role} timestamp: {self.formatted_date}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Person):
            return NotImplemented
        return vars(self) == vars(other)

    @property
    def tzinfo(self) -> timezone:
        sign = -1 if self.offset[0] == "-" else 1
        delta = timedelta(hours=int(self.offset[1:3]), minutes=int(self.offset[3:5]))
        return timezone(sign * delta)

    @property
    def date(self) -> datetime:
        """Timestamp as an aware datetime in the person's own offset."""
        return datetime.fromtimestamp(self.timestamp, tz=self.tzinfo)

    @property
    def formatted_date(self) -> str:
        return f"{self.date:%Y-%m-%d %H:%M:%S} {self.offset[0:3]}:{self.offset[3:5]}"

    @classmethod
    def from_string(cls, raw: str, role: str):
        match = cls.PATTERN.match(raw)
        if match is None:
            raise MalformedPersonError(f"Invalid person line: {raw!r}")

        person = cls(
            match["name"],
            match["email"],
            role,
            int(match["timestamp"]),
            match["offset"],
        )
        if int(person.offset[3:5]) >= 60:
            raise MalformedPersonError(f"Invalid timezone offset: {person.offset}")
        try:
            person.tzinfo
        except ValueError:
            raise MalformedPersonError(f"Invalid timezone offset: {person.offset}") from None
        try:
            person.date
        except (ValueError, OverflowError, OSError) as e:
            raise MalformedPersonError(f"Invalid timestamp: {person.timestamp}") from e
        return person


class CommitObject(GitObject):
    kind = ObjectKind.COMMIT

    AUTHOR_ROLE = "original"
    COMMITTER_ROLE = "commit"

    # headers is a list of (key, value) tuples in encounter order. Multi-line
    # values (gpgsig, mergetag) have their continuation lines joined with "\n"
    def __init__(
        self,
        headers: list[tuple[str, str]],
        message: str,
        hash: str | None = None,
    ):
        super().__init__(hash)
        self.headers = headers
        self.message = message

        self.tree = self._single("tree")
        self.parents = self.get_all("parent")
        self.author = Person.from_string(self._single("author"), self.AUTHOR_ROLE)
        self.committer = Person.from_string(
            self._single("committer"), self.COMMITTER_ROLE
        )

    def __repr__(self) -> str:
        return (
            f"<Commit Obj {(self.hash or '?')[0:6]} tree={self.tree} "
            f"parents={self.parents} author={self.author.name}>"
        )

    def get_all(self, key: str) -> list[str]:
        return [value for k, value in self.headers if k == key]

    def _single(self, key: str) -> str:
        values = self.get_all(key)
        if not values:
            raise MalformedCommitError(f"Commit {self.hash} has no {key}")
        if len(values) > 1:
            raise MalformedCommitError(f"Commit {self.hash} has multiple {key} headers")
        return values[0]

    @classmethod
    def from_payload(cls, payload: bytes, hash: str | None = None):
        text = payload.decode(TEXT_ENCODING, TEXT_ERRORS)

        header_block, sep, message = text.partition("\n\n")
        if not sep:
            raise MalformedCommitError(f"Commit {hash} has no message separator")

        headers = []
        for line in header_block.split("\n"):
            if line.startswith(" "):
                if not headers:
                    raise MalformedCommitError(f"Commit {hash} starts with a continuation")
                key, value = headers[-1]
                headers[-1] = (key, value + "\n" + line[1:])
                continue
            key, _, value = line.partition(" ")
            headers.append((key, value))

        return cls(headers, message, hash)

    def raw_payload(self) -> bytes:
        export = ""
        for key, value in self.headers:
            export += key + " " + value.replace("\n", "\n ") + "\n"
        export += "\n" + self.message
        return export.encode(TEXT_ENCODING, TEXT_ERRORS)


class TreeEntry:
    def __init__(self, mode: str, name: str, hash: str):
        self.mode = mode
        self.name = name
        self.hash = hash

    def __repr__(self) -> str:
        return f"<TreeEntry mode={self.mode} name={self.name} hash={self.hash}>"

    def __str__(self) -> str:
        return f"{self.mode} {self.hash} {self.name}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeEntry):
            return NotImplemented
        return (self.mode, self.name, self.hash) == (other.mode, other.name, other.hash)


class TreeObject(GitObject):
    kind = ObjectKind.TREE

    def __init__(self, entries: list[TreeEntry], hash: str | None = None):
        super().__init__(hash)
        self.entries = entries

    def __repr__(self) -> str:
        names = ", ".join(entry.name for entry in self.entries)
        return f"<Tree Obj {(self.hash or '?')[0:6]} [{names}]>"

    @classmethod
    def from_payload(cls, payload: bytes, hash: str | None = None):
        entries = []
        idx = 0

        # the id is raw binary and may contain spaces or NULs, so walk by index
        while idx < len(payload):
            nul = payload.find(b"\0", idx)
            if nul == -1:
                raise MalformedTreeError(f"Tree {hash}: entry at {idx} has no separator")

            mode, sep, name = payload[idx:nul].partition(b" ")
            if not sep:
                raise MalformedTreeError(f"Tree {hash}: entry at {idx} has no mode")

            file_hash = payload[nul + 1 : nul + 1 + HASH_LENGTH]
            if len(file_hash) < HASH_LENGTH:
                raise MalformedTreeError(f"Tree {hash}: truncated id at {nul + 1}")

            entries.append(
                TreeEntry(
                    mode.decode(TEXT_ENCODING, TEXT_ERRORS),
                    name.decode(TEXT_ENCODING, TEXT_ERRORS),
                    file_hash.hex(),
                )
            )
            idx = nul + 1 + HASH_LENGTH

        return cls(entries, hash)

    def raw_payload(self) -> bytes:
        export = b""
        for entry in self.entries:
            export += (
                entry.mode.encode(TEXT_ENCODING, TEXT_ERRORS)
                + b" "
                + entry.name.encode(TEXT_ENCODING, TEXT_ERRORS)
                + b"\0"
                + bytes.fromhex(entry.hash)
            )
        return export


def parse_object(raw: RawObject) -> GitObject:
    """Decode a raw object's payload according to its kind."""
    match raw.kind:
        case ObjectKind.COMMIT:
            obj_type = CommitObject
        case ObjectKind.TREE:
            obj_type = TreeObject
        case ObjectKind.BLOB:
            obj_type = BlobObject

    return obj_type.from_payload(raw.contents, raw.hash)


def decompress_object(object: bytes) -> bytes:
    try:
        return zlib.decompress(object)
    except zlib.error as e:
        raise CorruptObjectError(f"Could not decompress object: {e}") from e


def get_hash(object: bytes) -> str:
    sha1 = hashlib.sha1()
    sha1.update(object)
    return sha1.hexdigest().lower()
