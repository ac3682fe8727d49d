import abc
import re
from logging import debug
from pathlib import Path

from .errors import CorruptObjectError, NotFoundError
from .objects import GitObject, RawObject, decompress_object

OBJECT_ID = re.compile(r"^[a-f0-9]{40}$")


def normalize_id(object_id: str) -> str:
    """Lowercase an object id and reject anything that cannot name a loose object."""
    object_id = object_id.strip().lower()
    if not OBJECT_ID.match(object_id):
        raise NotFoundError(f"Not a valid object id: {object_id!r}")
    return object_id


class ObjectStore(abc.ABC):
    """Read-only access to loose objects and branch refs.

    Subclasses only provide the byte-level reads; header splitting, decoding
    and the optional object cache live here so that every backend behaves the
    same once the bytes are in hand.
    """

    def __init__(self, cache: bool = False):
        self._cache: dict[str, RawObject] | None = {} if cache else None

    @abc.abstractmethod
    def read_compressed(self, object_id: str) -> bytes:
        """Compressed bytes of a loose object. Raises NotFoundError."""
        raise NotImplementedError()

    @abc.abstractmethod
    def read_head(self) -> str:
        """Contents of the HEAD pointer, first line, stripped."""
        raise NotImplementedError()

    @abc.abstractmethod
    def read_ref(self, name: str) -> str:
        """Commit id stored in refs/heads/<name>. Raises NotFoundError."""
        raise NotImplementedError()

    @abc.abstractmethod
    def branch_names(self) -> list[str]:
        raise NotImplementedError()

    def read_raw(self, object_id: str) -> bytes:
        """Decompressed object, header included."""
        object_id = normalize_id(object_id)
        return decompress_object(self.read_compressed(object_id))

    def load(self, object_id: str) -> RawObject:
        object_id = normalize_id(object_id)

        if self._cache is not None and object_id in self._cache:
            debug(f"Using cached object {object_id}")
            return self._cache[object_id]

        debug(f"Loading object {object_id}")
        raw = RawObject.from_bytes(self.read_raw(object_id), object_id)

        if self._cache is not None:
            self._cache[object_id] = raw
        return raw

    def get_object(self, object_id: str) -> GitObject:
        return self.load(object_id).decode()


class LooseObjectStore(ObjectStore):
    """A ``.git`` directory on the local filesystem."""

    def __init__(self, root: str | Path, cache: bool = False):
        super().__init__(cache=cache)
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"<LooseObjectStore {self.root}>"

    def object_path(self, object_id: str) -> Path:
        return self.root / "objects" / object_id[0:2] / object_id[2:]

    def read_compressed(self, object_id: str) -> bytes:
        path = self.object_path(object_id)
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            raise NotFoundError(f"Object {object_id} not found at {path}") from None
        except OSError as e:
            raise CorruptObjectError(f"Could not read object {object_id}: {e}") from e

    def _read_line(self, path: Path) -> str:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.readline().strip()
        except (FileNotFoundError, IsADirectoryError):
            raise NotFoundError(f"{path} not found") from None
        except (OSError, UnicodeDecodeError) as e:
            raise CorruptObjectError(f"Could not read {path}: {e}") from e

    def read_head(self) -> str:
        return self._read_line(self.root / "HEAD")

    def read_ref(self, name: str) -> str:
        heads = self.root / "refs" / "heads"
        path = heads / name
        # branch names come from user input, keep them inside refs/heads
        if heads.resolve() not in path.resolve().parents:
            raise NotFoundError(f"Not a branch name: {name!r}")
        return self._read_line(path)

    def branch_names(self) -> list[str]:
        heads = self.root / "refs" / "heads"
        if not heads.is_dir():
            return []
        return [path.name for path in heads.iterdir() if path.is_file()]
