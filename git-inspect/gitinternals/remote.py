from logging import debug

import requests

from .errors import CorruptObjectError, NotFoundError, RemoteError
from .refs import Refs
from .store import ObjectStore

HTTP_TIMEOUT = 30


class DumbHttpStore(ObjectStore):
    """Loose objects and refs served over git's dumb HTTP protocol.

    The server exposes the ``.git`` layout as static files, so
    ``<base_url>/objects/ab/cdef...`` is the same compressed file a local
    store would read from disk.
    """

    def __init__(self, base_url: str, headers: dict | None = None, cache: bool = False):
        super().__init__(cache=cache)
        self.base_url = base_url.rstrip("/")
        self.headers = headers
        self._refs: Refs | None = None

    def __repr__(self) -> str:
        return f"<DumbHttpStore {self.base_url}>"

    def _get(self, path: str) -> bytes:
        url = f"{self.base_url}/{path}"
        debug(f"Fetching {url}")
        try:
            res = requests.get(url, headers=self.headers, timeout=HTTP_TIMEOUT)
        except requests.RequestException as e:
            raise CorruptObjectError(f"Could not fetch {url}") from RemoteError(str(e))

        if res.status_code == 404:
            raise NotFoundError(f"{url} not found")
        if res.status_code != 200:
            raise CorruptObjectError(
                f"Could not fetch {url}"
            ) from RemoteError(f"HTTP {res.status_code}")
        return res.content

    def read_compressed(self, object_id: str) -> bytes:
        return self._get(f"objects/{object_id[0:2]}/{object_id[2:]}")

    def read_head(self) -> str:
        return self._get("HEAD").decode("utf-8").split("\n", 1)[0].strip()

    def refs(self) -> Refs:
        if self._refs is None:
            self._refs = Refs.from_dumb_bytes(self._get("info/refs"))
        return self._refs

    def read_ref(self, name: str) -> str:
        try:
            return self.refs().heads()[name]
        except KeyError:
            raise NotFoundError(f"No branch {name!r} at {self.base_url}") from None

    def branch_names(self) -> list[str]:
        # keep to names that match the last-segment HEAD rule, like the local store
        return [name for name in self.refs().heads() if "/" not in name]
