# iberiava/store.py
"""
File-backed collections with one lock per collection file.

Each collection is a JSON file that is read whole, mutated in memory and
rewritten whole. A commit writes a temp file next to the target and then
os.replace()s it, so a reader never sees a half-written collection.

Locks are keyed by the absolute file path and shared by every store in the
process, so two stores on the same data dir still serialize. Other
processes are not excluded.
"""
from __future__ import annotations
import logging
import os
import tempfile
import threading
from contextlib import ExitStack, contextmanager
from typing import Callable, Dict, Iterator, List, Type, TypeVar
from pydantic import BaseModel
from . import codec
from .errors import StoreUnavailable
from .schemas import Flight, User

log = logging.getLogger(__name__)

T = TypeVar("T")

USERS = "users"
FLIGHTS = "flights"
COLLECTIONS: Dict[str, Type[BaseModel]] = {USERS: User, FLIGHTS: Flight}

_locks: Dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: str) -> threading.Lock:
    with _locks_guard:
        return _locks.setdefault(os.path.abspath(path), threading.Lock())


class CollectionStore:
    def __init__(self, data_dir: str, collections: Dict[str, Type[BaseModel]] = COLLECTIONS):
        self.data_dir = data_dir
        self._models = dict(collections)
        self._locks = {name: _lock_for(self.path(name)) for name in self._models}

    def path(self, name: str) -> str:
        self._model(name)
        return os.path.join(self.data_dir, f"{name}.json")

    def _model(self, name: str) -> Type[BaseModel]:
        try:
            return self._models[name]
        except KeyError:
            raise KeyError(f"Unknown collection: {name}") from None

    # --- raw I/O (caller holds the lock) ---

    def _load(self, name: str) -> list:
        path = self.path(name)
        try:
            with open(path, "rb") as f:
                data = f.read()
        except FileNotFoundError:
            return []
        except OSError as e:
            log.error("read failed for %s: %s", path, e)
            raise StoreUnavailable(f"cannot read collection '{name}'") from e
        return codec.decode(data, self._model(name))

    def _commit(self, name: str, records: list) -> None:
        path = self.path(name)
        data = codec.encode(records)
        tmp = None
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=self.data_dir)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
            tmp = None
        except OSError as e:
            log.error("commit failed for %s: %s", path, e)
            raise StoreUnavailable(f"cannot write collection '{name}'") from e
        finally:
            if tmp is not None:
                try:
                    os.unlink(tmp)
                except OSError:
                    log.warning("could not remove temp file %s", tmp)
        log.debug("committed %s (%d records)", name, len(records))

    # --- public API ---

    @contextmanager
    def collection(self, name: str) -> Iterator[list]:
        """One commit cycle: yields the snapshot, commits it if the block exits cleanly."""
        self._model(name)
        with self._locks[name]:
            snapshot = self._load(name)
            yield snapshot
            self._commit(name, snapshot)

    def with_collection(self, name: str, fn: Callable[[list], T]) -> T:
        with self.collection(name) as snapshot:
            return fn(snapshot)

    @contextmanager
    def collections(self, *names: str) -> Iterator[Dict[str, list]]:
        # Fixed (alphabetical) acquisition order, so two multi-collection
        # cycles can never deadlock on each other.
        with ExitStack() as stack:
            snapshots = {n: stack.enter_context(self.collection(n)) for n in sorted(set(names))}
            yield snapshots

    def read(self, name: str) -> List[BaseModel]:
        """Decode the current contents without committing anything back."""
        self._model(name)
        with self._locks[name]:
            return self._load(name)
