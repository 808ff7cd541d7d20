# salonbook/deps.py

from typing import Iterator, Optional

from salonbook.config import settings
from salonbook.db import new_session
from salonbook.store import MemoryStore, SqlStore, Store

_memory_store: Optional[MemoryStore] = None


def get_memory_store() -> MemoryStore:
    global _memory_store
    if _memory_store is None:
        _memory_store = MemoryStore()
    return _memory_store


# Dependency: one store per request (one session for the sql backend)
def get_store() -> Iterator[Store]:
    if settings.store_backend == "memory":
        yield get_memory_store()
        return
    with new_session() as session:
        yield SqlStore(session)
