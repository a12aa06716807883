# util/locks.py
import asyncio
import weakref


class KeyedLocks:
    """
    One asyncio.Lock per key, created on first use.
    Writers for the same key queue up; different keys never block each other.
    A lock is dropped once no holder or waiter references it.
    """

    def __init__(self) -> None:
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def for_key(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def __len__(self) -> int:
        return len(self._locks)


# Process-wide: services are built per request but must share writer locks.
course_index_locks = KeyedLocks()
