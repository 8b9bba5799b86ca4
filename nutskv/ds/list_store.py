"""Lists of byte strings stored under string keys, with optional expiry."""

from __future__ import annotations

import time
from collections.abc import Iterable

from nutskv.errors import NutsError

MIN_INT = -(1 << 63)
MAX_INT = (1 << 63) - 1


class ListError(NutsError):
    """Base class for list errors."""

    default_message = "list error"


class ListNotFoundError(ListError, LookupError):
    """The list was not found, has expired, or has no items to return."""

    default_message = "the list not found"


class IndexOutOfRangeError(ListError, IndexError):
    """An index lies outside the list."""

    default_message = "index out of range"


class CountError(ListError, ValueError):
    """The count is larger than the list."""

    default_message = "err count"


class MinIntError(ListError, ValueError):
    """The count is the smallest 64-bit integer and cannot be negated."""

    default_message = "err MinInt"


def _as_bytes(value: bytes | bytearray | memoryview | None) -> bytes:
    return b"" if value is None else bytes(value)


def _valid_indexes(indexes: Iterable[int], length: int) -> list[int]:
    """Indexes that can be removed: non-negative, in range, no repeats in a row."""
    selected: list[int] = []
    previous = -1
    for index in indexes:
        if index < 0 or index == previous:
            continue
        if index >= length:
            break
        selected.append(index)
        previous = index
    return selected


class List:
    """A collection of named lists of byte strings.

    ``ttl`` and ``timestamp`` hold, per key, a lifetime in seconds and the
    Unix time it counts from. A key with a lifetime of 0 never expires.
    Expired keys are dropped the next time they are looked at.
    """

    def __init__(self) -> None:
        self.items: dict[str, list[bytes]] = {}
        self.ttl: dict[str, int] = {}
        self.timestamp: dict[str, int] = {}

    def _require(self, key: str) -> list[bytes]:
        if self.is_expire(key) or key not in self.items:
            raise ListNotFoundError()
        return self.items[key]

    def rpop(self, key: str) -> bytes:
        """Remove and return the last element of the list at ``key``."""
        item = self.rpeek(key)
        self.items[key] = self.items[key][:-1]
        return item

    def rpeek(self, key: str) -> bytes:
        """Return the last element of the list at ``key``."""
        items = self._require(key)
        if not items:
            raise ListNotFoundError()
        return items[-1]

    def rpush(self, key: str, *values: bytes | None) -> int:
        """Append the values to the list at ``key``; return the new size."""
        if self.is_expire(key):
            raise ListNotFoundError()
        items = self.items.setdefault(key, [])
        items.extend(_as_bytes(v) for v in values)
        return len(items)

    def lpush(self, key: str, *values: bytes | None) -> int:
        """Insert the values at the head, each in front of the one before it."""
        if self.is_expire(key):
            raise ListNotFoundError()
        head = [_as_bytes(v) for v in reversed(values)]
        self.items[key] = head + self.items.get(key, [])
        return len(self.items[key])

    def lpop(self, key: str) -> bytes:
        """Remove and return the first element of the list at ``key``."""
        item = self.lpeek(key)
        self.items[key] = self.items[key][1:]
        return item

    def lpeek(self, key: str) -> bytes:
        """Return the first element of the list at ``key``."""
        items = self._require(key)
        if not items:
            raise ListNotFoundError()
        return items[0]

    def size(self, key: str) -> int:
        """Number of elements in the list at ``key``."""
        return len(self._require(key))

    def lrange(self, key: str, start: int, end: int) -> list[bytes]:
        """Elements from ``start`` to ``end`` inclusive; negatives count from the end."""
        size = self.size(key)
        if size == 0:
            return []
        if start >= 0 and end < 0:
            end = size + end
        if start < 0 and end > 0:
            start = size + start
        if start < 0 and end < 0:
            start, end = size + start, size + end
        if end >= size:
            end = size - 1
        if start > end or start < 0:
            raise ListError("start or end error")
        return self.items[key][start : end + 1]

    def lrem(self, key: str, count: int, value: bytes | None) -> int:
        """Remove occurrences of ``value``; return how many were removed.

        A positive count removes from head to tail, a negative one from tail
        to head, and 0 removes every occurrence.
        """
        items = self._require(key)
        target = _as_bytes(value)
        needed = self.lrem_num(key, count, target)
        if needed == 0:
            return 0
        limit = needed if count == 0 else abs(count)
        order = reversed(items) if count < 0 else items
        kept: list[bytes] = []
        removed = 0
        for item in order:
            if removed < limit and item == target:
                removed += 1
            else:
                kept.append(item)
        if count < 0:
            kept.reverse()
        self.items[key] = kept
        return removed

    def lrem_num(self, key: str, count: int, value: bytes | None) -> int:
        """How many occurrences of ``value`` a call to ``lrem`` would remove."""
        items = self._require(key)
        if count > len(items):
            raise CountError()
        if count < 0:
            if count == MIN_INT:
                raise MinIntError()
            count = -count
        target = _as_bytes(value)
        removed = 0
        for item in items:
            if count > 0 and removed == count:
                break
            if item == target:
                removed += 1
        return removed

    def lset(self, key: str, index: int, value: bytes | None) -> None:
        """Replace the element at ``index``."""
        items = self._require(key)
        if index >= len(items) or index < 0:
            raise IndexOutOfRangeError()
        items[index] = _as_bytes(value)

    def ltrim(self, key: str, start: int, end: int) -> None:
        """Keep only the elements from ``start`` to ``end`` inclusive."""
        self._require(key)
        self.items[key] = list(self.lrange(key, start, end))

    def lrem_by_index(self, key: str, indexes: Iterable[int]) -> int:
        """Remove the elements at the given ascending indexes; return the count."""
        items = self._require(key)
        indexes = list(indexes)
        if not indexes or not items:
            return 0
        drop = set(_valid_indexes(indexes, len(items)))
        if not drop:
            return 0
        self.items[key] = [item for i, item in enumerate(items) if i not in drop]
        return len(drop)

    def lrem_by_index_pre_check(self, key: str, indexes: Iterable[int]) -> int:
        """How many elements ``lrem_by_index`` would remove for these indexes."""
        items = self._require(key)
        indexes = list(indexes)
        if not indexes or not items:
            return 0
        return len(_valid_indexes(indexes, len(items)))

    def is_expire(self, key: str) -> bool:
        """True if the list at ``key`` has expired; it is then dropped."""
        if key not in self.ttl:
            return False
        ttl = self.ttl[key]
        if ttl == 0 or ttl + self.timestamp.get(key, 0) > int(time.time()):
            return False
        self.items.pop(key, None)
        self.ttl.pop(key, None)
        self.timestamp.pop(key, None)
        return True

    def is_empty(self, key: str) -> bool:
        """True if the list at ``key`` exists and holds no elements."""
        return self.size(key) == 0

    def get_list_ttl(self, key: str) -> int:
        """Seconds left before the list at ``key`` expires; 0 if it never does."""
        if self.is_expire(key):
            raise ListNotFoundError()
        ttl = self.ttl.get(key, 0)
        stamp = self.timestamp.get(key, 0)
        if ttl == 0 or stamp == 0:
            return 0
        return (stamp + ttl - int(time.time())) & 0xFFFFFFFF