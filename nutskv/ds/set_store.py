"""Sets of byte strings stored under string keys."""

from __future__ import annotations

from collections.abc import Iterable

from nutskv.errors import NutsError


class SetError(NutsError):
    """Base class for set errors."""

    default_message = "set error"


class SetKeyNotFoundError(SetError, LookupError):
    """The set key was not found."""

    default_message = "key not found"


class SetKeyNotExistError(SetError, LookupError):
    """The set key does not exist."""

    default_message = "key not exist"


class ItemEmptyError(SetError, ValueError):
    """No item, or an empty item, was given."""

    default_message = "item empty"


def _as_bytes(item: bytes | bytearray | memoryview | None) -> bytes:
    return b"" if item is None else bytes(item)


class Set:
    """A collection of named sets of byte strings."""

    def __init__(self) -> None:
        self.m: dict[str, set[bytes]] = {}

    def sadd(self, key: str, *items: bytes | None) -> None:
        """Add the items to the set at ``key``, creating it if needed."""
        members = self.m.setdefault(key, set())
        members.update(_as_bytes(item) for item in items)

    def srem(self, key: str, *items: bytes | None) -> None:
        """Remove the items from the set at ``key``."""
        if key not in self.m:
            raise SetKeyNotFoundError()
        if not items or items[0] is None:
            raise ItemEmptyError()
        members = self.m[key]
        for item in items:
            members.discard(_as_bytes(item))

    def shas_key(self, key: str) -> bool:
        """True if a set exists at ``key``."""
        return key in self.m

    def spop(self, key: str) -> bytes | None:
        """Remove and return an arbitrary member, or None if there is none."""
        members = self.m.get(key)
        if not members:
            return None
        return members.pop()

    def scard(self, key: str) -> int:
        """Number of members of the set at ``key``; 0 if it does not exist."""
        return len(self.m.get(key, ()))

    def _pair(self, key1: str, key2: str) -> tuple[set[bytes], set[bytes]]:
        if key1 not in self.m:
            raise SetKeyNotExistError("set1 is not exists")
        if key2 not in self.m:
            raise SetKeyNotExistError("set2 is not exists")
        return self.m[key1], self.m[key2]

    def sdiff(self, key1: str, key2: str) -> list[bytes]:
        """Members of the first set that are not in the second."""
        first, second = self._pair(key1, key2)
        return [item for item in first if item not in second]

    def sinter(self, key1: str, key2: str) -> list[bytes]:
        """Members present in both sets."""
        first, second = self._pair(key1, key2)
        return [item for item in first if item in second]

    def sunion(self, key1: str, key2: str) -> list[bytes]:
        """Members of either set, those of the first set first."""
        first, second = self._pair(key1, key2)
        return list(first) + [item for item in second if item not in first]

    def sis_member(self, key: str, item: bytes | None) -> bool:
        """True if ``item`` is a member of the set at ``key``."""
        return _as_bytes(item) in self.m.get(key, ())

    def sare_members(self, key: str, *items: bytes | None) -> bool:
        """True if every item is a member of the set at ``key``."""
        if key not in self.m:
            raise SetKeyNotExistError()
        members = self.m[key]
        return all(_as_bytes(item) in members for item in items)

    def smembers(self, key: str) -> list[bytes]:
        """All members of the set at ``key``."""
        if key not in self.m:
            raise SetKeyNotExistError("set not exists")
        return list(self.m[key])

    def smove(self, key1: str, key2: str, item: bytes | None) -> bool:
        """Move ``item`` from the set at ``key1`` to the set at ``key2``."""
        if key1 not in self.m:
            raise SetKeyNotExistError("key1 is not exists")
        if key2 not in self.m:
            raise SetKeyNotExistError("key2 is not exists")
        value = _as_bytes(item)
        self.m[key2].add(value)
        self.m[key1].discard(value)
        return True

    def keys(self) -> Iterable[str]:
        """Keys of all sets."""
        return self.m.keys()