"""A sorted set of keyed values ordered by score, backed by a skip list."""

from __future__ import annotations

import random
from dataclasses import dataclass

SKIP_LIST_MAX_LEVEL = 32
SKIP_LIST_P = 0.25

_MAX_LIMIT = (1 << 31) - 1


class _Level:
    __slots__ = ("forward", "span")

    def __init__(self) -> None:
        self.forward: SortedSetNode | None = None
        self.span = 0


class SortedSetNode:
    """An element of a sorted set: a unique key, its score and its value."""

    __slots__ = ("key", "value", "score", "backward", "level")

    def __init__(self, level: int, score: float, key: str, value: bytes | None) -> None:
        self.key = key
        self.value = value
        self.score = float(score)
        self.backward: SortedSetNode | None = None
        self.level = [_Level() for _ in range(level)]

    def __repr__(self) -> str:
        return f"SortedSetNode(key={self.key!r}, score={self.score!r}, value={self.value!r})"


@dataclass
class GetByScoreRangeOptions:
    """Options for a score range query.

    ``limit`` caps the number of nodes returned (0 means no cap);
    ``exclude_start`` and ``exclude_end`` make the bounds open.
    """

    limit: int = 0
    exclude_start: bool = False
    exclude_end: bool = False


def random_level() -> int:
    """A random level between 1 and the maximum, higher levels being rarer."""
    level = 1
    while random.getrandbits(16) < SKIP_LIST_P * 0xFFFF:
        level += 1
    return min(level, SKIP_LIST_MAX_LEVEL)


def _before(node: SortedSetNode, score: float, key: str) -> bool:
    return node.score < score or (node.score == score and node.key < key)


class SortedSet:
    """Keys ordered by score, then by key, with rank and score range queries."""

    def __init__(self) -> None:
        self.header = SortedSetNode(SKIP_LIST_MAX_LEVEL, 0.0, "", None)
        self.tail: SortedSetNode | None = None
        self.length = 0
        self.level = 1
        self.dict: dict[str, SortedSetNode] = {}

    def __len__(self) -> int:
        return self.length

    def __contains__(self, key: object) -> bool:
        return key in self.dict

    def size(self) -> int:
        """Number of elements in the set."""
        return self.length

    def _insert_node(self, score: float, key: str, value: bytes | None) -> SortedSetNode:
        update: list[SortedSetNode] = [self.header] * SKIP_LIST_MAX_LEVEL
        rank = [0] * SKIP_LIST_MAX_LEVEL

        x = self.header
        for i in range(self.level - 1, -1, -1):
            rank[i] = 0 if i == self.level - 1 else rank[i + 1]
            while (f := x.level[i].forward) is not None and _before(f, score, key):
                rank[i] += x.level[i].span
                x = f
            update[i] = x

        level = random_level()
        if level > self.level:
            for i in range(self.level, level):
                rank[i] = 0
                update[i] = self.header
                self.header.level[i].span = self.length
            self.level = level

        x = SortedSetNode(level, score, key, value)
        for i in range(level):
            x.level[i].forward = update[i].level[i].forward
            update[i].level[i].forward = x
            x.level[i].span = update[i].level[i].span - (rank[0] - rank[i])
            update[i].level[i].span = (rank[0] - rank[i]) + 1

        for i in range(level, self.level):
            update[i].level[i].span += 1

        x.backward = None if update[0] is self.header else update[0]
        if x.level[0].forward is not None:
            x.level[0].forward.backward = x
        else:
            self.tail = x

        self.length += 1
        return x

    def _delete_node(self, x: SortedSetNode, update: list[SortedSetNode]) -> None:
        for i in range(self.level):
            if update[i].level[i].forward is x:
                update[i].level[i].span += x.level[i].span - 1
                update[i].level[i].forward = x.level[i].forward
            else:
                update[i].level[i].span -= 1
        if x.level[0].forward is not None:
            x.level[0].forward.backward = x.backward
        else:
            self.tail = x.backward
        while self.level > 1 and self.header.level[self.level - 1].forward is None:
            self.level -= 1
        self.length -= 1
        self.dict.pop(x.key, None)

    def _delete(self, score: float, key: str) -> bool:
        update: list[SortedSetNode] = [self.header] * SKIP_LIST_MAX_LEVEL
        x = self.header
        for i in range(self.level - 1, -1, -1):
            while (f := x.level[i].forward) is not None and _before(f, score, key):
                x = f
            update[i] = x
        target = x.level[0].forward
        if target is not None and target.score == score and target.key == key:
            self._delete_node(target, update)
            return True
        return False

    def peek_min(self) -> SortedSetNode | None:
        """The element with the lowest score, or None if the set is empty."""
        return self.header.level[0].forward

    def pop_min(self) -> SortedSetNode | None:
        """Remove and return the element with the lowest score."""
        x = self.header.level[0].forward
        if x is not None:
            self.remove(x.key)
        return x

    def peek_max(self) -> SortedSetNode | None:
        """The element with the highest score, or None if the set is empty."""
        return self.tail

    def pop_max(self) -> SortedSetNode | None:
        """Remove and return the element with the highest score."""
        x = self.tail
        if x is not None:
            self.remove(x.key)
        return x

    def put(self, key: str, score: float, value: bytes | None) -> None:
        """Insert or update the element at ``key``."""
        score = float(score)
        node = self.dict.get(key)
        if node is not None and node.score == score:
            node.value = value
            return
        if node is not None:
            self._delete(node.score, node.key)
        self.dict[key] = self._insert_node(score, key, value)

    def remove(self, key: str) -> SortedSetNode | None:
        """Remove and return the element at ``key``, or None if absent."""
        found = self.dict.get(key)
        if found is not None:
            self._delete(found.score, found.key)
        return found

    def get_by_score_range(
        self,
        start: float,
        end: float,
        options: GetByScoreRangeOptions | None = None,
    ) -> list[SortedSetNode]:
        """Elements with scores between ``start`` and ``end``.

        When ``start`` is greater than ``end`` the elements come from the
        highest score down.
        """
        limit = _MAX_LIMIT
        if options is not None and options.limit > 0:
            limit = options.limit
        exclude_start = options is not None and options.exclude_start
        exclude_end = options is not None and options.exclude_end
        start, end = float(start), float(end)
        reverse = start > end
        if reverse:
            start, end = end, start
            exclude_start, exclude_end = exclude_end, exclude_start

        if self.length == 0:
            return []
        if reverse:
            return self._search_reverse(exclude_start, exclude_end, start, end, limit)
        return self._search_forward(exclude_start, exclude_end, start, end, limit)

    def _search_forward(
        self, exclude_start: bool, exclude_end: bool, start: float, end: float, limit: int
    ) -> list[SortedSetNode]:
        x = self.header
        for i in range(self.level - 1, -1, -1):
            while (f := x.level[i].forward) is not None and (
                f.score <= start if exclude_start else f.score < start
            ):
                x = f

        nodes: list[SortedSetNode] = []
        node = x.level[0].forward
        while node is not None and limit > 0:
            if (node.score >= end) if exclude_end else (node.score > end):
                break
            nodes.append(node)
            limit -= 1
            node = node.level[0].forward
        return nodes

    def _search_reverse(
        self, exclude_start: bool, exclude_end: bool, start: float, end: float, limit: int
    ) -> list[SortedSetNode]:
        x = self.header
        for i in range(self.level - 1, -1, -1):
            while (f := x.level[i].forward) is not None and (
                f.score < end if exclude_end else f.score <= end
            ):
                x = f

        nodes: list[SortedSetNode] = []
        node: SortedSetNode | None = None if x is self.header else x
        while node is not None and limit > 0:
            if (node.score <= start) if exclude_start else (node.score < start):
                break
            nodes.append(node)
            limit -= 1
            node = node.backward
        return nodes

    def _sanitize_indexes(self, start: int, end: int) -> tuple[int, int]:
        if start < 0:
            start = self.length + start + 1
        if end < 0:
            end = self.length + end + 1
        return max(start, 1), max(end, 1)

    def get_by_rank_range(self, start: int, end: int, remove: bool = False) -> list[SortedSetNode]:
        """Elements with 1-based ranks from ``start`` to ``end`` inclusive.

        Negative ranks count from the end (-1 is the last element). If
        ``start`` is greater than ``end`` the result is in reverse order.
        With ``remove`` the returned elements are removed from the set.
        """
        start, end = self._sanitize_indexes(start, end)
        reverse = start > end
        if reverse:
            start, end = end, start

        update: list[SortedSetNode] = [self.header] * SKIP_LIST_MAX_LEVEL
        traversed = 0
        x = self.header
        for i in range(self.level - 1, -1, -1):
            while (f := x.level[i].forward) is not None and traversed + x.level[i].span < start:
                traversed += x.level[i].span
                x = f
            if remove:
                update[i] = x
            elif traversed + 1 == start:
                break

        nodes: list[SortedSetNode] = []
        traversed += 1
        node = x.level[0].forward
        while node is not None and traversed <= end:
            following = node.level[0].forward
            nodes.append(node)
            if remove:
                self._delete_node(node, update)
            traversed += 1
            node = following

        if reverse:
            nodes.reverse()
        return nodes

    def get_by_rank(self, rank: int, remove: bool = False) -> SortedSetNode | None:
        """The element at the 1-based ``rank``, or None if there is none."""
        nodes = self.get_by_rank_range(rank, rank, remove)
        return nodes[0] if len(nodes) == 1 else None

    def get_by_key(self, key: str) -> SortedSetNode | None:
        """The element at ``key``, or None if absent."""
        return self.dict.get(key)

    def find_rank(self, key: str) -> int:
        """The 1-based rank of ``key`` from lowest score up; 0 if absent."""
        node = self.dict.get(key)
        if node is None:
            return 0
        rank = 0
        x = self.header
        for i in range(self.level - 1, -1, -1):
            while (f := x.level[i].forward) is not None and (
                f.score < node.score or (f.score == node.score and f.key <= node.key)
            ):
                rank += x.level[i].span
                x = f
            if x is node:
                return rank
        return 0

    def find_rev_rank(self, key: str) -> int:
        """The 1-based rank of ``key`` from highest score down; 0 if absent."""
        if self.length == 0 or key not in self.dict:
            return 0
        return self.length - self.find_rank(key) + 1