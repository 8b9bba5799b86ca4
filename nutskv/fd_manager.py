"""A least-recently-used cache of open data files."""

from __future__ import annotations

import contextlib
import errno
import math
import os
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import BinaryIO

DEFAULT_MAX_FILE_NUMS = 256


def _open_rw(path: str) -> BinaryIO:
    """Open ``path`` for reading and writing, creating it if needed."""
    fd = os.open(path, os.O_CREAT | os.O_RDWR, 0o644)
    try:
        return os.fdopen(fd, "r+b")
    except BaseException:
        os.close(fd)
        raise


@dataclass
class FdInfo:
    """An open file held in the cache and how many users hold it."""

    fd: BinaryIO
    path: str
    using: int = 1


class FdManager:
    """Keeps open files in an LRU cache and closes idle ones when it fills up.

    Files are keyed by their normalised path. Each ``get_fd`` call counts as a
    use of the file; ``reduce_using`` hands it back. Only files with no users
    are closed when the cache is cleaned.
    """

    def __init__(self, max_fd_nums: int = 0, clean_threshold: float = 0.0) -> None:
        self._lock = threading.Lock()
        # Ordered from least recently used to most recently used.
        self._cache: OrderedDict[str, FdInfo] = OrderedDict()
        self.max_fd_nums = DEFAULT_MAX_FILE_NUMS
        self.clean_threshold_nums = math.floor(0.5 * self.max_fd_nums)
        if max_fd_nums > 0:
            self.max_fd_nums = max_fd_nums
        if 0.0 < clean_threshold < 1.0:
            self.clean_threshold_nums = math.floor(clean_threshold * self.max_fd_nums)

    def __enter__(self) -> FdManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_fd(self, path: str | os.PathLike[str]) -> BinaryIO:
        """Return an open file for ``path``, from the cache when possible.

        When the cache is already at its maximum size the file is opened but
        not cached; the caller then owns it and must close it.
        """
        clean = os.path.normpath(os.fspath(path))
        with self._lock:
            info = self._cache.get(clean)
            if info is not None:
                info.using += 1
                self._cache.move_to_end(clean)
                return info.fd

            try:
                fd = _open_rw(clean)
            except OSError as exc:
                if exc.errno != errno.EMFILE:
                    raise
                try:
                    self._clean_useless()
                except OSError as clean_err:
                    raise exc from clean_err
                fd = _open_rw(clean)
                self._add(fd, clean)
                return fd

            if len(self._cache) >= self.clean_threshold_nums:
                with contextlib.suppress(OSError):
                    self._clean_useless()
            if len(self._cache) >= self.max_fd_nums:
                return fd
            self._add(fd, clean)
            return fd

    def reduce_using(self, path: str | os.PathLike[str]) -> None:
        """Hand back one use of the cached file at ``path``."""
        clean = os.path.normpath(os.fspath(path))
        with self._lock:
            info = self._cache.get(clean)
            if info is None:
                raise KeyError(f"file is not in the cache: {clean}")
            info.using -= 1

    def paths(self) -> list[str]:
        """Cached paths, most recently used first."""
        with self._lock:
            return list(reversed(self._cache))

    def using(self, path: str | os.PathLike[str]) -> int:
        """How many users currently hold the cached file at ``path``."""
        clean = os.path.normpath(os.fspath(path))
        with self._lock:
            info = self._cache.get(clean)
            if info is None:
                raise KeyError(f"file is not in the cache: {clean}")
            return info.using

    def close(self) -> None:
        """Close every cached file and empty the cache."""
        with self._lock:
            for path in list(self._cache):
                self._cache[path].fd.close()
                del self._cache[path]

    def close_by_path(self, path: str | os.PathLike[str]) -> None:
        """Close the cached file at ``path`` and drop it; do nothing if absent."""
        clean = os.path.normpath(os.fspath(path))
        with self._lock:
            info = self._cache.pop(clean, None)
            if info is not None:
                info.fd.close()

    def _add(self, fd: BinaryIO, path: str) -> None:
        self._cache[path] = FdInfo(fd=fd, path=path)

    def _clean_useless(self) -> None:
        """Close up to ``clean_threshold_nums`` idle files, least recent first."""
        budget = self.clean_threshold_nums
        for info in list(self._cache.values()):
            if budget <= 0:
                break
            if info.using == 0:
                del self._cache[info.path]
                info.fd.close()
                budget -= 1