from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from validators import DEFAULT_PACK_SIZES, normalize_pack_sizes


class ReadWriteLock:
    """Many concurrent readers or a single exclusive writer.

    Waiting writers block new readers so a steady stream of reads cannot
    starve an update.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class PackSizeRegistry:
    """Holds the configured pack sizes and is safe for concurrent use.

    Sizes are stored normalized (distinct, largest first). Readers always get
    their own copy, so an update never changes sizes a caller already holds.
    """

    def __init__(self, initial_pack_sizes: Iterable[Any] = DEFAULT_PACK_SIZES) -> None:
        self._lock = ReadWriteLock()
        self._pack_sizes: tuple[int, ...] = tuple(normalize_pack_sizes(initial_pack_sizes))

    def get_pack_sizes(self) -> list[int]:
        with self._lock.read():
            return list(self._pack_sizes)

    def set_pack_sizes(self, pack_sizes: Iterable[Any]) -> list[int]:
        """Validate and replace the configured pack sizes.

        Invalid input raises ``InvalidPackSizes`` and leaves the registry
        unchanged.
        """
        normalized = tuple(normalize_pack_sizes(pack_sizes))
        with self._lock.write():
            self._pack_sizes = normalized
        return list(normalized)
