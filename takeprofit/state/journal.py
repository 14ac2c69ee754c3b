"""
All-or-nothing execution across every mutable table.

Each table exposes ``snapshot()`` / ``restore(snap)``. The outermost
``Journal.atomic()`` captures every registered table; if anything raises at
any nesting depth, all tables are put back and the exception propagates.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Protocol, Tuple

logger = logging.getLogger(__name__)


class Snapshottable(Protocol):
    def snapshot(self) -> Any: ...

    def restore(self, snap: Any) -> None: ...


class Journal:
    def __init__(self) -> None:
        self._stores: List[Snapshottable] = []
        self._depth = 0

    def register(self, store: Snapshottable) -> None:
        if self._depth:
            raise RuntimeError("cannot register a store inside an open transaction")
        if any(s is store for s in self._stores):
            return
        self._stores.append(store)

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        snaps: List[Tuple[Snapshottable, Any]] = [(s, s.snapshot()) for s in self._stores]
        self._depth = 1
        try:
            yield
        except Exception as exc:
            for store, snap in reversed(snaps):
                store.restore(snap)
            logger.debug("transaction rolled back: %s", exc)
            raise
        finally:
            self._depth = 0
