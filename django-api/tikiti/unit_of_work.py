"""Transaction boundaries shared by the services.

Services group several store mutations into one logical unit and defer side
effects until that unit is durable. The Django implementation maps onto
`transaction.atomic` and `transaction.on_commit`; the in-memory one gives the
in-memory stores the same all-or-nothing behaviour.
"""

import threading
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager, contextmanager
from typing import Callable, Iterator, Protocol

from django.db import transaction


class UnitOfWork(ABC):
    """Interface for grouping store mutations."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Return a context manager wrapping one all-or-nothing unit."""
        ...

    @abstractmethod
    def on_commit(self, callback: Callable[[], None]) -> None:
        """Run callback once the enclosing unit has committed."""
        ...


class DjangoUnitOfWork(UnitOfWork):
    def atomic(self) -> AbstractContextManager:
        return transaction.atomic()

    def on_commit(self, callback: Callable[[], None]) -> None:
        transaction.on_commit(callback)


class Snapshottable(Protocol):
    def snapshot(self) -> object: ...

    def restore(self, state: object) -> None: ...


class InMemoryUnitOfWork(UnitOfWork):
    """Serialized units over in-memory stores.

    The outermost unit snapshots every registered store and restores the
    snapshots if the block raises. Commit callbacks run after the outermost
    unit exits cleanly and are dropped on rollback. Store calls made outside
    any unit are not serialized against it.
    """

    def __init__(self, *stores: Snapshottable) -> None:
        self._stores = stores
        self._lock = threading.RLock()
        self._depth = 0
        self._callbacks: list[Callable[[], None]] = []

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            snapshots = [store.snapshot() for store in self._stores]
            self._depth = 1
            try:
                yield
            except BaseException:
                for store, state in zip(self._stores, snapshots):
                    store.restore(state)
                self._callbacks.clear()
                raise
            finally:
                self._depth = 0
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            callback()

    def on_commit(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._depth:
                self._callbacks.append(callback)
                return
        callback()
