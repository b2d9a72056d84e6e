"""Per-product locks serializing checkouts inside one process.

A checkout holds the locks of every product in its cart from the stock check
until its order is written; checkouts against different products never wait
on each other. Locks are always taken in sorted id order so two carts naming
the same products in a different order cannot deadlock.

A product's lock exists only while some checkout holds or waits for it.
"""

import threading
from collections.abc import Iterable, Iterator
from contextlib import ExitStack, contextmanager


class _ProductLock:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class StockLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, _ProductLock] = {}

    def _checkout(self, product_id: str) -> threading.Lock:
        with self._guard:
            entry = self._locks.get(product_id)
            if entry is None:
                entry = self._locks[product_id] = _ProductLock()
            entry.users += 1
            return entry.lock

    def _checkin(self, product_id: str) -> None:
        with self._guard:
            entry = self._locks[product_id]
            entry.users -= 1
            if entry.users == 0:
                del self._locks[product_id]

    def is_held(self, product_id) -> bool:
        with self._guard:
            entry = self._locks.get(str(product_id))
            return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, product_ids: Iterable) -> Iterator[list[str]]:
        ordered = sorted({str(pid) for pid in product_ids})
        with ExitStack() as stack:
            for product_id in ordered:
                lock = self._checkout(product_id)
                stack.callback(self._checkin, product_id)
                stack.enter_context(lock)
            yield ordered


stock_locks = StockLocks()
