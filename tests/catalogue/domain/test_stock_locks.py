"""Tests for the per-product stock lock registry."""

import threading

import pytest

from storefront.catalogue.locks import StockLocks


class TestStockLocks:
    def test_hold_yields_sorted_unique_ids(self):
        locks = StockLocks()
        with locks.hold(["b", "a", "b"]) as held:
            assert held == ["a", "b"]

    def test_locks_released_after_hold(self):
        locks = StockLocks()
        with locks.hold(["a"]):
            assert locks.is_held("a")
        assert not locks.is_held("a")

    def test_locks_released_on_error(self):
        locks = StockLocks()
        with pytest.raises(RuntimeError):
            with locks.hold(["a", "b"]):
                raise RuntimeError("boom")
        assert not locks.is_held("a")
        assert not locks.is_held("b")

    def test_idle_locks_are_dropped(self):
        locks = StockLocks()
        with locks.hold(["a", "b"]):
            assert len(locks) == 2
        with locks.hold(["c"]):
            assert len(locks) == 1
        assert len(locks) == 0

    def test_many_products_leave_no_locks_behind(self):
        locks = StockLocks()
        for index in range(1000):
            with locks.hold([f"product-{index}"]):
                pass
        assert len(locks) == 0

    def test_lock_kept_while_another_checkout_waits(self):
        locks = StockLocks()
        waiting = threading.Event()
        acquired = threading.Event()

        def worker():
            waiting.set()
            with locks.hold(["a"]):
                acquired.set()

        with locks.hold(["a"]):
            thread = threading.Thread(target=worker)
            thread.start()
            assert waiting.wait(timeout=2)
            assert not acquired.wait(timeout=0.1)

        thread.join(timeout=2)
        assert acquired.is_set()
        assert len(locks) == 0

    def test_other_products_are_not_blocked(self):
        locks = StockLocks()
        acquired = threading.Event()

        def worker():
            with locks.hold(["b"]):
                acquired.set()

        with locks.hold(["a"]):
            thread = threading.Thread(target=worker)
            thread.start()
            assert acquired.wait(timeout=2)
            thread.join(timeout=2)

    def test_same_product_waits(self):
        locks = StockLocks()
        acquired = threading.Event()

        def worker():
            with locks.hold(["a"]):
                acquired.set()

        with locks.hold(["a"]):
            thread = threading.Thread(target=worker)
            thread.start()
            assert not acquired.wait(timeout=0.2)

        thread.join(timeout=2)
        assert acquired.is_set()
