"""Tests for the closable queue linking the pipeline stages."""

import threading
import time

from uestats.core.common.utils import ClosableQueue


class TestClosableQueue:
    def test_fifo_order(self) -> None:
        q = ClosableQueue()
        for i in range(5):
            q.push(i)
        assert [q.try_pop() for _ in range(5)] == [0, 1, 2, 3, 4]

    def test_try_pop_empty_returns_none(self) -> None:
        q = ClosableQueue()
        assert q.try_pop() is None
        assert q.is_empty()

    def test_is_empty_and_length(self) -> None:
        q = ClosableQueue()
        q.push("a")
        q.push("b")
        assert not q.is_empty()
        assert q.get_length() == 2

    def test_blocking_pop_drains_before_reporting_end(self) -> None:
        q = ClosableQueue()
        q.push("a")
        q.push("b")
        q.close()
        assert q.blocking_pop() == "a"
        assert q.blocking_pop() == "b"
        assert q.blocking_pop() is None
        assert q.blocking_pop() is None

    def test_close_is_idempotent(self) -> None:
        q = ClosableQueue()
        q.close()
        q.close()
        assert q.blocking_pop() is None

    def test_close_wakes_all_waiting_consumers(self) -> None:
        q = ClosableQueue()
        results = []

        def consume():
            results.append(q.blocking_pop())

        threads = [threading.Thread(target=consume) for _ in range(3)]
        for t in threads:
            t.start()
        time.sleep(0.05)
        q.close()
        for t in threads:
            t.join(timeout=5)
        assert all(not t.is_alive() for t in threads)
        assert results == [None, None, None]

    def test_push_wakes_waiting_consumer(self) -> None:
        q = ClosableQueue()
        results = []
        consumer = threading.Thread(target=lambda: results.append(q.blocking_pop()))
        consumer.start()
        time.sleep(0.05)
        q.push("line")
        consumer.join(timeout=5)
        assert results == ["line"]

    def test_concurrent_producers_lose_nothing(self) -> None:
        q = ClosableQueue()
        per_producer = 1000

        def produce(base):
            for i in range(per_producer):
                q.push(base + i)

        producers = [threading.Thread(target=produce, args=(k * per_producer,)) for k in range(4)]
        received = []

        def consume():
            while True:
                item = q.blocking_pop()
                if item is None:
                    break
                received.append(item)

        consumer = threading.Thread(target=consume)
        consumer.start()
        for p in producers:
            p.start()
        for p in producers:
            p.join()
        q.close()
        consumer.join(timeout=10)

        assert sorted(received) == list(range(4 * per_producer))
        # each producer's own items keep their order
        for k in range(4):
            own = [x for x in received if k * per_producer <= x < (k + 1) * per_producer]
            assert own == sorted(own)
