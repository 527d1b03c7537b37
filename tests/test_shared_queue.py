import threading
import time

import pytest

from framepipe.shared_queue import OverflowStrategy, SharedQueue


def fill(queue, items):
    return [queue.push(item) for item in items]


def test_fifo_order():
    q = SharedQueue("p", max_size=5)
    fill(q, ["a", "b", "c"])
    assert q.pop() == "a"
    assert q.pop_batch(10) == ["b", "c"]
    assert q.empty()


def test_default_strategy_and_capacity():
    q = SharedQueue("p")
    assert q.overflow_strategy is OverflowStrategy.DROP_LATE
    assert q.capacity() == 25
    assert q.pipeline_id == "p"


def test_drop_late_keeps_oldest():
    q = SharedQueue("p", max_size=2, strategy=OverflowStrategy.DROP_LATE)
    accepted = fill(q, [1, 2, 3])
    assert accepted == [True, True, False]
    assert q.pop_batch(5) == [1, 2]


def test_drop_early_keeps_newest():
    q = SharedQueue("p", max_size=2, strategy=OverflowStrategy.DROP_EARLY)
    fill(q, [1, 2, 3])
    assert q.pop_batch(5) == [2, 3]


def test_drop_all_keeps_only_new_item():
    q = SharedQueue("p", max_size=2, strategy=OverflowStrategy.DROP_ALL)
    fill(q, [1, 2, 3])
    assert q.pop_batch(5) == [3]


def test_block_waits_for_room():
    q = SharedQueue("p", max_size=1, strategy=OverflowStrategy.BLOCK)
    q.push("first")
    done = threading.Event()

    def producer():
        q.push("second")
        done.set()

    thread = threading.Thread(target=producer)
    thread.start()
    time.sleep(0.05)
    assert not done.is_set()
    assert q.pop(timeout=1) == "first"
    thread.join(timeout=2)
    assert done.is_set()
    assert q.pop(timeout=1) == "second"


def test_pop_batch_limit_and_size():
    q = SharedQueue("p", max_size=10)
    fill(q, range(6))
    assert q.pop_batch(4) == [0, 1, 2, 3]
    assert q.size() == 2
    assert len(q) == 2


def test_pop_batch_on_empty_queue():
    q = SharedQueue("p")
    assert q.pop_batch(3) == []


def test_clear():
    q = SharedQueue("p", max_size=10)
    fill(q, range(4))
    q.clear()
    assert q.size() == 0
    assert q.empty()


def test_pop_timeout():
    q = SharedQueue("p")
    with pytest.raises(TimeoutError):
        q.pop(timeout=0.01)


def test_pop_waits_for_producer():
    q = SharedQueue("p")
    timer = threading.Timer(0.05, q.push, args=("late",))
    timer.start()
    assert q.pop(timeout=2) == "late"
    timer.join()


def test_worker_condition_notified():
    q = SharedQueue("p")
    cond = threading.Condition()
    q.set_node_worker_cond(cond)
    woke = []

    def waiter():
        with cond:
            woke.append(cond.wait(timeout=2))

    thread = threading.Thread(target=waiter)
    thread.start()
    time.sleep(0.05)
    q.push("x")
    thread.join(timeout=3)
    assert woke == [True]
    assert q.pop_batch(1) == ["x"]