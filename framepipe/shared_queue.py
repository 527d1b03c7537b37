"""A bounded, thread-safe queue that links pipeline nodes."""

from __future__ import annotations

import threading
from collections import deque
from enum import IntEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class OverflowStrategy(IntEnum):
    """What a push does when the queue is full."""

    BLOCK = 0  # wait for room
    DROP_EARLY = 1  # discard the oldest item
    DROP_LATE = 2  # discard the new item
    DROP_ALL = 3  # discard everything queued


class SharedQueue(Generic[T]):
    """A FIFO owned by one pipeline, shared between a producer and a consumer node."""

    def __init__(
        self,
        owner_pipeline_id: str,
        max_size: int = 25,
        strategy: OverflowStrategy = OverflowStrategy.DROP_LATE,
    ) -> None:
        self.pipeline_id = owner_pipeline_id
        self._max_size = max_size
        self.overflow_strategy = OverflowStrategy(strategy)
        self._items: deque[T] = deque()
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)
        self._node_worker_cond: threading.Condition | None = None

    def set_node_worker_cond(self, cond: threading.Condition) -> None:
        """Condition notified whenever an item enters the queue."""
        self._node_worker_cond = cond

    def push(self, item: T) -> bool:
        """Add ``item``; returns False if it was dropped under DROP_LATE."""
        with self._lock:
            if len(self._items) >= self._max_size:
                strategy = self.overflow_strategy
                if strategy is OverflowStrategy.BLOCK:
                    self._not_full.wait_for(lambda: len(self._items) < self._max_size)
                elif strategy is OverflowStrategy.DROP_EARLY:
                    self._items.popleft()
                elif strategy is OverflowStrategy.DROP_LATE:
                    return False
                else:
                    self._items.clear()
            self._items.append(item)
            self._not_empty.notify()
        worker = self._node_worker_cond
        if worker is not None:
            with worker:
                worker.notify()
        return True

    def empty(self) -> bool:
        with self._lock:
            return not self._items

    def pop(self, timeout: float | None = None) -> T:
        """Remove and return the oldest item, waiting for one to arrive.

        Raises TimeoutError if ``timeout`` seconds pass with the queue empty.
        """
        with self._lock:
            if not self._not_empty.wait_for(lambda: bool(self._items), timeout):
                raise TimeoutError("no item arrived before the timeout")
            item = self._items.popleft()
            self._not_full.notify()
            return item

    def pop_batch(self, max_batch_size: int) -> list[T]:
        """Remove up to ``max_batch_size`` items without waiting."""
        with self._lock:
            count = min(max(max_batch_size, 0), len(self._items))
            batch = [self._items.popleft() for _ in range(count)]
            self._not_full.notify()
            return batch

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self._not_full.notify_all()

    def size(self) -> int:
        with self._lock:
            return len(self._items)

    def capacity(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        return self.size()