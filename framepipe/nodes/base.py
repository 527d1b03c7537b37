"""Pipeline nodes: worker threads connected by shared queues."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Iterable

from framepipe.config import BaseData
from framepipe.formatting import str_format
from framepipe.objects import FrameData
from framepipe.shared_queue import OverflowStrategy, SharedQueue
from framepipe.timer import Timer

log = logging.getLogger(__name__)

FrameQueue = SharedQueue[FrameData]


class NodeType(IntEnum):
    """Where a node sits in a pipeline.

    A ROUTER node lets one node (inference, say) batch frames from several
    pipelines and then forwards each frame back to the pipeline it came from.
    """

    SOURCE = 0
    MIDDLE = 1
    SINK = 2
    ROUTER = 3


class NodeStatus(IntEnum):
    RUNNING = 1
    STOP = 2
    ERROR = 3


class BaseNode(ABC):
    """A node that pulls frame batches from its input queues on its own thread.

    Every batch goes through :meth:`handle_data` and is then pushed to all
    output queues. Queues should be added before the node is started.
    """

    node_type: NodeType = NodeType.MIDDLE

    def __init__(self, name: str, config_data: BaseData) -> None:
        self.name = name
        self._config_data = config_data
        self.max_pop_batch_size = config_data.max_pop_batch_size
        self.status = NodeStatus.STOP
        self._lock = threading.Lock()
        self._running = threading.Event()
        self._worker_cond = threading.Condition()
        self._worker_thread: threading.Thread | None = None
        self._input_queues: dict[str, FrameQueue] = {}
        self._output_queues: dict[str, FrameQueue] = {}

    @property
    def config_data(self) -> BaseData:
        return self._config_data

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def input_queues(self) -> dict[str, FrameQueue]:
        with self._lock:
            return dict(self._input_queues)

    @property
    def output_queues(self) -> dict[str, FrameQueue]:
        with self._lock:
            return dict(self._output_queues)

    def set_config_data(self, config_data: BaseData) -> None:
        with self._lock:
            self._config_data = config_data

    @abstractmethod
    def handle_data(self, batch_datas: list[FrameData]) -> None:
        """Process one batch of frames in place."""

    def add_input_queue(self, name: str, frame_queue: FrameQueue) -> None:
        with self._lock:
            frame_queue.set_node_worker_cond(self._worker_cond)
            self._input_queues[name] = frame_queue

    def add_output_queue(self, name: str, frame_queue: FrameQueue) -> None:
        with self._lock:
            self._output_queues[name] = frame_queue

    def send_single_data_to_output_queues(self, data: FrameData) -> None:
        for frame_queue in self.output_queues.values():
            frame_queue.push(data)

    def send_data_to_output_queues(self, batch_datas: Iterable[FrameData | None]) -> None:
        for data in batch_datas:
            if data is None:
                continue
            self.send_single_data_to_output_queues(data)

    def start(self) -> None:
        """Start the worker thread; does nothing if it is already running."""
        with self._lock:
            if self._running.is_set():
                return
            self._running.set()
            self.status = NodeStatus.RUNNING
            self._worker_thread = threading.Thread(
                target=self.work, name=f"node-{self.name}", daemon=True
            )
            self._worker_thread.start()

    def stop(self) -> None:
        """Stop the worker thread and drop everything left in the queues."""
        with self._lock:
            if not self._running.is_set():
                return
            self._running.clear()
            queues = list(self._input_queues.values()) + list(self._output_queues.values())
            thread = self._worker_thread
            self._worker_thread = None
        for frame_queue in queues:
            frame_queue.clear()
        with self._worker_cond:
            self._worker_cond.notify_all()
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self.status = NodeStatus.STOP
        log.info("Node : [%s] stopped", self.name)

    def _has_input(self) -> bool:
        return any(not q.empty() for q in self.input_queues.values())

    def work(self) -> None:
        """Worker loop: run until the node is stopped."""
        while self._running.is_set():
            has_data = False
            for frame_queue in self.input_queues.values():
                batch = frame_queue.pop_batch(self.max_pop_batch_size)
                if not batch:
                    continue
                has_data = True
                timer = Timer(str_format("%s %d images", self.name, len(batch)))
                try:
                    self.handle_data(batch)
                except Exception:
                    log.exception("Node [%s] failed to handle a batch", self.name)
                    self.status = NodeStatus.ERROR
                    continue
                finally:
                    timer.stop_print()
                self.send_data_to_output_queues(batch)
            if not has_data:
                with self._worker_cond:
                    self._worker_cond.wait_for(
                        lambda: not self._running.is_set() or self._has_input(),
                        timeout=0.1,
                    )

    def __enter__(self) -> "BaseNode":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, status={self.status.name})"


def link_node(
    front: BaseNode,
    back: BaseNode,
    pipeline_id: str,
    queue_size: int = 40,
    strategy: OverflowStrategy = OverflowStrategy.DROP_LATE,
) -> FrameQueue:
    """Connect ``front``'s output to ``back``'s input with a new queue."""
    frame_queue: FrameQueue = SharedQueue(pipeline_id, queue_size, strategy)
    back.add_input_queue(front.name, frame_queue)
    front.add_output_queue(back.name, frame_queue)
    return frame_queue