"""Fan-in of worker classifications into ordered result lists."""

import queue
import threading
from typing import List, Optional

# Placed on a channel to tell its consumer that no more paths will follow
_CLOSED = object()


class ResultChannel:
    """Single-consumer channel draining emitted paths into a list."""

    def __init__(self, name: str):
        self.name = name
        self.paths: List[str] = []
        self._queue: "queue.Queue" = queue.Queue()
        self._closed = False
        self._thread = threading.Thread(target=self._drain, name=f"roster-{name}", daemon=True)
        self._thread.start()

    def emit(self, path: str) -> None:
        if self._closed:
            raise RuntimeError(f"emit on closed channel: {self.name}")
        self._queue.put(path)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put(_CLOSED)

    def join(self, timeout: Optional[float] = None) -> None:
        self._thread.join(timeout)

    def _drain(self) -> None:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            self.paths.append(item)


class ResultAggregator:
    """
    Collects ``new`` and ``modified`` paths emitted by worker threads.

    Each channel is drained by its own consumer thread, so emitting never waits
    for the other channel. Append order follows worker completion order and is
    not deterministic; ``new_paths`` and ``modified_paths`` return sorted copies.

    Usage:
        aggregator = ResultAggregator()
        aggregator.new.emit("a.txt")   # from any worker thread
        aggregator.close()             # after every worker has exited
        aggregator.join()              # barrier before reading results
    """

    def __init__(self):
        self.new = ResultChannel("new")
        self.modified = ResultChannel("modified")

    def close(self) -> None:
        self.new.close()
        self.modified.close()

    def join(self) -> None:
        self.new.join()
        self.modified.join()

    @property
    def new_paths(self) -> List[str]:
        return sorted(self.new.paths)

    @property
    def modified_paths(self) -> List[str]:
        return sorted(self.modified.paths)
