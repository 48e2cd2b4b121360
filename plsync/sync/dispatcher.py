"""Fire-and-forget execution of remote calls.

Each remote call runs on its own worker thread so the thread that applied the
local mutation never waits for the network. Completion is handed back to the
dispatcher's thread through a queued Qt signal, so callbacks run on the GUI
thread.

There is deliberately no queue: two calls dispatched back to back run
concurrently and may reach the server in either order.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Optional, Protocol, Tuple
from PySide6.QtCore import QObject, QThread, Signal, Slot
import itertools
import logging

logger = logging.getLogger(__name__)

SuccessCallback = Callable[[Any], None]
FailureCallback = Callable[[BaseException], None]


class RemoteCallDispatcher(Protocol):
    """Runs a zero-argument call off the caller's critical path."""

    def dispatch(self, call: Callable[[], Any], on_success: SuccessCallback, on_failure: FailureCallback) -> int:
        """Start ``call`` and return a call id; exactly one callback fires later."""
        ...  # pragma: no cover


class RemoteCallWorker(QThread):
    """Worker thread executing a single remote call.

    Signals:
        done: Emitted once with (call_id, result, error); error is None on success
    """

    done = Signal(int, object, object)

    def __init__(self, call_id: int, call: Callable[[], Any], parent: Optional[QObject] = None):
        super().__init__(parent)
        self.call_id = call_id
        self.call = call

    def run(self):
        """Execute the call in the background thread."""
        name = getattr(self.call, "__name__", repr(self.call))
        try:
            logger.debug(f"RemoteCallWorker #{self.call_id} starting: {name}")
            result = self.call()
        except Exception as e:
            logger.error(f"RemoteCallWorker #{self.call_id} error in {name}: {e}", exc_info=True)
            self.done.emit(self.call_id, None, e)
            return
        logger.debug(f"RemoteCallWorker #{self.call_id} finished: {name}")
        self.done.emit(self.call_id, result, None)


class ThreadedDispatcher(QObject):
    """Dispatcher running every call on a dedicated ``RemoteCallWorker``.

    Example:
        dispatcher = ThreadedDispatcher()
        dispatcher.dispatch(
            lambda: client.remove_items(pid, [1]),
            on_success=lambda _: logger.info("removed"),
            on_failure=lambda e: logger.error(e),
        )
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._ids = itertools.count(1)
        # Keep workers referenced until they finish to prevent garbage collection
        self._workers: Dict[int, RemoteCallWorker] = {}
        self._callbacks: Dict[int, Tuple[SuccessCallback, FailureCallback]] = {}

    @property
    def in_flight(self) -> int:
        return len(self._callbacks)

    def dispatch(self, call: Callable[[], Any], on_success: SuccessCallback, on_failure: FailureCallback) -> int:
        call_id = next(self._ids)
        worker = RemoteCallWorker(call_id, call)
        worker.done.connect(self._on_worker_done)
        worker.finished.connect(self._on_worker_finished)
        self._workers[call_id] = worker
        self._callbacks[call_id] = (on_success, on_failure)
        worker.start()
        logger.debug(f"Dispatched remote call #{call_id} ({len(self._callbacks)} in flight)")
        return call_id

    @Slot(int, object, object)
    def _on_worker_done(self, call_id: int, result: Any, error: Any):
        callbacks = self._callbacks.pop(call_id, None)
        if callbacks is None:
            logger.warning(f"Completion for unknown remote call #{call_id}")
            return
        on_success, on_failure = callbacks
        if error is None:
            on_success(result)
        else:
            on_failure(error)

    @Slot()
    def _on_worker_finished(self):
        """Drop the reference to a worker whose thread has exited."""
        worker = self.sender()
        if not isinstance(worker, RemoteCallWorker):
            return
        self._workers.pop(worker.call_id, None)
        worker.deleteLater()

    def wait_all(self, timeout_ms: int = 5000) -> bool:
        """Block until every running worker has finished (used at shutdown).

        Returns:
            True if all workers finished within the timeout
        """
        finished = True
        for worker in list(self._workers.values()):
            finished = worker.wait(timeout_ms) and finished
        return finished


__all__ = ["RemoteCallDispatcher", "RemoteCallWorker", "ThreadedDispatcher"]
