"""
Timer scheduling for pacing delays and periodic session tasks.
"""
import logging
import threading
from typing import Callable, List

logger = logging.getLogger("scheduling")


class TimerHandle:
    """Cancellable handle returned by a scheduler."""

    def __init__(self):
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()


class Scheduler:
    """Interface for one-shot and fixed-interval callbacks."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError

    def cancel_all(self) -> None:
        raise NotImplementedError


def _run_guarded(handle: TimerHandle, callback: Callable[[], None]) -> None:
    if handle.cancelled:
        return
    try:
        callback()
    except Exception as e:
        logger.error("Scheduled callback %s failed: %s", getattr(callback, "__name__", callback), e)


class _ThreadingHandle(TimerHandle):
    def __init__(self):
        super().__init__()
        self.timer = None

    def cancel(self) -> None:
        super().cancel()
        if self.timer is not None:
            self.timer.cancel()


class ThreadingScheduler(Scheduler):
    """Scheduler backed by daemon ``threading.Timer`` threads."""

    def __init__(self):
        self._handles: List[TimerHandle] = []
        self._lock = threading.Lock()

    def _track(self, handle: TimerHandle) -> TimerHandle:
        with self._lock:
            self._handles = [h for h in self._handles if not h.cancelled]
            self._handles.append(handle)
        return handle

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ThreadingHandle()

        def fire():
            _run_guarded(handle, callback)
            handle.cancel()

        handle.timer = threading.Timer(delay, fire)
        handle.timer.daemon = True
        handle.timer.start()
        return self._track(handle)

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ThreadingHandle()

        def loop():
            # Event.wait returns True once cancelled
            while not handle._cancelled.wait(interval):
                _run_guarded(handle, callback)

        thread = threading.Thread(target=loop, name=f"every-{interval}s", daemon=True)
        thread.start()
        return self._track(handle)

    def cancel_all(self) -> None:
        with self._lock:
            handles, self._handles = self._handles, []
        for handle in handles:
            handle.cancel()
