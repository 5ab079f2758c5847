# xts_interactive/scheduler.py
import logging
import threading
from typing import Callable

logger = logging.getLogger("xts_interactive.scheduler")
logger.setLevel(logging.INFO)


class RepeatingTimer(threading.Thread):
    """Calls callback every `interval` seconds until cancel()."""
    def __init__(self, interval: float, callback: Callable[[], None]):
        super().__init__(daemon=True)
        self.interval = interval
        self.callback = callback
        self._stopped = threading.Event()

    def run(self):
        while not self._stopped.wait(self.interval):
            try:
                self.callback()
            except Exception:
                logger.exception("scheduled callback failed")

    def cancel(self):
        self._stopped.set()

    @property
    def cancelled(self) -> bool:
        return self._stopped.is_set()


class TimerScheduler:
    """
    Default scheduler for the socket client. Anything with a
    call_every(interval, callback) returning an object with cancel() can
    stand in for it.
    """
    def call_every(self, interval: float, callback: Callable[[], None]) -> RepeatingTimer:
        timer = RepeatingTimer(interval, callback)
        timer.start()
        return timer
