# xts_interactive/emitter.py
import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger("xts_interactive.emitter")
logger.setLevel(logging.INFO)


class EventEmitter:
    """
    Minimal local pub/sub. Listeners of one event run synchronously in
    registration order; a listener that raises is logged and skipped.
    """
    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = defaultdict(list)
        self._lock = threading.Lock()

    def on(self, event: str, fn: Callable[[Any], None]):
        with self._lock:
            self._listeners[event].append(fn)
        return fn

    def listeners(self, event: str) -> List[Callable]:
        with self._lock:
            return list(self._listeners.get(event, ()))

    def emit(self, event: str, data: Any = None) -> bool:
        handlers = self.listeners(event)
        for fn in handlers:
            try:
                fn(data)
            except Exception:
                logger.exception("listener for %r failed", event)
        return bool(handlers)
