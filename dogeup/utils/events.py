"""Run event dispatch."""
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List
import inspect
import logging

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventEmitter:
    """
    Dispatches orchestrator events (state, file_start, file_retry, ...).

    Listeners may be plain callables or coroutine functions. A failing
    listener is logged and never interrupts the upload run.
    """

    def __init__(self):
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def on(self, event_name: str, callback: Listener) -> Listener:
        """Subscribe once; returns the callback so it can be used as a decorator."""
        listeners = self._listeners[event_name]
        if callback not in listeners:
            listeners.append(callback)
        return callback

    def off(self, event_name: str, callback: Listener):
        listeners = self._listeners.get(event_name, [])
        if callback in listeners:
            listeners.remove(callback)

    async def emit(self, event_name: str, *args, **kwargs):
        # Snapshot: listeners may unsubscribe while being called.
        for callback in tuple(self._listeners.get(event_name, ())):
            try:
                outcome = callback(*args, **kwargs)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as exc:
                logger.error("Listener for %s event failed: %s", event_name, exc)
