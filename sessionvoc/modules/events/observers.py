"""
Observer registry behind the client's "ready" and "error" notifications.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Tuple, Union

logger = logging.getLogger(__name__)

Listener = Callable[[Any], Union[None, Awaitable[None]]]

READY = "ready"
ERROR = "error"
KNOWN_EVENTS = (READY, ERROR)


class EventRegistry:
    """
    Explicit observer registration for client notifications.

    Listeners are called in registration order. A listener may be a plain
    function or a coroutine function; coroutine listeners are awaited.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Tuple[Listener, bool]]] = {
            name: [] for name in KNOWN_EVENTS
        }

    def _check_event(self, event: str) -> None:
        if event not in self._listeners:
            raise ValueError(
                f"Unknown event '{event}'. Expected one of: {', '.join(KNOWN_EVENTS)}"
            )

    def on(self, event: str, listener: Listener) -> Listener:
        """Register listener for every future emission of event."""
        self._check_event(event)
        self._listeners[event].append((listener, False))
        return listener

    def once(self, event: str, listener: Listener) -> Listener:
        """Register listener for the next emission of event only."""
        self._check_event(event)
        self._listeners[event].append((listener, True))
        return listener

    def off(self, event: str, listener: Listener) -> bool:
        """
        Remove listener from event.

        Returns:
            True if the listener was registered
        """
        self._check_event(event)
        entries = self._listeners[event]
        for index, (registered, _) in enumerate(entries):
            if registered is listener:
                del entries[index]
                return True
        return False

    def listener_count(self, event: str) -> int:
        self._check_event(event)
        return len(self._listeners[event])

    async def emit(self, event: str, payload: Any = None) -> int:
        """
        Deliver payload to every listener of event.

        A failing listener is logged and does not prevent delivery to the
        others.

        Returns:
            Number of listeners notified
        """
        self._check_event(event)
        entries = list(self._listeners[event])
        self._listeners[event] = [entry for entry in entries if not entry[1]]

        for listener, _ in entries:
            try:
                outcome = listener(payload)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                logger.exception(f"Listener for '{event}' event failed")
        return len(entries)
