"""Event emitter implementation using Observer Pattern."""
import inspect
from typing import Dict, List, Callable


class EventEmitter:
    """
    Event emitter using Observer Pattern.

    Handlers may be plain functions or coroutine functions; emit_async()
    awaits coroutine handlers in registration order.
    """

    def __init__(self):
        """Initializes event emitter."""
        self._events: Dict[str, List[Callable]] = {}

    def on(self, event: str, callback: Callable) -> 'EventEmitter':
        """Registers an event handler."""
        if event not in self._events:
            self._events[event] = []
        self._events[event].append(callback)
        return self

    async def emit_async(self, event: str, *args, **kwargs):
        """Emits an event and waits for coroutine handlers to finish."""
        for callback in list(self._events.get(event, ())):
            result = callback(*args, **kwargs)
            if inspect.isawaitable(result):
                await result
