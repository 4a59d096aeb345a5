"""Event emitter and subscription records used for cross-module wiring."""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

__all__ = ["EventEmitter", "Subscription", "supports_events"]


@dataclass(frozen=True)
class Subscription:
    """A (receiver, bound method) pair stored in an emitter's listener table.

    The handler is resolved once, by ``bind()``. Replacing or deleting the
    attribute on the receiver afterwards does not reroute the event.
    Equality compares ``receiver`` and ``call`` only, so ``off()`` accepts a
    freshly bound record for the same handler.
    """

    receiver: Any
    call: str
    method: Callable[..., Any] = field(compare=False)

    @classmethod
    def bind(cls, receiver: Any, call: str) -> Subscription:
        """Capture ``receiver.<call>`` now.

        Raises:
            AttributeError: If the receiver has no such attribute.
        """
        return cls(receiver=receiver, call=call, method=getattr(receiver, call))

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.method(*args, **kwargs)

    def __repr__(self) -> str:
        return f"Subscription({type(self.receiver).__name__}.{self.call})"


def supports_events(obj: Any) -> bool:
    """Whether ``obj`` exposes a callable ``on(event, handler)``."""
    return callable(getattr(obj, "on", None))


class EventEmitter:
    """Minimal named-event emitter.

    Module instances and host contexts can subclass this to become event
    sources for other modules.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable[..., Any]]] = {}
        self._pending: set[asyncio.Future[Any]] = set()
        self._listener_lock = threading.RLock()

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        """Register ``handler`` to be called whenever ``event`` is emitted."""
        with self._listener_lock:
            self._listeners.setdefault(event, []).append(handler)

    def off(self, event: str, handler: Callable[..., Any]) -> bool:
        """Remove one registration of ``handler``. Returns False if it was not registered."""
        with self._listener_lock:
            handlers = self._listeners.get(event, [])
            if handler not in handlers:
                return False
            handlers.remove(handler)
            return True

    def listener_count(self, event: str) -> int:
        """Number of handlers registered for ``event``."""
        with self._listener_lock:
            return len(self._listeners.get(event, []))

    def emit(self, event: str, *args: Any, **kwargs: Any) -> bool:
        """Call every handler for ``event`` with the payload unchanged.

        Handler errors are logged and swallowed. Coroutines returned by async
        handlers are scheduled on the running loop, if any.

        Returns:
            True if the event had at least one listener.
        """
        handlers = self._snapshot(event)
        for handler in handlers:
            try:
                result = handler(*args, **kwargs)
            except Exception as e:
                logger.error("Handler %r failed for event '%s': %s", handler, event, e)
                continue
            if inspect.isawaitable(result):
                self._schedule(event, handler, result)
        return bool(handlers)

    async def emit_async(self, event: str, *args: Any, **kwargs: Any) -> bool:
        """Like emit(), but awaits each handler's result in registration order."""
        handlers = self._snapshot(event)
        for handler in handlers:
            try:
                result = handler(*args, **kwargs)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error("Handler %r failed for event '%s': %s", handler, event, e)
        return bool(handlers)

    def _snapshot(self, event: str) -> list[Callable[..., Any]]:
        with self._listener_lock:
            return list(self._listeners.get(event, []))

    def _schedule(self, event: str, handler: Callable[..., Any], awaitable: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                "Async handler %r for event '%s' dropped: no running event loop",
                handler,
                event,
            )
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return
        task = asyncio.ensure_future(awaitable, loop=loop)
        self._pending.add(task)
        task.add_done_callback(lambda t: self._task_done(event, t))

    def _task_done(self, event: str, task: asyncio.Future[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Async handler failed for event '%s': %s", event, exc)
