import asyncio
import inspect
import logging
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)

OffsetListener = Callable[[float], None]
Collaborator = Callable[[Any], Any]

# Strong references to in-flight collaborator tasks until they finish.
_pending_tasks: "set[asyncio.Future]" = set()


def _on_task_done(task: asyncio.Future, callback: Collaborator, payload: Any) -> None:
    _pending_tasks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Collaborator %r failed handling %r", callback, payload, exc_info=exc)


def dispatch(callback: Optional[Collaborator], payload: Any) -> None:
    """
    Hand a command to a collaborator. Coroutine results are scheduled on the
    running loop; a failing collaborator is logged and never breaks the caller.
    """
    if not callback:
        return
    try:
        result = callback(payload)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            _pending_tasks.add(task)
            task.add_done_callback(lambda t: _on_task_done(t, callback, payload))
    except Exception:
        logger.exception("Collaborator %r failed handling %r", callback, payload)


class OffsetStream:
    """
    Horizontal scroll offsets of the card tray, delivered to subscribers in
    subscription order on the emitting thread.
    """

    def __init__(self) -> None:
        self._listeners: List[OffsetListener] = []
        self._closed = False
        self.last_offset = 0.0

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: OffsetListener) -> Callable[[], None]:
        if self._closed:
            return lambda: None
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def emit(self, offset: float) -> None:
        if self._closed:
            logger.debug("Ignoring offset %s on a closed stream", offset)
            return
        self.last_offset = float(offset)
        for listener in list(self._listeners):
            listener(self.last_offset)

    def close(self) -> None:
        self._closed = True
        self._listeners.clear()
