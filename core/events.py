"""Change notification for stores."""
from typing import Callable, List

from core.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[..., None]


class Subscribers:
    """
    Ordered listener registry.

    subscribe() returns a callable that removes the listener again; calling
    it more than once is harmless. A listener that raises is logged and the
    remaining listeners still run.
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def notify(self, *args) -> None:
        # Copy so listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            try:
                listener(*args)
            except Exception as e:
                logger.error(f"Store listener {listener!r} failed: {e}", exc_info=True)

    def __len__(self) -> int:
        return len(self._listeners)
