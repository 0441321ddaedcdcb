# =============================================================================
# hospital_core/state/reactive.py
# Thread-safe reactive cells
# =============================================================================
"""
A ReactiveCell holds one value that several threads may replace.

Streamlit pages read cells on every rerun; the Firebase listener thread
writes them. Subscribers are called after the lock is released so a
callback may read the cell again without deadlocking.
"""

from __future__ import annotations
import threading
from typing import Callable, Generic, List, TypeVar

from hospital_core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ReactiveCell(Generic[T]):
    """
    Mutable value with change notification.

    Usage:
        loading = ReactiveCell(False)
        unsubscribe = loading.subscribe(lambda v: print("loading:", v))
        loading.set(True)
        unsubscribe()
    """

    def __init__(self, initial: T, name: str = "cell"):
        self.name = name
        self._value = initial
        self._lock = threading.RLock()
        self._callbacks: List[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self.get()

    def get(self) -> T:
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        """Replace the value and notify subscribers."""
        with self._lock:
            self._value = value
            callbacks = list(self._callbacks)

        for callback in callbacks:
            try:
                callback(value)
            except Exception as e:
                logger.error(f"Subscriber of '{self.name}' failed: {e}", exc_info=True)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """
        Register a change callback.

        Returns:
            Function that removes the callback again
        """
        with self._lock:
            self._callbacks.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return unsubscribe

    def __repr__(self) -> str:
        return f"ReactiveCell({self.name}={self.get()!r})"
