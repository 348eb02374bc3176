"""Once-only availability check for the remote strategy."""
from __future__ import annotations

import threading
from typing import Callable, Generic, Optional, TypeVar

from linewise.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class AvailabilityLatch(Generic[T]):
    """Hold the result of a check that runs until it has been recorded once.

    The check decides whether the remote strategy can be used and returns the
    provider or ``None``. Its first recorded result is kept for the lifetime of
    the latch, so a key added to the environment later is not picked up.
    Concurrent first callers may each run the check; only the first result is
    stored and every caller receives that stored value. A check that raises
    counts as "unavailable" and is not retried.
    """

    def __init__(self, check: Callable[[], Optional[T]]) -> None:
        self._check = check
        self._lock = threading.Lock()
        self._checked = False
        self._value: Optional[T] = None

    @classmethod
    def resolved(cls, value: Optional[T]) -> "AvailabilityLatch[T]":
        """Return a latch already holding ``value``."""

        latch: AvailabilityLatch[T] = cls(lambda: value)
        latch.get()
        return latch

    @property
    def checked(self) -> bool:
        return self._checked

    def get(self) -> Optional[T]:
        if self._checked:
            return self._value
        try:
            value = self._check()
        except Exception:
            logger.exception("availability check failed, remote strategy disabled")
            value = None
        with self._lock:
            if not self._checked:
                self._value = value
                self._checked = True
        return self._value


__all__ = ["AvailabilityLatch"]
