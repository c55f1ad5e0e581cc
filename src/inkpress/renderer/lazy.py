"""Single-flight lazy initialization for process-wide resources."""

import asyncio
import logging
import threading
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """
    Build a shared value at most once, on first use.

    Concurrent first callers, whether coroutines or threads, wait on the same
    lock; exactly one of them runs the factory. A factory failure is raised to
    every caller that triggered it and nothing is stored, so the next call
    starts a fresh attempt.
    """

    def __init__(self, factory: Callable[[], T], name: str = "resource") -> None:
        self._factory = factory
        self._name = name
        self._lock = threading.Lock()
        self._value: T | None = None

    @property
    def initialized(self) -> bool:
        """Whether the value has been built."""
        return self._value is not None

    def get(self) -> T:
        """Return the shared value, building it if needed."""
        value = self._value
        if value is not None:
            return value

        with self._lock:
            if self._value is None:
                logger.info(f"Initializing {self._name}")
                self._value = self._factory()
                logger.debug(f"{self._name} ready")
            return self._value

    async def aget(self) -> T:
        """Return the shared value without blocking the event loop."""
        value = self._value
        if value is not None:
            return value
        return await asyncio.to_thread(self.get)
