"""Debounced value holder driven by the running asyncio loop."""

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Holds a value that only follows its input after the input stops changing.

    Every ``push`` cancels the pending timer and starts a new one, so a burst
    of pushes closer together than ``delay`` settles once, on the last value.
    ``on_settle`` is called when the settled value actually changes.
    """

    def __init__(
        self,
        initial: T,
        delay: float,
        on_settle: Callable[[T], None] | None = None,
    ) -> None:
        self._value = initial
        self._delay = delay
        self._on_settle = on_settle
        self._handle: asyncio.TimerHandle | None = None
        self._pending_value: T | None = None
        self._closed = False

    @property
    def value(self) -> T:
        return self._value

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, value: T) -> None:
        if self._closed:
            raise RuntimeError("Debouncer is closed")
        self.cancel()
        loop = asyncio.get_running_loop()
        self._pending_value = value
        self._handle = loop.call_later(self._delay, self._settle, value)

    def flush(self) -> None:
        """Settle the pending value now instead of waiting for the timer."""
        if self._handle is None:
            return
        value = self._pending_value
        self.cancel()
        self._settle(value)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            self._pending_value = None

    def close(self) -> None:
        self.cancel()
        self._closed = True

    def _settle(self, value: T) -> None:
        self._handle = None
        self._pending_value = None
        if self._closed or value == self._value:
            return
        self._value = value
        logger.debug("Settled on %r", value)
        if self._on_settle is not None:
            self._on_settle(value)

    def __enter__(self) -> "Debouncer[T]":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
