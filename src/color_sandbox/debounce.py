from __future__ import annotations

import logging
import time
from typing import Any, Callable

log = logging.getLogger(__name__)


class Debouncer:
    """Last-call-wins delay gate.

    ``trigger()`` records a call and (re)starts the delay; ``poll()`` runs the
    recorded call once the delay has elapsed. A call replaced by a newer
    trigger is dropped without running.
    """

    def __init__(
        self,
        delay: float,
        func: Callable[..., Any],
        *,
        _clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.delay = delay
        self._func = func
        self._clock = _clock
        self._pending: tuple[float, tuple, dict] | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def trigger(self, *args: Any, **kwargs: Any) -> None:
        self._pending = (self._clock(), args, kwargs)

    def poll(self) -> bool:
        """Run the pending call if it is due. Returns True if it ran."""
        if self._pending is None:
            return False
        stamp, args, kwargs = self._pending
        if self._clock() - stamp < self.delay:
            return False
        self._pending = None
        log.debug("debounced call fired after %.3fs", self.delay)
        self._func(*args, **kwargs)
        return True

    def flush(self) -> bool:
        """Run the pending call now, regardless of the delay."""
        if self._pending is None:
            return False
        _stamp, args, kwargs = self._pending
        self._pending = None
        self._func(*args, **kwargs)
        return True

    def cancel(self) -> None:
        self._pending = None


__all__ = ["Debouncer"]
