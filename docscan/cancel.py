"""
Cancellation - Cooperative cancel signal with an optional deadline.

A CancelToken is created per request and handed to the engine. It holds
no event-loop state: the flag is a threading.Event, and each ``wait()``
call parks on its own asyncio.Event that ``cancel()`` wakes through the
waiter's loop. One token can therefore be shared by scans running on
different loops and cancelled from any thread.
"""

import asyncio
import threading
import time
from typing import Optional, Set, Tuple

from .errors import ScanCancelled


Waiter = Tuple[asyncio.AbstractEventLoop, asyncio.Event]


class CancelToken:
    """
    Explicit cancel flag plus an optional monotonic deadline.

    Usage:
        token = CancelToken.with_timeout(5.0)
        docs = await engine.discover(root, cancel=token)
    """

    def __init__(self, deadline: Optional[float] = None):
        self._deadline = deadline
        self._flag = threading.Event()
        self._lock = threading.Lock()
        self._waiters: Set[Waiter] = set()

    @classmethod
    def with_timeout(cls, seconds: Optional[float]) -> "CancelToken":
        if seconds is None:
            return cls()
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        if self._flag.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self.cancel()
            return True
        return False

    def cancel(self) -> None:
        """Fire the token. Safe to call from any thread, more than once."""
        with self._lock:
            self._flag.set()
            waiters = list(self._waiters)

        for loop, event in waiters:
            if loop.is_closed():
                continue
            loop.call_soon_threadsafe(event.set)

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise ScanCancelled("Scan cancelled")

    async def wait(self) -> None:
        """Return once the token is cancelled or its deadline passes."""
        if self.cancelled:
            return

        waiter = (asyncio.get_running_loop(), asyncio.Event())
        with self._lock:
            self._waiters.add(waiter)

        try:
            # cancel() may have run before we registered
            if self._flag.is_set():
                return

            event = waiter[1]
            if self._deadline is None:
                await event.wait()
                return

            remaining = self._deadline - time.monotonic()
            try:
                await asyncio.wait_for(event.wait(), timeout=max(remaining, 0))
            except asyncio.TimeoutError:
                self.cancel()
        finally:
            with self._lock:
                self._waiters.discard(waiter)
