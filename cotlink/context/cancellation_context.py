from __future__ import annotations

import asyncio
import time


class CancellationContext:
    """
    Cancellation signal with an optional deadline, threaded through
    ``Transport.connect()``. Everything a transport spawns at connect time
    (the stream supervisor, the multicast registry pruner) waits on the
    same context and exits once it is cancelled.

    A context created with ``timeout`` cancels itself once the deadline
    passes. Child contexts are cancelled together with their parent.
    """

    def __init__(
        self,
        timeout: int | float | None = None,
        parent: CancellationContext | None = None,
    ) -> None:
        self._cancelled = asyncio.Event()
        self._children: list[CancellationContext] = []
        self._timer: asyncio.TimerHandle | None = None
        self._deadline: float | None = None
        self.reason: str | None = None

        if parent is not None and parent.deadline is not None:
            self._deadline = parent.deadline

        if timeout is not None and timeout > 0:
            deadline = time.monotonic() + timeout
            if self._deadline is None or deadline < self._deadline:
                self._deadline = deadline

        if parent is not None:
            parent._children.append(self)

            if parent.cancelled:
                self.cancel(parent.reason)

        if self._deadline is not None and not self.cancelled:
            try:
                asyncio.get_running_loop()

            except RuntimeError:
                # Built outside a loop, so wait() arms the timer later.
                return

            self._arm_timer()

    @property
    def cancelled(self) -> bool:
        if not self._cancelled.is_set() and self.remaining() == 0:
            self.cancel("deadline exceeded")

        return self._cancelled.is_set()

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def remaining(self) -> float | None:
        if self._deadline is None:
            return None

        return max(self._deadline - time.monotonic(), 0)

    def child(self, timeout: int | float | None = None) -> CancellationContext:
        return CancellationContext(
            timeout=timeout,
            parent=self,
        )

    def cancel(self, reason: str | None = None):
        if self._cancelled.is_set():
            return

        self.reason = reason or "context cancelled"

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        self._cancelled.set()

        for child in self._children:
            child.cancel(self.reason)

        self._children.clear()

    async def wait(self, timeout: int | float | None = None) -> bool:
        """
        Wait until the context is cancelled. Returns ``True`` if it was,
        ``False`` if ``timeout`` elapsed first.
        """
        if self.cancelled:
            return True

        self._arm_timer()

        if timeout is None:
            await self._cancelled.wait()
            return True

        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout=timeout)

        except asyncio.TimeoutError:
            return False

        return True

    def _arm_timer(self):
        if self._timer is not None or self._deadline is None:
            return

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(
            self.remaining(),
            self.cancel,
            "deadline exceeded",
        )
