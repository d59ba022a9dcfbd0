import asyncio
from typing import Awaitable, Callable, TypeVar

from cotlink.context import CancellationContext
from cotlink.transport.errors import ConnectionCancelled

T = TypeVar("T")


class ConnectionSupervisor:
    """
    Watches the connect context of one stream connection and runs the
    transport's close callback the moment the context is cancelled, which
    unblocks any read or write still waiting on the socket.
    """

    def __init__(self) -> None:
        self._task: asyncio.Task | None = None

    @property
    def watching(self) -> bool:
        return self._task is not None and self._task.done() is False

    def watch(
        self,
        context: CancellationContext,
        on_cancel: Callable[[], Awaitable[None]],
    ) -> asyncio.Task:
        if self.watching:
            raise RuntimeError("supervisor is already watching a connection")

        self._task = asyncio.ensure_future(
            self._supervise(context, on_cancel)
        )

        return self._task

    async def stop(self):
        task = self._task
        self._task = None

        if task is None or task.done():
            return

        task.cancel()

        try:
            await task

        except asyncio.CancelledError:
            pass

    async def _supervise(
        self,
        context: CancellationContext,
        on_cancel: Callable[[], Awaitable[None]],
    ):
        await context.wait()
        await on_cancel()


async def until_cancelled(
    awaitable: Awaitable[T],
    context: CancellationContext,
) -> T:
    """
    Await ``awaitable`` unless ``context`` is cancelled first, in which case
    the pending work is cancelled and ``ConnectionCancelled`` is raised.
    """
    if context.cancelled:
        raise ConnectionCancelled(context.reason)

    work = asyncio.ensure_future(awaitable)
    cancellation = asyncio.ensure_future(context.wait())

    try:
        await asyncio.wait(
            [work, cancellation],
            return_when=asyncio.FIRST_COMPLETED,
        )

    except asyncio.CancelledError:
        work.cancel()
        raise

    finally:
        cancellation.cancel()

    if work.done():
        return work.result()

    work.cancel()

    try:
        await work

    except asyncio.CancelledError:
        pass

    raise ConnectionCancelled(context.reason)
