import asyncio

from cotlink.context import CancellationContext
from cotlink.logging import Logger

from .logging_models import RegistryPrunerDebug
from .seen_message_registry import SeenMessageRegistry


DEFAULT_PRUNE_INTERVAL = 300.0
DEFAULT_PRUNE_THRESHOLD = 1000


class RegistryPruner:
    """
    Periodically resets a SeenMessageRegistry once it grows past
    ``threshold`` entries. The whole registry is cleared rather than
    evicting selectively, so a recently seen message may be processed
    again right after a reset.
    """

    def __init__(
        self,
        registry: SeenMessageRegistry,
        interval: int | float = DEFAULT_PRUNE_INTERVAL,
        threshold: int = DEFAULT_PRUNE_THRESHOLD,
    ) -> None:
        self.registry = registry
        self.interval = interval
        self.threshold = threshold
        self._task: asyncio.Task | None = None
        self._logger = Logger("flow_tags")

    @property
    def running(self) -> bool:
        return self._task is not None and self._task.done() is False

    def start(self, context: CancellationContext) -> asyncio.Task:
        if self.running:
            return self._task

        self._task = asyncio.ensure_future(self._run(context))
        return self._task

    async def stop(self):
        if self._task is None:
            return

        task = self._task
        self._task = None

        if task.done() is False:
            task.cancel()

        try:
            await task

        except asyncio.CancelledError:
            pass

    async def tick(self) -> int:
        pruned = await self.registry.prune(self.threshold)

        if pruned > 0:
            await self._logger.log(
                RegistryPrunerDebug(
                    message="Pruned seen messages",
                    entries=pruned,
                    threshold=self.threshold,
                )
            )

        return pruned

    async def _run(self, context: CancellationContext):
        while context.cancelled is False:
            if await context.wait(timeout=self.interval):
                return

            await self.tick()
