import asyncio


class SeenMessageRegistry:
    """
    Highest flow tag sequence seen per origin. Only strictly increasing
    sequences are admitted, so a late copy of an older message is dropped
    as well as exact repeats.
    """

    def __init__(self) -> None:
        self._seen: dict[str, int] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._seen)

    def last_seen(self, origin: str) -> int | None:
        return self._seen.get(origin)

    def snapshot(self) -> dict[str, int]:
        return dict(self._seen)

    async def admit(self, origin: str, sequence: int) -> bool:
        async with self._lock:
            last_seen = self._seen.get(origin)
            if last_seen is not None and last_seen >= sequence:
                return False

            self._seen[origin] = sequence
            return True

    async def prune(self, threshold: int) -> int:
        """
        Drop every entry once the registry grows past ``threshold``.
        Returns the number of entries removed.
        """
        async with self._lock:
            count = len(self._seen)
            if count <= threshold:
                return 0

            self._seen = {}
            return count
