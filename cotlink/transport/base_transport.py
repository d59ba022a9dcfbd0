from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Self

from cotlink.context import CancellationContext
from cotlink.logging import Logger

from .logging_models import (
    TransportDebug,
    TransportError as TransportErrorEntry,
    TransportInfo,
    TransportWarning,
)
from .models import ConnectionConfig, ConnectionType


class Transport(ABC):
    """
    A single client connection to a CoT peer or multicast group.

    Transports start disconnected. ``connect()`` opens the socket,
    ``send()`` and ``receive()`` move one unframed buffer at a time, and
    ``disconnect()`` or cancellation of the connect context closes it
    again. A transport never retries on its own.
    """

    connection_type: ConnectionType

    def __init__(self, config: ConnectionConfig) -> None:
        self._config = config
        self._logger = Logger("transport")

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def host(self) -> str:
        return self._config.address

    @property
    def port(self) -> int:
        return self._config.target_port

    @abstractmethod
    async def connect(self, context: CancellationContext | None = None):
        ...

    @abstractmethod
    async def disconnect(self):
        ...

    @abstractmethod
    async def send(self, data: bytes):
        ...

    @abstractmethod
    async def receive(self) -> bytes:
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        ...

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(self, *_):
        if self.is_connected():
            await self.disconnect()

    def _timeout(self, timeout: float | None) -> float | None:
        if not timeout:
            return None

        return timeout

    def _dial_timeout(self, context: CancellationContext) -> float | None:
        timeout = self._timeout(self._config.dial_timeout)
        remaining = context.remaining()

        if remaining is None:
            return timeout

        if timeout is None:
            return remaining

        return min(timeout, remaining)

    async def _log_debug(self, message: str):
        await self._logger.log(
            TransportDebug(
                message=message,
                transport=self.connection_type.value,
                host=self.host,
                port=self.port,
                client_id=self._config.client_id,
            )
        )

    async def _log_info(self, message: str):
        await self._logger.log(
            TransportInfo(
                message=message,
                transport=self.connection_type.value,
                host=self.host,
                port=self.port,
                client_id=self._config.client_id,
            )
        )

    async def _log_warning(self, message: str):
        await self._logger.log(
            TransportWarning(
                message=message,
                transport=self.connection_type.value,
                host=self.host,
                port=self.port,
                client_id=self._config.client_id,
            )
        )

    async def _log_error(self, message: str, error: Exception):
        await self._logger.log(
            TransportErrorEntry(
                message=message,
                transport=self.connection_type.value,
                host=self.host,
                port=self.port,
                client_id=self._config.client_id,
                error=str(error),
            )
        )
