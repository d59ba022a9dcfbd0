import asyncio
import socket
from typing import Any

from cotlink.context import CancellationContext
from cotlink.transport.base_transport import Transport
from cotlink.transport.constants import MAX_STREAM_CHUNK, PENDING_DATA_POLL
from cotlink.transport.errors import (
    AlreadyConnected,
    ConnectionCancelled,
    ConnectionClosed,
    NotConnected,
)
from cotlink.transport.models import ConnectionConfig, ConnectionType
from cotlink.transport.sockopts import apply_keep_alive, apply_tcp_user_timeout
from cotlink.transport.supervision import ConnectionSupervisor, until_cancelled


class TCPTransport(Transport):
    connection_type = ConnectionType.TCP

    def __init__(self, config: ConnectionConfig) -> None:
        super().__init__(config)

        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._pending = b""
        self._supervisor = ConnectionSupervisor()

    def is_connected(self) -> bool:
        return self._writer is not None

    async def connect(self, context: CancellationContext | None = None):
        if self._writer is not None:
            raise AlreadyConnected()

        if context is None:
            context = CancellationContext()

        if context.cancelled:
            raise ConnectionCancelled(context.reason)

        await self._log_debug(f"Connecting to {self.host}:{self.port}")

        try:
            reader, writer = await until_cancelled(
                asyncio.wait_for(
                    self._dial(),
                    timeout=self._dial_timeout(context),
                ),
                context,
            )

        except (OSError, TimeoutError, ConnectionCancelled) as err:
            await self._log_error(f"Failed to connect to {self.host}:{self.port}", err)
            raise

        self._reader = reader
        self._writer = writer
        self._supervisor.watch(context, self._close_on_cancel)

        await self._log_info(f"Connected to {self.host}:{self.port}")

    async def disconnect(self):
        writer = self._writer
        if writer is None:
            raise NotConnected()

        self._reader = None
        self._pending = b""
        self._writer = None

        await self._supervisor.stop()

        writer.close()

        try:
            await asyncio.wait_for(
                writer.wait_closed(),
                timeout=self._timeout(self._config.write_timeout),
            )

        except TimeoutError:
            writer.transport.abort()
            raise

        await self._log_debug(f"Disconnected from {self.host}:{self.port}")

    async def send(self, data: bytes):
        writer = self._writer
        if writer is None:
            raise NotConnected()

        writer.write(data)

        await asyncio.wait_for(
            writer.drain(),
            timeout=self._timeout(self._config.write_timeout),
        )

    async def receive(self) -> bytes:
        reader = self._reader
        if reader is None:
            raise NotConnected()

        if self._pending:
            data, self._pending = self._pending, b""
            return data

        data = await asyncio.wait_for(
            reader.read(MAX_STREAM_CHUNK),
            timeout=self._timeout(self._config.read_timeout),
        )

        if not data:
            raise ConnectionClosed("connection closed by peer")

        return data

    async def has_pending_data(self) -> bool:
        """
        Check whether a ``receive()`` would return without waiting. Any data
        read while checking is held back and returned by the next
        ``receive()``.
        """
        reader = self._reader
        if reader is None:
            raise NotConnected()

        if self._pending:
            return True

        try:
            data = await asyncio.wait_for(
                reader.read(MAX_STREAM_CHUNK),
                timeout=PENDING_DATA_POLL,
            )

        except TimeoutError:
            return False

        if not data:
            raise ConnectionClosed("connection closed by peer")

        self._pending = data
        return True

    async def _dial(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        loop = asyncio.get_running_loop()

        addresses = await loop.getaddrinfo(
            self.host,
            self.port,
            type=socket.SOCK_STREAM,
        )

        tcp_socket = await self._connect_first(loop, addresses)

        try:
            apply_tcp_user_timeout(tcp_socket, self._config.tcp_user_timeout)

            return await asyncio.open_connection(
                sock=tcp_socket,
                limit=MAX_STREAM_CHUNK * 8,
                **self._stream_options(),
            )

        except BaseException:
            tcp_socket.close()
            raise

    async def _connect_first(
        self,
        loop: asyncio.AbstractEventLoop,
        addresses: list[tuple],
    ) -> socket.socket:
        """
        Try each resolved address in order and return the first connected
        socket. The last connect error is raised if every address fails.
        """
        last_error: OSError | None = None

        for family, socket_type, protocol, _, address in addresses:
            tcp_socket = socket.socket(family, socket_type, protocol)

            try:
                tcp_socket.setblocking(False)
                tcp_socket.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
                apply_keep_alive(tcp_socket, self._config.keep_alive)

                await loop.sock_connect(tcp_socket, address)
                return tcp_socket

            except OSError as err:
                tcp_socket.close()
                last_error = err

                await self._log_debug(f"Connect to {address} failed: {err}")

            except BaseException:
                tcp_socket.close()
                raise

        if last_error is None:
            raise OSError(f"no addresses resolved for {self.host}:{self.port}")

        raise last_error

    def _stream_options(self) -> dict[str, Any]:
        return {}

    async def _close_on_cancel(self):
        writer = self._writer
        if writer is None:
            return

        self._reader = None
        self._pending = b""
        self._writer = None

        # Abort rather than close so pending reads see EOF immediately.
        writer.transport.abort()

        await self._log_debug(f"Connection to {self.host}:{self.port} closed by cancellation")
