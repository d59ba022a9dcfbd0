import asyncio
import socket

from cotlink.context import CancellationContext
from cotlink.transport.base_transport import Transport
from cotlink.transport.constants import MAX_DATAGRAM_SIZE
from cotlink.transport.errors import (
    AlreadyConnected,
    ConnectionCancelled,
    NotConnected,
)
from cotlink.transport.models import ConnectionConfig, ConnectionType
from cotlink.transport.supervision import until_cancelled


class UDPTransport(Transport):
    connection_type = ConnectionType.UDP

    def __init__(self, config: ConnectionConfig) -> None:
        super().__init__(config)

        self._socket: socket.socket | None = None
        self._remote_address: tuple | None = None

    @property
    def local_address(self) -> tuple | None:
        if self._socket is None:
            return None

        return self._socket.getsockname()

    def is_connected(self) -> bool:
        return self._socket is not None

    async def connect(self, context: CancellationContext | None = None):
        if self._socket is not None:
            raise AlreadyConnected()

        if context is None:
            context = CancellationContext()

        if context.cancelled:
            raise ConnectionCancelled(context.reason)

        loop = asyncio.get_running_loop()

        try:
            addresses = await until_cancelled(
                asyncio.wait_for(
                    loop.getaddrinfo(
                        self.host,
                        self.port,
                        type=socket.SOCK_DGRAM,
                    ),
                    timeout=self._dial_timeout(context),
                ),
                context,
            )

        except (OSError, TimeoutError, ConnectionCancelled) as err:
            await self._log_error(f"Failed to resolve {self.host}:{self.port}", err)
            raise

        family, socket_type, protocol, _, address = addresses[0]

        udp_socket = socket.socket(family, socket_type, protocol)

        try:
            udp_socket.setblocking(False)
            udp_socket.connect(address)

        except OSError as err:
            udp_socket.close()
            await self._log_error(f"Failed to open UDP socket to {self.host}:{self.port}", err)
            raise

        self._socket = udp_socket
        self._remote_address = address

        await self._log_info(f"Connected to {self.host}:{self.port}")

    async def disconnect(self):
        udp_socket = self._socket
        if udp_socket is None:
            raise NotConnected()

        self._socket = None
        self._remote_address = None

        udp_socket.close()

        await self._log_debug(f"Disconnected from {self.host}:{self.port}")

    async def send(self, data: bytes):
        udp_socket = self._socket
        if udp_socket is None:
            raise NotConnected()

        loop = asyncio.get_running_loop()

        await asyncio.wait_for(
            loop.sock_sendall(udp_socket, data),
            timeout=self._timeout(self._config.write_timeout),
        )

    async def receive(self) -> bytes:
        udp_socket = self._socket
        if udp_socket is None:
            raise NotConnected()

        loop = asyncio.get_running_loop()

        return await asyncio.wait_for(
            loop.sock_recv(udp_socket, MAX_DATAGRAM_SIZE),
            timeout=self._timeout(self._config.read_timeout),
        )
