import asyncio
import socket

from cotlink.context import CancellationContext
from cotlink.flow_tags import (
    FlowTagContext,
    FlowTagRelay,
    MessageSkipped,
    RegistryPruner,
    SeenMessageRegistry,
)
from cotlink.transport.base_transport import Transport
from cotlink.transport.constants import MAX_DATAGRAM_SIZE
from cotlink.transport.errors import (
    AlreadyConnected,
    ConnectionCancelled,
    NoSuitableInterface,
    NotConnected,
)
from cotlink.transport.models import ConnectionConfig, ConnectionType
from cotlink.transport.supervision import until_cancelled

from .group_socket import open_group_socket
from .interface_selector import select_multicast_interface
from .multicast_interface import MulticastInterface


class MulticastTransport(Transport):
    """
    Joins a multicast group and runs every payload through the flow-tag
    relay. Outgoing CoT events are tagged with this client's origin and a
    sequence number. Incoming events that originated here, or that repeat
    a sequence already seen from their origin, raise ``MessageSkipped``
    instead of being returned.
    """

    connection_type = ConnectionType.MULTICAST

    def __init__(
        self,
        config: ConnectionConfig,
        flow_context: FlowTagContext | None = None,
    ) -> None:
        super().__init__(config)

        self.registry = SeenMessageRegistry()
        self.relay = FlowTagRelay(
            config.client_id,
            self.registry,
            flow_context=flow_context,
        )

        self.pruner = RegistryPruner(
            self.registry,
            interval=config.prune_interval,
            threshold=config.prune_threshold,
        )

        self._socket: socket.socket | None = None
        self._group_address: tuple | None = None
        self._interface: MulticastInterface | None = None

    @property
    def host(self) -> str:
        return self._config.multicast_address

    @property
    def port(self) -> int:
        return self._config.multicast_port

    @property
    def interface(self) -> MulticastInterface | None:
        return self._interface

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
                        family=socket.AF_INET,
                        type=socket.SOCK_DGRAM,
                    ),
                    timeout=self._dial_timeout(context),
                ),
                context,
            )

            group_address = addresses[0][4]
            interface = self._select_interface()

            await self._log_debug(
                f"Joining group {self.host}:{self.port} on interface {interface.name} ({interface.address})"
            )

            group_socket = self._open_group_socket(
                group_address[0],
                self.port,
                interface,
            )

        except (OSError, TimeoutError, ConnectionCancelled, NoSuitableInterface) as err:
            await self._log_error(f"Failed to join multicast group {self.host}:{self.port}", err)
            raise

        self._socket = group_socket
        self._group_address = group_address
        self._interface = interface

        self.pruner.start(context)

        await self._log_info(f"Joined multicast group {self.host}:{self.port}")

    async def disconnect(self):
        group_socket = self._socket
        if group_socket is None:
            raise NotConnected()

        self._socket = None
        self._group_address = None
        self._interface = None

        await self.pruner.stop()
        group_socket.close()

        await self._log_debug(f"Left multicast group {self.host}:{self.port}")

    async def send(self, data: bytes):
        group_socket = self._socket
        group_address = self._group_address
        if group_socket is None or group_address is None:
            raise NotConnected()

        payload = await self.relay.tag_outgoing(data)

        loop = asyncio.get_running_loop()

        await asyncio.wait_for(
            loop.sock_sendto(group_socket, payload, group_address),
            timeout=self._timeout(self._config.write_timeout),
        )

    async def receive(self) -> bytes:
        group_socket = self._socket
        if group_socket is None:
            raise NotConnected()

        loop = asyncio.get_running_loop()

        data = await asyncio.wait_for(
            loop.sock_recv(group_socket, MAX_DATAGRAM_SIZE),
            timeout=self._timeout(self._config.read_timeout),
        )

        decision, flow_tags = await self.relay.classify(data)
        if decision.suppressed:
            raise MessageSkipped(
                decision,
                flow_tags.origin,
                flow_tags.sequence,
            )

        return data

    def _select_interface(self) -> MulticastInterface:
        return select_multicast_interface()

    def _open_group_socket(
        self,
        group_address: str,
        port: int,
        interface: MulticastInterface,
    ) -> socket.socket:
        return open_group_socket(
            group_address,
            port,
            interface,
        )
