"""
Multicast transport tests. Group membership needs a real multicast
interface, so interface selection and the group socket are replaced with
a plain localhost UDP socket; a second socket plays the remote peer.
"""

import asyncio
import socket

import pytest

from cotlink.context import CancellationContext
from cotlink.cot import FlowTags, XMLParser, new_event
from cotlink.flow_tags import FlowDecision, FlowTagContext
from cotlink.transport import (
    AlreadyConnected,
    ConnectionConfig,
    MessageSkipped,
    MulticastTransport,
    NoSuitableInterface,
    NotConnected,
    TransportError,
)
from cotlink.transport.multicast import MulticastInterface


CLIENT_ID = "multicast-client"


def event_bytes(flow_tags: FlowTags | None = None) -> bytes:
    event = new_event("a-f-G-U-C", "uid-1")
    event.detail.flow_tags = flow_tags

    return XMLParser().serialize(event)


def open_localhost_socket(self, group_address: str, port: int, interface: MulticastInterface):
    local = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    local.bind(("127.0.0.1", 0))
    local.setblocking(False)

    return local


@pytest.fixture
def peer():
    peer_socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    peer_socket.bind(("127.0.0.1", 0))
    peer_socket.setblocking(False)

    yield peer_socket

    peer_socket.close()


@pytest.fixture
def localhost_group(monkeypatch):
    monkeypatch.setattr(
        MulticastTransport,
        "_select_interface",
        lambda self: MulticastInterface(name="lo", address="127.0.0.1"),
    )

    monkeypatch.setattr(
        MulticastTransport,
        "_open_group_socket",
        open_localhost_socket,
    )


@pytest.fixture
async def transport(localhost_group, peer, flow_context: FlowTagContext):
    multicast = MulticastTransport(
        ConnectionConfig(
            connection_type="multicast",
            client_id=CLIENT_ID,
            multicast_address="127.0.0.1",
            multicast_port=peer.getsockname()[1],
            read_timeout=2,
        ),
        flow_context=flow_context,
    )

    await multicast.connect(CancellationContext())

    yield multicast

    if multicast.is_connected():
        await multicast.disconnect()


async def peer_receive(peer: socket.socket) -> bytes:
    loop = asyncio.get_running_loop()
    return await asyncio.wait_for(loop.sock_recv(peer, 65535), timeout=2)


async def peer_send(peer: socket.socket, transport: MulticastTransport, data: bytes):
    loop = asyncio.get_running_loop()
    await loop.sock_sendto(peer, data, transport.local_address)


class TestMulticastConnect:
    @pytest.mark.asyncio
    async def test_connect_starts_pruner(self, transport: MulticastTransport):
        assert transport.is_connected()
        assert transport.interface.address == "127.0.0.1"
        assert transport.pruner.running

    @pytest.mark.asyncio
    async def test_connect_twice_fails(self, transport: MulticastTransport):
        with pytest.raises(AlreadyConnected):
            await transport.connect()

    @pytest.mark.asyncio
    async def test_disconnect_stops_pruner(self, transport: MulticastTransport):
        await transport.disconnect()

        assert transport.is_connected() is False
        assert transport.pruner.running is False

        with pytest.raises(NotConnected):
            await transport.disconnect()

    @pytest.mark.asyncio
    async def test_no_suitable_interface(self, monkeypatch):
        def no_interface(self):
            raise NoSuitableInterface()

        monkeypatch.setattr(MulticastTransport, "_select_interface", no_interface)

        multicast = MulticastTransport(
            ConnectionConfig(
                connection_type="multicast",
                multicast_address="127.0.0.1",
            )
        )

        with pytest.raises(NoSuitableInterface):
            await multicast.connect()

        assert multicast.is_connected() is False
        assert multicast.pruner.running is False


class TestMulticastSend:
    @pytest.mark.asyncio
    async def test_tags_untagged_event(self, transport: MulticastTransport, peer):
        await transport.send(event_bytes())
        await transport.send(event_bytes())

        parser = XMLParser()
        first = parser.parse(await peer_receive(peer)).detail.flow_tags
        second = parser.parse(await peer_receive(peer)).detail.flow_tags

        assert first.origin == CLIENT_ID
        assert second.origin == CLIENT_ID
        assert second.sequence > first.sequence

    @pytest.mark.asyncio
    async def test_relays_foreign_event_with_hop(self, transport: MulticastTransport, peer):
        await transport.send(
            event_bytes(FlowTags(origin="peer", sequence=7, created_at=1))
        )

        flow_tags = XMLParser().parse(await peer_receive(peer)).detail.flow_tags

        assert flow_tags.origin == "peer"
        assert flow_tags.hops == [CLIENT_ID]

    @pytest.mark.asyncio
    async def test_sends_non_xml_unchanged(self, transport: MulticastTransport, peer):
        await transport.send(b"\x01\x02raw")

        assert await peer_receive(peer) == b"\x01\x02raw"


class TestMulticastReceive:
    @pytest.mark.asyncio
    async def test_returns_new_message(self, transport: MulticastTransport, peer):
        data = event_bytes(FlowTags(origin="other", sequence=789, created_at=1))
        await peer_send(peer, transport, data)

        assert await transport.receive() == data
        assert transport.registry.snapshot() == {"other": 789}

    @pytest.mark.asyncio
    async def test_skips_duplicate(self, transport: MulticastTransport, peer):
        await transport.registry.admit("other", 456)
        await peer_send(
            peer,
            transport,
            event_bytes(FlowTags(origin="other", sequence=456, created_at=1)),
        )

        with pytest.raises(MessageSkipped) as skipped:
            await transport.receive()

        assert skipped.value.reason == FlowDecision.DUPLICATE
        assert skipped.value.origin == "other"
        assert skipped.value.sequence == 456
        assert isinstance(skipped.value, TransportError) is False

    @pytest.mark.asyncio
    async def test_skips_own_message(self, transport: MulticastTransport, peer):
        await peer_send(
            peer,
            transport,
            event_bytes(FlowTags(origin=CLIENT_ID, sequence=1, created_at=1)),
        )

        with pytest.raises(MessageSkipped) as skipped:
            await transport.receive()

        assert skipped.value.reason == FlowDecision.SELF_ORIGINATED

    @pytest.mark.asyncio
    async def test_returns_untagged_and_raw_payloads(self, transport: MulticastTransport, peer):
        untagged = event_bytes()
        await peer_send(peer, transport, untagged)
        await peer_send(peer, transport, b"plain text")

        assert await transport.receive() == untagged
        assert await transport.receive() == b"plain text"
        assert len(transport.registry) == 0

    @pytest.mark.asyncio
    async def test_cancellation_stops_pruner_only(self, localhost_group, peer):
        multicast = MulticastTransport(
            ConnectionConfig(
                connection_type="multicast",
                multicast_address="127.0.0.1",
                multicast_port=peer.getsockname()[1],
                read_timeout=2,
            )
        )

        context = CancellationContext()
        await multicast.connect(context)

        context.cancel()
        await asyncio.sleep(0.01)

        assert multicast.pruner.running is False
        assert multicast.is_connected()

        await peer_send(peer, multicast, b"after cancel")
        assert await multicast.receive() == b"after cancel"

        await multicast.disconnect()
