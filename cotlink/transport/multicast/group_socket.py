import socket
import struct

from .multicast_interface import MulticastInterface


def open_group_socket(
    group_address: str,
    port: int,
    interface: MulticastInterface,
) -> socket.socket:
    """
    Open a non-blocking UDP socket bound to ``port`` that has joined
    ``group_address`` on ``interface`` and sends through it. Multicast
    loopback is disabled.
    """
    group_socket = socket.socket(
        socket.AF_INET,
        socket.SOCK_DGRAM,
        socket.IPPROTO_UDP,
    )

    try:
        group_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        if hasattr(socket, "SO_REUSEPORT"):
            group_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)

        group_socket.bind(("", port))

        interface_address = socket.inet_aton(interface.address)
        membership = struct.pack(
            "4s4s",
            socket.inet_aton(group_address),
            interface_address,
        )

        group_socket.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership)
        group_socket.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, interface_address)
        group_socket.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_LOOP, 0)
        group_socket.setblocking(False)

    except OSError:
        group_socket.close()
        raise

    return group_socket
