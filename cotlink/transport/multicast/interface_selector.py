import socket

import psutil

from cotlink.transport.errors import NoSuitableInterface

from .multicast_interface import MulticastInterface


def _interface_flags(stats) -> set[str]:
    flags: str = getattr(stats, "flags", "") or ""
    return {
        flag.strip()
        for flag in flags.split(",")
        if flag.strip()
    }


def _ipv4_address(addresses) -> str | None:
    for address in addresses:
        if address.family == socket.AF_INET:
            return address.address

    return None


def select_multicast_interface() -> MulticastInterface:
    """
    Pick the first interface that is up, multicast capable, not loopback
    and carries an IPv4 address to join the group on.

    Platforms where psutil reports no interface flags fall back to treating
    every interface as multicast capable and detecting loopback by address.
    """
    interface_stats = psutil.net_if_stats()
    interface_addresses = psutil.net_if_addrs()

    for name, stats in interface_stats.items():
        if stats.isup is False:
            continue

        address = _ipv4_address(interface_addresses.get(name, []))
        if address is None:
            continue

        flags = _interface_flags(stats)

        if flags:
            if "multicast" not in flags or "loopback" in flags:
                continue

        elif address.startswith("127."):
            continue

        return MulticastInterface(
            name=name,
            address=address,
        )

    raise NoSuitableInterface()
