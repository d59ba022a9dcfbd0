from enum import Enum


class ConnectionType(Enum):
    TCP = "tcp"
    TLS = "tls"
    UDP = "udp"
    MULTICAST = "multicast"
