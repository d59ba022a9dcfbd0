from cotlink.flow_tags import FlowTagContext

from .base_transport import Transport
from .errors import UnsupportedConnectionType
from .models import ConnectionConfig, ConnectionType
from .multicast import MulticastTransport
from .tcp import TCPTransport
from .tls import TLSTransport
from .udp import UDPTransport


def create_transport(
    config: ConnectionConfig,
    flow_context: FlowTagContext | None = None,
) -> Transport:
    match config.connection_type:
        case ConnectionType.TCP:
            return TCPTransport(config)

        case ConnectionType.TLS:
            return TLSTransport(config)

        case ConnectionType.UDP:
            return UDPTransport(config)

        case ConnectionType.MULTICAST:
            return MulticastTransport(
                config,
                flow_context=flow_context,
            )

        case _:
            raise UnsupportedConnectionType(
                f"unsupported connection type: {config.connection_type}"
            )
