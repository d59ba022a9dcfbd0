from .base_transport import Transport as Transport
from .certificates import (
    clone_tls_context as clone_tls_context,
    load_tls_context as load_tls_context,
)
from .constants import (
    DEFAULT_MULTICAST_ADDRESS as DEFAULT_MULTICAST_ADDRESS,
    DEFAULT_MULTICAST_PORT as DEFAULT_MULTICAST_PORT,
    DEFAULT_TCP_PORT as DEFAULT_TCP_PORT,
    DEFAULT_TLS_PORT as DEFAULT_TLS_PORT,
    DEFAULT_UDP_PORT as DEFAULT_UDP_PORT,
)
from .create_transport import create_transport as create_transport
from .errors import (
    AlreadyConnected as AlreadyConnected,
    CertificateConfigurationError as CertificateConfigurationError,
    CertificateLoadError as CertificateLoadError,
    ConnectionCancelled as ConnectionCancelled,
    ConnectionClosed as ConnectionClosed,
    MessageSkipped as MessageSkipped,
    NoSuitableInterface as NoSuitableInterface,
    NotConnected as NotConnected,
    TransportConfigurationError as TransportConfigurationError,
    TransportError as TransportError,
    UnsupportedConnectionType as UnsupportedConnectionType,
)
from .models import (
    ConnectionConfig as ConnectionConfig,
    ConnectionType as ConnectionType,
)
from .multicast import MulticastTransport as MulticastTransport
from .supervision import ConnectionSupervisor as ConnectionSupervisor
from .tcp import TCPTransport as TCPTransport
from .tls import TLSTransport as TLSTransport
from .udp import UDPTransport as UDPTransport
