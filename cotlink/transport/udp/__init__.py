from .udp_transport import UDPTransport as UDPTransport
