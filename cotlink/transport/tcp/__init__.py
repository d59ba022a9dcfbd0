from .tcp_transport import TCPTransport as TCPTransport
