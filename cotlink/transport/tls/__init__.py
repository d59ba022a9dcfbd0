from .tls_transport import TLSTransport as TLSTransport
