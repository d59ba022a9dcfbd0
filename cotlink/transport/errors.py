from cotlink.flow_tags import MessageSkipped as MessageSkipped


class TransportError(Exception):
    pass


class AlreadyConnected(TransportError):
    def __init__(self, message: str = "client is already connected") -> None:
        super().__init__(message)


class NotConnected(TransportError):
    def __init__(self, message: str = "client is not connected") -> None:
        super().__init__(message)


class TransportConfigurationError(TransportError):
    pass


class UnsupportedConnectionType(TransportConfigurationError):
    pass


class CertificateConfigurationError(TransportConfigurationError):
    pass


class CertificateLoadError(TransportConfigurationError):
    pass


class NoSuitableInterface(TransportConfigurationError):
    def __init__(self, message: str = "no suitable multicast interface found") -> None:
        super().__init__(message)


class ConnectionClosed(TransportError):
    def __init__(self, message: str = "connection closed") -> None:
        super().__init__(message)


class ConnectionCancelled(TransportError):
    def __init__(self, reason: str | None = None) -> None:
        super().__init__(reason or "context cancelled")
        self.reason = reason
