import ssl
from typing import Any

from cotlink.context import CancellationContext
from cotlink.transport.certificates import clone_tls_context, load_tls_context
from cotlink.transport.errors import CertificateConfigurationError
from cotlink.transport.models import ConnectionConfig, ConnectionType
from cotlink.transport.tcp import TCPTransport


class TLSTransport(TCPTransport):
    """
    TCP transport wrapped in TLS. Certificate material is loaded once at
    construction, so a misconfigured transport fails before any connect,
    and a fresh SSL context is derived from it for every handshake.
    """

    connection_type = ConnectionType.TLS

    def __init__(self, config: ConnectionConfig) -> None:
        super().__init__(config)
        self._tls_context = self._create_tls_context()

    @property
    def tls_context(self) -> ssl.SSLContext:
        return self._tls_context

    async def connect(self, context: CancellationContext | None = None):
        if self._config.skip_tls_verify and self._config.tls_context is None:
            await self._log_warning(
                "Server certificate verification is disabled - connection is encrypted but not authenticated"
            )

        await super().connect(context)

    async def disconnect(self):
        if self._writer is None:
            return

        try:
            await super().disconnect()

        except (OSError, ssl.SSLError, TimeoutError) as err:
            await self._log_warning(f"Error closing TLS connection - {err}")

    def _create_tls_context(self) -> ssl.SSLContext:
        if self._config.tls_context is not None:
            return self._config.tls_context

        if not self._config.cert_file and not self._config.skip_tls_verify:
            raise CertificateConfigurationError(
                "TLS connection requires either a certificate file or the skip-verify option"
            )

        return load_tls_context(
            cert_file=self._config.cert_file,
            key_file=self._config.key_file,
            password=self._config.p12_password,
            ca_file=self._config.ca_file,
            skip_verify=self._config.skip_tls_verify,
        )

    def _stream_options(self) -> dict[str, Any]:
        return {
            'ssl': clone_tls_context(self._tls_context),
            'server_hostname': self.host,
        }
