"""
Shared fixtures: localhost echo servers for the stream and datagram
transports, and a throwaway certificate authority for TLS.
"""

import asyncio
import datetime
import ipaddress
import ssl
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from cotlink.flow_tags import FlowTagContext, SequenceCounter, teardown_flow_context


P12_PASSWORD = "cotlink-test"


@dataclass
class CertificateFiles:
    ca_file: str
    server_cert: str
    server_key: str
    client_cert: str
    client_key: str
    client_p12: str
    p12_password: str


def _name(common_name: str) -> x509.Name:
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def _issue_certificate(
    subject_key: ec.EllipticCurvePrivateKey,
    common_name: str,
    issuer_key: ec.EllipticCurvePrivateKey,
    issuer_name: x509.Name,
    is_ca: bool = False,
    alternative_names: list[x509.GeneralName] | None = None,
) -> x509.Certificate:
    now = datetime.datetime.now(datetime.UTC)

    builder = (
        x509.CertificateBuilder()
        .subject_name(_name(common_name))
        .issuer_name(issuer_name)
        .public_key(subject_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(minutes=5))
        .not_valid_after(now + datetime.timedelta(days=1))
        .add_extension(
            x509.BasicConstraints(ca=is_ca, path_length=None),
            critical=True,
        )
        .add_extension(
            x509.SubjectKeyIdentifier.from_public_key(subject_key.public_key()),
            critical=False,
        )
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(issuer_key.public_key()),
            critical=False,
        )
    )

    if is_ca:
        builder = builder.add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=False,
                key_encipherment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=True,
                crl_sign=True,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )

    if alternative_names:
        builder = builder.add_extension(
            x509.SubjectAlternativeName(alternative_names),
            critical=False,
        )

    return builder.sign(issuer_key, hashes.SHA256())


def _write_certificate(path, certificate: x509.Certificate) -> str:
    path.write_bytes(certificate.public_bytes(serialization.Encoding.PEM))
    return str(path)


def _write_key(path, key: ec.EllipticCurvePrivateKey) -> str:
    path.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return str(path)


@pytest.fixture
def certificate_files(tmp_path) -> CertificateFiles:
    ca_key = ec.generate_private_key(ec.SECP256R1())
    ca_name = _name("cotlink test ca")
    ca_certificate = _issue_certificate(
        ca_key,
        "cotlink test ca",
        ca_key,
        ca_name,
        is_ca=True,
    )

    server_key = ec.generate_private_key(ec.SECP256R1())
    server_certificate = _issue_certificate(
        server_key,
        "localhost",
        ca_key,
        ca_name,
        alternative_names=[
            x509.DNSName("localhost"),
            x509.IPAddress(ipaddress.ip_address("127.0.0.1")),
        ],
    )

    client_key = ec.generate_private_key(ec.SECP256R1())
    client_certificate = _issue_certificate(
        client_key,
        "cotlink-client",
        ca_key,
        ca_name,
    )

    client_p12 = tmp_path / "client.p12"
    client_p12.write_bytes(
        pkcs12.serialize_key_and_certificates(
            b"cotlink-client",
            client_key,
            client_certificate,
            [ca_certificate],
            serialization.BestAvailableEncryption(P12_PASSWORD.encode()),
        )
    )

    return CertificateFiles(
        ca_file=_write_certificate(tmp_path / "ca.pem", ca_certificate),
        server_cert=_write_certificate(tmp_path / "server.pem", server_certificate),
        server_key=_write_key(tmp_path / "server.key", server_key),
        client_cert=_write_certificate(tmp_path / "client.pem", client_certificate),
        client_key=_write_key(tmp_path / "client.key", client_key),
        client_p12=str(client_p12),
        p12_password=P12_PASSWORD,
    )


class EchoServer:
    def __init__(self) -> None:
        self.server: asyncio.Server | None = None
        self.writers: list[asyncio.StreamWriter] = []
        self.port: int = 0

    async def start(self, ssl_context: ssl.SSLContext | None = None):
        self.server = await asyncio.start_server(
            self._handle,
            "127.0.0.1",
            0,
            ssl=ssl_context,
        )

        self.port = self.server.sockets[0].getsockname()[1]

    async def drop_clients(self):
        for writer in self.writers:
            writer.close()

        self.writers.clear()

    async def stop(self):
        await self.drop_clients()
        self.server.close()
        await self.server.wait_closed()

    async def _handle(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ):
        self.writers.append(writer)

        try:
            while data := await reader.read(8192):
                writer.write(data)
                await writer.drain()

        except (ConnectionError, ssl.SSLError):
            pass

        finally:
            writer.close()


class EchoDatagramProtocol(asyncio.DatagramProtocol):
    def __init__(self) -> None:
        self.transport: asyncio.DatagramTransport | None = None

    def connection_made(self, transport: asyncio.DatagramTransport):
        self.transport = transport

    def datagram_received(self, data: bytes, addr):
        self.transport.sendto(data, addr)


@pytest.fixture(autouse=True)
def reset_flow_context() -> Generator[None, None, None]:
    yield
    teardown_flow_context()


@pytest.fixture
def flow_context() -> FlowTagContext:
    return FlowTagContext(
        counter=SequenceCounter(),
        clock=lambda: 1_700_000_000_000,
    )


@pytest.fixture
async def tcp_echo_server() -> AsyncGenerator[EchoServer, None]:
    server = EchoServer()
    await server.start()
    yield server
    await server.stop()


@pytest.fixture
def server_tls_context(certificate_files: CertificateFiles) -> ssl.SSLContext:
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(
        certificate_files.server_cert,
        keyfile=certificate_files.server_key,
    )
    context.load_verify_locations(cafile=certificate_files.ca_file)
    context.verify_mode = ssl.CERT_OPTIONAL

    return context


@pytest.fixture
async def tls_echo_server(
    server_tls_context: ssl.SSLContext,
) -> AsyncGenerator[EchoServer, None]:
    server = EchoServer()
    await server.start(ssl_context=server_tls_context)
    yield server
    await server.stop()


@pytest.fixture
async def udp_echo_server() -> AsyncGenerator[int, None]:
    loop = asyncio.get_running_loop()
    transport, _ = await loop.create_datagram_endpoint(
        EchoDatagramProtocol,
        local_addr=("127.0.0.1", 0),
    )

    yield transport.get_extra_info("sockname")[1]

    transport.close()
