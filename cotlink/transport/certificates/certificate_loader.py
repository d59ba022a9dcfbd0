import os
import pathlib
import ssl
import tempfile

from cryptography import x509
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    pkcs12,
)

from cotlink.transport.errors import (
    CertificateConfigurationError,
    CertificateLoadError,
)

from .tls_material import TLSMaterial


PKCS12_SUFFIXES = (".p12", ".pfx")


class ClientTLSContext(ssl.SSLContext):
    material: TLSMaterial


def is_pkcs12(path: str) -> bool:
    return path.lower().endswith(PKCS12_SUFFIXES)


def load_tls_context(
    cert_file: str | None = None,
    key_file: str | None = None,
    password: str | None = None,
    ca_file: str | None = None,
    skip_verify: bool = False,
) -> ClientTLSContext:
    if not cert_file:
        if not skip_verify:
            raise CertificateConfigurationError(
                "TLS connection requires either a certificate file or the skip-verify option"
            )

        return build_tls_context(
            TLSMaterial(
                system_roots=False,
                skip_verify=True,
            )
        )

    if is_pkcs12(cert_file):
        material = _load_pkcs12_material(
            cert_file,
            password=password,
            ca_file=ca_file,
            skip_verify=skip_verify,
        )

    else:
        material = _load_pem_material(
            cert_file,
            key_file=key_file,
            ca_file=ca_file,
            skip_verify=skip_verify,
        )

    try:
        return build_tls_context(material)

    except (OSError, ssl.SSLError) as err:
        raise CertificateLoadError(
            f"Failed to load client certificate {cert_file} - {err}"
        ) from err


def clone_tls_context(context: ssl.SSLContext) -> ssl.SSLContext:
    """
    Return a fresh context with the same settings as ``context`` so every
    handshake starts from clean session state. Contexts built elsewhere
    carry no rebuild recipe and are returned as-is.
    """
    if isinstance(context, ClientTLSContext):
        return build_tls_context(context.material)

    return context


def build_tls_context(material: TLSMaterial) -> ClientTLSContext:
    context = ClientTLSContext(ssl.PROTOCOL_TLS_CLIENT)
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    context.material = material

    if material.skip_verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    elif material.system_roots:
        context.load_default_certs(ssl.Purpose.SERVER_AUTH)

    if material.ca_data:
        context.load_verify_locations(cadata=material.ca_data)

    if material.certificate_pem and material.key_pem:
        _load_cert_chain_from_memory(
            context,
            material.certificate_pem,
            material.key_pem,
        )

    return context


def _load_pem_material(
    cert_file: str,
    key_file: str | None = None,
    ca_file: str | None = None,
    skip_verify: bool = False,
) -> TLSMaterial:
    if not key_file:
        raise CertificateConfigurationError(
            "PEM certificate format requires a key file"
        )

    ca_data: str | None = None
    if ca_file:
        ca_data = _read_ca_file(ca_file)

    return TLSMaterial(
        certificate_pem=_read_pem_file(cert_file, "certificate"),
        key_pem=_read_pem_file(key_file, "key"),
        ca_data=ca_data,
        system_roots=ca_data is None,
        skip_verify=skip_verify,
    )


def _load_pkcs12_material(
    cert_file: str,
    password: str | None = None,
    ca_file: str | None = None,
    skip_verify: bool = False,
) -> TLSMaterial:
    try:
        data = pathlib.Path(cert_file).read_bytes()

    except OSError as err:
        raise CertificateLoadError(
            f"Failed to read P12 file {cert_file} - {err}"
        ) from err

    try:
        bundle = pkcs12.load_pkcs12(
            data,
            password.encode() if password else None,
        )

    except (ValueError, TypeError) as err:
        raise CertificateLoadError(
            f"Failed to decode P12 data from {cert_file} - {err}"
        ) from err

    certificates: list[x509.Certificate] = []
    if bundle.cert:
        certificates.append(bundle.cert.certificate)

    certificates.extend(
        additional.certificate for additional in bundle.additional_certs
    )

    if bundle.key is None or len(certificates) < 1:
        raise CertificateLoadError(
            f"P12 file {cert_file} must contain both a certificate and a private key"
        )

    leaf, *chain = certificates

    # The trust pool always holds the leaf next to any bundled chain certs.
    pool = [
        certificate.public_bytes(Encoding.PEM).decode()
        for certificate in [leaf, *chain]
    ]

    if ca_file:
        pool.append(_read_ca_file(ca_file))

    certificate_pem = b"".join(
        certificate.public_bytes(Encoding.PEM)
        for certificate in [leaf, *chain]
    )

    key_pem = bundle.key.private_bytes(
        Encoding.PEM,
        PrivateFormat.PKCS8,
        NoEncryption(),
    )

    return TLSMaterial(
        certificate_pem=certificate_pem,
        key_pem=key_pem,
        ca_data="".join(pool),
        system_roots=False,
        skip_verify=skip_verify,
    )


def _read_pem_file(path: str, kind: str) -> bytes:
    try:
        return pathlib.Path(path).read_bytes()

    except OSError as err:
        raise CertificateLoadError(
            f"Failed to read PEM {kind} file {path} - {err}"
        ) from err


def _read_ca_file(ca_file: str) -> str:
    try:
        return pathlib.Path(ca_file).read_text()

    except (OSError, UnicodeDecodeError) as err:
        raise CertificateLoadError(
            f"Failed to read CA file {ca_file} - {err}"
        ) from err


def _load_cert_chain_from_memory(
    context: ssl.SSLContext,
    certificate_pem: bytes,
    key_pem: bytes,
):
    # ssl only loads key pairs from disk. mkstemp creates the file 0600 and
    # it is removed as soon as the chain is loaded.
    descriptor, path = tempfile.mkstemp(suffix=".pem")

    try:
        with os.fdopen(descriptor, "wb") as chain_file:
            chain_file.write(key_pem)
            chain_file.write(certificate_pem)

        context.load_cert_chain(path)

    finally:
        os.unlink(path)
