import msgspec


class TLSMaterial(msgspec.Struct, frozen=True):
    """
    Everything needed to rebuild a client SSL context. Certificates and keys
    are held as in-memory PEM blocks, read once when the material is loaded.
    """
    certificate_pem: bytes | None = None
    key_pem: bytes | None = None
    ca_data: str | None = None
    system_roots: bool = True
    skip_verify: bool = False
