from .certificate_loader import (
    ClientTLSContext as ClientTLSContext,
    build_tls_context as build_tls_context,
    clone_tls_context as clone_tls_context,
    is_pkcs12 as is_pkcs12,
    load_tls_context as load_tls_context,
)
from .tls_material import TLSMaterial as TLSMaterial
