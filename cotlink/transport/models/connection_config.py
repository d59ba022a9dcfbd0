from __future__ import annotations

import ssl
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveFloat,
    StrictBool,
    StrictStr,
)

from cotlink.env import Env
from cotlink.flow_tags import DEFAULT_PRUNE_INTERVAL, DEFAULT_PRUNE_THRESHOLD
from cotlink.transport.constants import (
    DEFAULT_MULTICAST_ADDRESS,
    DEFAULT_MULTICAST_PORT,
    DEFAULT_TCP_PORT,
    DEFAULT_TLS_PORT,
    DEFAULT_UDP_PORT,
)

from .connection_type import ConnectionType


Port = Annotated[int, Field(ge=0, le=65535)]


class ConnectionConfig(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
    )

    address: StrictStr = "127.0.0.1"
    port: Port | None = None
    connection_type: ConnectionType = ConnectionType.TCP
    client_id: StrictStr = "cotlink-client"

    dial_timeout: NonNegativeFloat | None = None
    read_timeout: NonNegativeFloat | None = None
    write_timeout: NonNegativeFloat | None = None
    keep_alive: NonNegativeFloat | None = None
    tcp_user_timeout: NonNegativeFloat | None = None

    cert_file: StrictStr | None = None
    key_file: StrictStr | None = None
    p12_password: StrictStr | None = None
    ca_file: StrictStr | None = None
    skip_tls_verify: StrictBool = False
    tls_context: ssl.SSLContext | None = None

    multicast_address: StrictStr = DEFAULT_MULTICAST_ADDRESS
    multicast_port: Port = DEFAULT_MULTICAST_PORT
    prune_interval: PositiveFloat = DEFAULT_PRUNE_INTERVAL
    prune_threshold: NonNegativeInt = DEFAULT_PRUNE_THRESHOLD

    @property
    def target_port(self) -> int:
        if self.port:
            return self.port

        match self.connection_type:
            case ConnectionType.TLS:
                return DEFAULT_TLS_PORT

            case ConnectionType.UDP:
                return DEFAULT_UDP_PORT

            case ConnectionType.MULTICAST:
                return self.multicast_port

            case _:
                return DEFAULT_TCP_PORT

    @classmethod
    def from_env(
        cls,
        env: Env,
        **overrides: Any,
    ) -> ConnectionConfig:
        values: dict[str, Any] = {
            'client_id': env.COTLINK_CLIENT_ID,
            'multicast_address': env.COTLINK_MULTICAST_ADDRESS,
            'multicast_port': env.COTLINK_MULTICAST_PORT,
            'skip_tls_verify': env.COTLINK_SKIP_TLS_VERIFY,
        }

        values.update({
            name: timeout
            for name, timeout in env.get_timeouts().items()
            if timeout > 0
        })

        values.update(env.get_flow_tag_pruning())
        values.update(overrides)

        return cls(**values)
