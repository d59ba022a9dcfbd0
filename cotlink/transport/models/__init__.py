from .connection_config import ConnectionConfig as ConnectionConfig
from .connection_type import ConnectionType as ConnectionType
