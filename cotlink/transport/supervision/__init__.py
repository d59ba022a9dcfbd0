from .connection_supervisor import (
    ConnectionSupervisor as ConnectionSupervisor,
    until_cancelled as until_cancelled,
)
