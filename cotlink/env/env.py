from __future__ import annotations
from pydantic import BaseModel, StrictBool, StrictStr, StrictInt
from typing import Callable, Dict, Literal, Union

from .time_parser import TimeParser

PrimaryType = Union[str, int, float, bytes, bool]


def _to_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Env(BaseModel):
    COTLINK_CLIENT_ID: StrictStr = "cotlink-client"
    COTLINK_DIAL_TIMEOUT: StrictStr = "10s"
    COTLINK_READ_TIMEOUT: StrictStr = "30s"
    COTLINK_WRITE_TIMEOUT: StrictStr = "10s"
    COTLINK_KEEP_ALIVE: StrictStr = "0s"
    COTLINK_TCP_USER_TIMEOUT: StrictStr = "0s"
    COTLINK_MULTICAST_ADDRESS: StrictStr = "239.2.3.1"
    COTLINK_MULTICAST_PORT: StrictInt = 6969
    COTLINK_FLOW_TAG_PRUNE_INTERVAL: StrictStr = "5m"
    COTLINK_FLOW_TAG_PRUNE_THRESHOLD: StrictInt = 1000
    COTLINK_SKIP_TLS_VERIFY: StrictBool = False
    COTLINK_LOG_LEVEL: Literal[
        "trace", "debug", "info", "warn", "error", "critical", "fatal"
    ] = "info"
    COTLINK_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    COTLINK_LOGS_DIRECTORY: StrictStr | None = None

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "COTLINK_CLIENT_ID": str,
            "COTLINK_DIAL_TIMEOUT": str,
            "COTLINK_READ_TIMEOUT": str,
            "COTLINK_WRITE_TIMEOUT": str,
            "COTLINK_KEEP_ALIVE": str,
            "COTLINK_TCP_USER_TIMEOUT": str,
            "COTLINK_MULTICAST_ADDRESS": str,
            "COTLINK_MULTICAST_PORT": int,
            "COTLINK_FLOW_TAG_PRUNE_INTERVAL": str,
            "COTLINK_FLOW_TAG_PRUNE_THRESHOLD": int,
            "COTLINK_SKIP_TLS_VERIFY": _to_bool,
            "COTLINK_LOG_LEVEL": str,
            "COTLINK_LOG_OUTPUT": str,
            "COTLINK_LOGS_DIRECTORY": str,
        }

    def get_timeouts(self) -> dict[str, float]:
        """Timeout settings in seconds, keyed by ConnectionConfig field."""
        return {
            'dial_timeout': TimeParser(self.COTLINK_DIAL_TIMEOUT).time,
            'read_timeout': TimeParser(self.COTLINK_READ_TIMEOUT).time,
            'write_timeout': TimeParser(self.COTLINK_WRITE_TIMEOUT).time,
            'keep_alive': TimeParser(self.COTLINK_KEEP_ALIVE).time,
            'tcp_user_timeout': TimeParser(self.COTLINK_TCP_USER_TIMEOUT).time,
        }

    def get_flow_tag_pruning(self) -> dict[str, float | int]:
        return {
            'prune_interval': TimeParser(self.COTLINK_FLOW_TAG_PRUNE_INTERVAL).time,
            'prune_threshold': self.COTLINK_FLOW_TAG_PRUNE_THRESHOLD,
        }

    def get_logging_config(self) -> dict[str, str | None]:
        """Keyword arguments for ``LoggingConfig.update()``."""
        return {
            'log_directory': self.COTLINK_LOGS_DIRECTORY,
            'log_level': self.COTLINK_LOG_LEVEL,
            'log_output': self.COTLINK_LOG_OUTPUT,
        }
