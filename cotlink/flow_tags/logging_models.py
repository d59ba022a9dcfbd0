"""
Logging models for flow tag relaying and registry pruning.
"""

from cotlink.logging.models import Entry, LogLevel


class FlowTagTrace(Entry, kw_only=True):
    client_id: str
    origin: str | None = None
    sequence: int | None = None
    level: LogLevel = LogLevel.TRACE


class FlowTagDebug(Entry, kw_only=True):
    client_id: str
    origin: str | None = None
    sequence: int | None = None
    level: LogLevel = LogLevel.DEBUG


class RegistryPrunerDebug(Entry, kw_only=True):
    entries: int
    threshold: int
    level: LogLevel = LogLevel.DEBUG
