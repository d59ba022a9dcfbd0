"""
Logging models for transports.

Each model identifies the transport kind, its target and the local client.
"""

from cotlink.logging.models import Entry, LogLevel


class TransportEntry(Entry, kw_only=True):
    transport: str
    host: str
    port: int
    client_id: str


class TransportDebug(TransportEntry, kw_only=True):
    level: LogLevel = LogLevel.DEBUG


class TransportInfo(TransportEntry, kw_only=True):
    level: LogLevel = LogLevel.INFO


class TransportWarning(TransportEntry, kw_only=True):
    level: LogLevel = LogLevel.WARN


class TransportError(TransportEntry, kw_only=True):
    error: str
    level: LogLevel = LogLevel.ERROR
