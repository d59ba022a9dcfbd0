from .config import LoggingConfig as LoggingConfig, LogOutput as LogOutput
from .models import (
    Entry as Entry,
    Log as Log,
    LogLevel as LogLevel,
    LogLevelName as LogLevelName,
)
from .streams import (
    Logger as Logger,
    LoggerStream as LoggerStream,
    close_streams as close_streams,
    get_stream as get_stream,
)
