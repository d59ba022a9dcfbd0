from .logger import (
    Logger as Logger,
    close_streams as close_streams,
    get_stream as get_stream,
)
from .logger_stream import LoggerStream as LoggerStream
