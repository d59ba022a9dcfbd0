import contextvars
from typing import Literal

from cotlink.logging.models import LogLevel, LogLevelName

LogOutput = Literal["stdout", "stderr"]

_log_level: contextvars.ContextVar[LogLevel] = contextvars.ContextVar(
    "_log_level",
    default=LogLevel.INFO,
)
_log_output: contextvars.ContextVar[LogOutput] = contextvars.ContextVar(
    "_log_output",
    default="stderr",
)
_log_directory: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "_log_directory",
    default=None,
)
_disabled_loggers: contextvars.ContextVar[frozenset[str]] = contextvars.ContextVar(
    "_disabled_loggers",
    default=frozenset(),
)


class LoggingConfig:
    """
    Process-wide logging settings. Values live in context variables, so a
    task that changes them affects only itself and the tasks it spawns.
    """

    def update(
        self,
        log_directory: str | None = None,
        log_level: LogLevelName | None = None,
        log_output: LogOutput | None = None,
    ):
        if log_directory:
            _log_directory.set(log_directory)

        if log_level:
            _log_level.set(LogLevel.from_name(log_level))

        if log_output:
            _log_output.set(log_output)

    def disable(self, logger_name: str):
        _disabled_loggers.set(_disabled_loggers.get() | {logger_name})

    def enable(self, logger_name: str):
        _disabled_loggers.set(_disabled_loggers.get() - {logger_name})

    def enabled(self, logger_name: str, level: LogLevel) -> bool:
        if logger_name in _disabled_loggers.get():
            return False

        return level.rank >= _log_level.get().rank

    @property
    def level(self) -> LogLevel:
        return _log_level.get()

    @property
    def output(self) -> LogOutput:
        return _log_output.get()

    @property
    def directory(self) -> str | None:
        return _log_directory.get()
