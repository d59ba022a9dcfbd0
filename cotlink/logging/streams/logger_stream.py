import asyncio
import io
import os
import sys

import msgspec

from cotlink.logging.config import LoggingConfig
from cotlink.logging.models import Log

DEFAULT_TEMPLATE = "{timestamp} - {level} - {logger} - {filename}:{function_name}.{line_number} - {message}"


class LoggerStream:
    """
    Output for one named logger. Entries at or above the configured level
    are rendered to stdout or stderr, and when a log directory is configured
    also appended as msgspec JSON lines to ``<directory>/<name>.json``.
    """

    def __init__(
        self,
        name: str,
        template: str | None = None,
    ) -> None:
        self.name = name
        self.template = template or DEFAULT_TEMPLATE

        self._config = LoggingConfig()
        self._encoder = msgspec.json.Encoder()
        self._file_lock = asyncio.Lock()
        self._logfile: io.BufferedWriter | None = None
        self._logfile_path: str | None = None

    @property
    def logfile_path(self) -> str | None:
        return self._logfile_path

    def enabled(self, log: Log) -> bool:
        return self._config.enabled(self.name, log.entry.level)

    async def log(self, log: Log):
        if not self.enabled(log):
            return

        self._write_console(log)

        directory = self._config.directory
        if directory is None:
            return

        async with self._file_lock:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(
                None,
                self._write_file,
                log,
                directory,
            )

    async def close(self):
        async with self._file_lock:
            if self._logfile is not None:
                self._logfile.close()

            self._logfile = None
            self._logfile_path = None

    def _write_console(self, log: Log):
        stream = sys.stdout if self._config.output == "stdout" else sys.stderr

        line = log.entry.render(
            self.template,
            logger=log.logger,
            filename=log.filename,
            function_name=log.function_name,
            line_number=log.line_number,
            timestamp=log.timestamp,
        )

        stream.write(line + "\n")
        stream.flush()

    def _write_file(self, log: Log, directory: str):
        path = os.path.join(directory, f"{self.name}.json")

        if self._logfile is None or self._logfile_path != path:
            if self._logfile is not None:
                self._logfile.close()

            os.makedirs(directory, exist_ok=True)
            self._logfile = open(path, "ab")
            self._logfile_path = path

        self._logfile.write(self._encoder.encode(log) + b"\n")
        self._logfile.flush()
