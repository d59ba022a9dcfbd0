import sys

from cotlink.logging.models import Entry, Log

from .logger_stream import LoggerStream

_streams: dict[str, LoggerStream] = {}


def get_stream(name: str) -> LoggerStream:
    if (stream := _streams.get(name)) is None:
        stream = _streams[name] = LoggerStream(name)

    return stream


async def close_streams():
    for stream in list(_streams.values()):
        await stream.close()

    _streams.clear()


class Logger:
    """Named handle onto a shared ``LoggerStream``."""

    def __init__(self, name: str = "cotlink") -> None:
        self.name = name

    @property
    def stream(self) -> LoggerStream:
        return get_stream(self.name)

    async def log(self, entry: Entry):
        frame = sys._getframe(1)
        code = frame.f_code

        await self.stream.log(
            Log(
                entry=entry,
                logger=self.name,
                filename=code.co_filename,
                function_name=code.co_name,
                line_number=frame.f_lineno,
            )
        )
