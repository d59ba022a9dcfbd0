import datetime

import msgspec

from .entry import Entry


class Log(msgspec.Struct, kw_only=True):
    entry: Entry
    logger: str
    filename: str
    function_name: str
    line_number: int
    timestamp: str = msgspec.field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC).isoformat()
    )
