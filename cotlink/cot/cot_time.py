import datetime
import re

from .errors import CoTParseError


_cot_time_pattern = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{1,9})?Z$"
)


def now() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


def format_cot_time(
    value: datetime.datetime,
    precision: int = 3,
) -> str:
    """
    Format a datetime as a CoT timestamp, e.g. ``2002-10-05T18:00:23.120Z``.

    Naive datetimes are treated as UTC. ``precision`` is the number of
    fractional second digits (0-6).
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.UTC)

    value = value.astimezone(datetime.UTC)
    formatted = value.strftime("%Y-%m-%dT%H:%M:%S")

    precision = max(0, min(precision, 6))
    if precision == 0:
        return f"{formatted}Z"

    fraction = f"{value.microsecond:06d}"[:precision]
    return f"{formatted}.{fraction}Z"


def parse_cot_time(value: str) -> datetime.datetime:
    if _cot_time_pattern.match(value) is None:
        raise CoTParseError(f"Invalid CoT timestamp - {value}")

    seconds, _, fraction = value[:-1].partition(".")
    if len(fraction) > 6:
        fraction = fraction[:6]

    normalized = f"{seconds}.{fraction.ljust(6, '0')}" if fraction else seconds

    try:
        parsed = datetime.datetime.fromisoformat(normalized)

    except ValueError as err:
        raise CoTParseError(f"Invalid CoT timestamp - {value}") from err

    return parsed.replace(tzinfo=datetime.UTC)
