import re

_DURATION_PART = re.compile(r"(?P<amount>\d+(?:\.\d+)?)(?P<unit>[smhdw]?)", re.I)

_UNIT_SECONDS = {
    "": 1,
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
    "w": 604800,
}


class TimeParser:
    """
    Converts durations such as ``"30s"``, ``"5m"`` or ``"1m30s"`` to
    seconds. A bare number is read as seconds.
    """

    def __init__(self, time_amount: str | None = None) -> None:
        self.time: float = 0.0
        if time_amount is not None:
            self.time = self.parse(time_amount)

    def parse(self, time_amount: str) -> float:
        return float(
            sum(
                float(part.group("amount")) * _UNIT_SECONDS[part.group("unit").lower()]
                for part in _DURATION_PART.finditer(time_amount)
            )
        )
