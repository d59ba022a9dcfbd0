from typing import Any, Self

import msgspec

from .errors import CoTParseError


DEFAULT_VALUE = 9999999.0


def _format_float(value: float) -> str:
    if value == int(value) and abs(value) < 1e16:
        return str(int(value))

    return repr(value)


class Point(msgspec.Struct, kw_only=True):
    lat: float = 0.0
    lon: float = 0.0
    hae: float | None = None
    ce: float | None = None
    le: float | None = None

    def to_dict(self) -> dict[str, str]:
        attributes = {
            "@lat": _format_float(self.lat),
            "@lon": _format_float(self.lon),
        }

        for name in ("hae", "ce", "le"):
            value = getattr(self, name)
            attributes[f"@{name}"] = _format_float(
                DEFAULT_VALUE if value is None else value
            )

        return attributes

    @classmethod
    def from_dict(cls, attributes: dict[str, Any] | None) -> Self:
        if not isinstance(attributes, dict):
            return cls()

        try:
            optional = {
                name: float(attributes[f"@{name}"])
                for name in ("hae", "ce", "le")
                if attributes.get(f"@{name}") is not None
            }

            return cls(
                lat=float(attributes.get("@lat", "0")),
                lon=float(attributes.get("@lon", "0")),
                **optional,
            )

        except (TypeError, ValueError) as err:
            raise CoTParseError(f"Invalid point - {err}") from err
