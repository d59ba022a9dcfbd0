import datetime
from typing import Any, Self

import msgspec

from .cot_time import format_cot_time, now, parse_cot_time
from .detail import Detail
from .errors import CoTParseError
from .point import Point


EVENT_VERSION = "2.0"
DEFAULT_STALE = datetime.timedelta(minutes=10)


class Event(msgspec.Struct, kw_only=True):
    version: str = EVENT_VERSION
    uid: str = ""
    type: str = ""
    time: datetime.datetime | None = None
    start: datetime.datetime | None = None
    stale: datetime.datetime | None = None
    how: str = ""
    access: str | None = None
    qos: str | None = None
    opex: str | None = None
    point: Point = msgspec.field(default_factory=Point)
    detail: Detail = msgspec.field(default_factory=Detail)

    def to_dict(self) -> dict[str, Any]:
        event: dict[str, Any] = {
            "@version": self.version,
            "@uid": self.uid,
            "@type": self.type,
        }

        for name in ("time", "start", "stale"):
            value: datetime.datetime | None = getattr(self, name)
            if value is not None:
                event[f"@{name}"] = format_cot_time(value)

        event["@how"] = self.how

        for name in ("access", "qos", "opex"):
            value: str | None = getattr(self, name)
            if value:
                event[f"@{name}"] = value

        event["point"] = self.point.to_dict()
        event["detail"] = self.detail.to_dict()

        return {"event": event}

    @classmethod
    def from_dict(cls, document: dict[str, Any]) -> Self:
        root = next(iter(document), None)
        if root != "event":
            raise CoTParseError(f"Expected <event> root element, got <{root}>")

        event = document["event"]
        if not isinstance(event, dict):
            event = {}

        times = {
            name: parse_cot_time(event[f"@{name}"])
            for name in ("time", "start", "stale")
            if event.get(f"@{name}") is not None
        }

        point = event.get("point")
        if isinstance(point, list):
            point = point[0]

        return cls(
            version=event.get("@version", ""),
            uid=event.get("@uid", ""),
            type=event.get("@type", ""),
            how=event.get("@how", ""),
            access=event.get("@access"),
            qos=event.get("@qos"),
            opex=event.get("@opex"),
            point=Point.from_dict(point),
            detail=Detail.from_dict(event.get("detail")),
            **times,
        )


def new_event(event_type: str, uid: str) -> Event:
    created = now()

    return Event(
        uid=uid,
        type=event_type,
        time=created,
        start=created,
        stale=created + DEFAULT_STALE,
        how="m-g",
    )


def new_ping_event(uid: str) -> Event:
    created = now()

    detail = Detail()
    detail.add_element(
        "takv",
        {
            "@platform": "cotlink",
            "@version": "1.0",
        },
    )

    return Event(
        uid=uid,
        type="t-x-c-t",
        time=created,
        start=created,
        stale=created + DEFAULT_STALE,
        how="h-g-i-g-o",
        detail=detail,
    )
