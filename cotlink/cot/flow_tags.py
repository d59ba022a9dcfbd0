from typing import Any, Self

import msgspec

from .errors import CoTParseError


FLOW_TAGS_ELEMENT = "_flow-tags_"

# Sequences are unsigned 64-bit on the wire.
MAX_SEQUENCE = 2**64 - 1


class FlowTags(msgspec.Struct, kw_only=True):
    origin: str
    sequence: int
    created_at: int
    hops: list[str] = msgspec.field(default_factory=list)
    version: str | None = None

    def add_hop(self, client_id: str):
        self.hops.append(client_id)

    def to_dict(self) -> dict[str, str]:
        attributes: dict[str, str] = {}

        if self.version is not None:
            attributes["@version"] = self.version

        attributes["@f"] = self.origin
        attributes["@m"] = str(self.sequence)
        attributes["@t"] = str(self.created_at)

        if self.hops:
            attributes["@h"] = " ".join(self.hops)

        return attributes

    @classmethod
    def from_dict(cls, attributes: dict[str, Any] | None) -> Self:
        if not isinstance(attributes, dict):
            attributes = {}

        try:
            flow_tags = cls(
                origin=attributes.get("@f", ""),
                sequence=int(attributes.get("@m", "0")),
                created_at=int(attributes.get("@t", "0")),
                hops=attributes.get("@h", "").split(),
                version=attributes.get("@version"),
            )

        except (TypeError, ValueError) as err:
            raise CoTParseError(f"Invalid flow tags - {err}") from err

        if not 0 <= flow_tags.sequence <= MAX_SEQUENCE:
            raise CoTParseError(f"Invalid flow tags - sequence {flow_tags.sequence} out of uint64 range")

        return flow_tags
