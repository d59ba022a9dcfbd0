import copy
from typing import Any, Self

import msgspec

from .flow_tags import FLOW_TAGS_ELEMENT, FlowTags


class Detail(msgspec.Struct, kw_only=True):
    flow_tags: FlowTags | None = None
    # Children other than flow tags in xmltodict form, keyed by tag.
    # Repeated tags hold a list.
    elements: dict[str, Any] = msgspec.field(default_factory=dict)

    def find(self, tag: str) -> Any | None:
        return self.elements.get(tag)

    def add_element(
        self,
        tag: str,
        value: dict[str, Any] | str | None = None,
    ):
        existing = self.elements.get(tag)

        if tag not in self.elements:
            self.elements[tag] = value

        elif isinstance(existing, list):
            existing.append(value)

        else:
            self.elements[tag] = [existing, value]

        return value

    def to_dict(self) -> dict[str, Any]:
        detail = copy.deepcopy(self.elements)

        if self.flow_tags is not None:
            detail[FLOW_TAGS_ELEMENT] = self.flow_tags.to_dict()

        return detail

    @classmethod
    def from_dict(cls, value: dict[str, Any] | str | None) -> Self:
        if not isinstance(value, dict):
            return cls()

        elements = dict(value)

        if FLOW_TAGS_ELEMENT not in elements:
            return cls(elements=elements)

        flow_tags = elements.pop(FLOW_TAGS_ELEMENT)
        if isinstance(flow_tags, list):
            flow_tags = flow_tags[0]

        return cls(
            flow_tags=FlowTags.from_dict(flow_tags),
            elements=elements,
        )
