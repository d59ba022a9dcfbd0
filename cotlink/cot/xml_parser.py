from xml.parsers.expat import ExpatError

import xmltodict

from .errors import CoTParseError, CoTSerializeError
from .event import Event


XML_DECLARATION = b"<?xml version='1.0' encoding='UTF-8' standalone='yes'?>\n"


class XMLParser:
    """
    Parses and serializes CoT XML events.

    Only the event envelope, point and flow tags are modeled. Every other
    ``<detail>`` child is carried through in its xmltodict form.
    """

    def parse(self, data: bytes) -> Event:
        try:
            document = xmltodict.parse(data)

        except (ExpatError, ValueError) as err:
            raise CoTParseError(f"Invalid CoT XML - {err}") from err

        return Event.from_dict(document)

    def serialize(
        self,
        event: Event,
        pretty: bool = False,
    ) -> bytes:
        try:
            body = xmltodict.unparse(
                event.to_dict(),
                full_document=False,
                short_empty_elements=True,
                pretty=pretty,
                indent="  ",
            )

        except (TypeError, ValueError, AttributeError) as err:
            raise CoTSerializeError(f"Failed to serialize CoT event - {err}") from err

        return XML_DECLARATION + body.encode()
