from .cot_time import (
    format_cot_time as format_cot_time,
    parse_cot_time as parse_cot_time,
)
from .detail import Detail as Detail
from .errors import (
    CoTError as CoTError,
    CoTParseError as CoTParseError,
    CoTSerializeError as CoTSerializeError,
)
from .event import (
    Event as Event,
    new_event as new_event,
    new_ping_event as new_ping_event,
)
from .flow_tags import FlowTags as FlowTags
from .point import DEFAULT_VALUE as DEFAULT_VALUE, Point as Point
from .xml_parser import XMLParser as XMLParser
