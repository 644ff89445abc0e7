"""Lexical event source for XML to JSON conversion.

Key Components:
    XMLEventReader: Lenient pull reader turning XML text or bytes into events
    XMLEvent: A single start, end, text, CDATA or end-of-input event
    EventType: Enumeration of the event kinds
    EventPosition: Line, column and offset of an event
    decode_entities: Predefined entity and character reference decoding
"""

from .entities import decode_entities
from .events import EventPosition, EventType, XMLEvent
from .reader import XMLEventReader

__all__ = [
    "EventPosition",
    "EventType",
    "XMLEvent",
    "XMLEventReader",
    "decode_entities",
]
