"""Lexical event types produced by the XML event reader."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple


class EventType(Enum):
    """XML event types consumed by the tree builder."""

    ELEMENT_START = auto()  # <name attr="...">, also the first half of <name/>
    TEXT = auto()           # Decoded character data between markup
    CDATA = auto()          # Raw content of <![CDATA[ ... ]]>
    ELEMENT_END = auto()    # </name>, also the second half of <name/>
    END_OF_INPUT = auto()   # No more events; repeated on every further read


@dataclass(frozen=True)
class EventPosition:
    """Position of the markup or text an event was read from."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    def to_dict(self) -> dict:
        return {"line": self.line, "column": self.column, "offset": self.offset}


@dataclass
class XMLEvent:
    """A single lexical event.

    ``name`` is set for element start and end events. It is None when the
    element name could not be decoded; the element is still balanced so its
    content can be skipped. ``attributes`` keeps document order and only
    holds pairs whose key and value both decoded. ``text`` carries the
    content of TEXT and CDATA events.
    """

    type: EventType
    name: Optional[str] = None
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    text: Optional[str] = None
    position: Optional[EventPosition] = None
