"""Per-element accumulation of attributes, child values, text and CDATA.

A frame (``NodeValues``) collects everything found between an element's start
and end tags and folds it into a single JSON value:

- child elements are gathered into an object keyed by element name, a
  repeated name turning its entry into an array
- text splits the object into segments so that text and element groups keep
  their document order
- CDATA is concatenated under ``#cdata`` in the open object
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Sequence, Tuple, Union

from xml_to_json.shared import JSONValue

ATTRIBUTE_PREFIX = "@"
TEXT_KEY = "#text"
CDATA_KEY = "#cdata"

_MISSING = object()


class Entry:
    """Value stored under one name: single until a duplicate promotes it."""

    __slots__ = ("_values",)

    def __init__(self, value: JSONValue) -> None:
        self._values: List[JSONValue] = [value]

    @property
    def is_many(self) -> bool:
        """Check if a duplicate name has promoted this entry to an array."""
        return len(self._values) > 1

    def append(self, value: JSONValue) -> None:
        self._values.append(value)

    def concatenate(self, text: str) -> None:
        """Extend a single string entry in place."""
        current = self._values[-1]
        self._values[-1] = (current if isinstance(current, str) else "") + text

    def to_value(self) -> JSONValue:
        if self.is_many:
            return list(self._values)
        return self._values[0]


class Node:
    """Ordered mapping of names to entries for one group of child elements.

    A name keeps the position where it was first inserted, also after
    promotion to an array.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def insert(self, name: str, value: JSONValue) -> None:
        """Set ``value`` under ``name``, promoting to an array on duplicates."""
        entry = self._entries.get(name)
        if entry is None:
            self._entries[name] = Entry(value)
        else:
            entry.append(value)

    def insert_cdata(self, text: str) -> None:
        """Concatenate ``text`` onto the ``#cdata`` entry."""
        entry = self._entries.get(CDATA_KEY)
        if entry is None:
            self._entries[CDATA_KEY] = Entry(text)
        else:
            entry.concatenate(text)

    def remove_entry(self, name: str, default: Any = None) -> JSONValue:
        """Pop the value stored under ``name``.

        Returns:
            The single value, the list of values once promoted, or
            ``default`` when nothing is stored under ``name``
        """
        entry = self._entries.pop(name, _MISSING)
        if entry is _MISSING:
            return default
        return entry.to_value()

    def to_dict(self) -> Dict[str, Any]:
        return {name: entry.to_value() for name, entry in self._entries.items()}


class SegmentKind(Enum):
    """Kinds of ordered units within a frame."""

    OBJECT = auto()  # A finished Node
    TEXT = auto()    # A free-standing text run


@dataclass
class Segment:
    """An ordered unit of element content."""

    kind: SegmentKind
    value: Union[Node, str]

    def to_value(self) -> JSONValue:
        if isinstance(self.value, Node):
            return self.value.to_dict()
        return self.value


class NodeValues:
    """Accumulator for the content of one element.

    Created when the element starts, fed by the tree builder until the
    element ends, then consumed by :meth:`get_value`.
    """

    def __init__(self) -> None:
        self.node = Node()
        self.segments: List[Segment] = []

    def insert(self, name: str, value: JSONValue) -> None:
        self.node.insert(name, value)

    def insert_text(self, text: str) -> None:
        """Record a text run after any element group collected before it."""
        self._flush()
        self.segments.append(Segment(SegmentKind.TEXT, text))

    def insert_cdata(self, text: str) -> None:
        """Append CDATA to the open node. Never starts a new segment."""
        self.node.insert_cdata(text)

    def remove_entry(self, name: str, default: Any = None) -> JSONValue:
        return self.node.remove_entry(name, default)

    def _flush(self) -> None:
        if not self.node.is_empty:
            self.segments.append(Segment(SegmentKind.OBJECT, self.node))
            self.node = Node()

    def get_value(self) -> JSONValue:
        """Finalize the accumulated content into one value.

        - nothing collected gives None
        - a single element group, with at most one text run before or after
          it, gives an object carrying that text under ``#text``
        - a single text run gives a string
        - anything else gives an array in document order

        The frame is left empty afterwards.
        """
        self._flush()
        segments, self.segments = self.segments, []

        objects = [segment for segment in segments if segment.kind is SegmentKind.OBJECT]
        if len(objects) == 1 and len(segments) <= 2:
            node = objects[0].value
            for segment in segments:
                if segment.kind is SegmentKind.TEXT:
                    node.insert(TEXT_KEY, segment.value)
            return node.to_dict()

        values = [segment.to_value() for segment in segments]
        if not values:
            return None
        if len(values) == 1:
            return values[0]
        return values


def merge_attributes(
    attributes: Sequence[Tuple[str, str]], value: JSONValue
) -> JSONValue:
    """Combine an element's attributes with the value built from its content.

    Attributes become ``@name`` keys. An object value receives them
    directly; any other value is replaced by a new object holding the
    attributes plus, for a string value, a ``#text`` key. Null and array
    values contribute nothing to that object.

    Examples:
        >>> merge_attributes([("name", "value")], "text")
        {'@name': 'value', '#text': 'text'}
        >>> merge_attributes([], "text")
        'text'
    """
    if not attributes:
        return value

    merged: Dict[str, Any] = {}
    for key, attribute_value in attributes:
        merged[ATTRIBUTE_PREFIX + key] = attribute_value

    if isinstance(value, dict):
        merged.update(value)
    elif isinstance(value, str):
        merged[TEXT_KEY] = value
    return merged


def discards_content(attributes: Sequence[Tuple[str, str]], value: JSONValue) -> bool:
    """Check if :func:`merge_attributes` would drop ``value``."""
    return bool(attributes) and isinstance(value, list)
