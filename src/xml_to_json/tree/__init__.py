"""Value tree construction for XML to JSON conversion.

This module folds the reader's event stream into a JSON-shaped value, one
frame per element, following the attribute, duplicate-name and mixed-content
merge rules.

Key Components:
    JSONTreeBuilder: Drives frames over an event stream and returns the value
    NodeValues: Per-element accumulator of child values, text and CDATA
    Node: Ordered name to value mapping with duplicate promotion
    merge_attributes: Attaches ``@name`` attributes to an element's value
"""

from .builder import Frame, JSONTreeBuilder
from .node import (
    ATTRIBUTE_PREFIX,
    CDATA_KEY,
    TEXT_KEY,
    Entry,
    Node,
    NodeValues,
    Segment,
    SegmentKind,
    discards_content,
    merge_attributes,
)

__all__ = [
    "ATTRIBUTE_PREFIX",
    "CDATA_KEY",
    "TEXT_KEY",
    "Entry",
    "Frame",
    "JSONTreeBuilder",
    "Node",
    "NodeValues",
    "Segment",
    "SegmentKind",
    "discards_content",
    "merge_attributes",
]
