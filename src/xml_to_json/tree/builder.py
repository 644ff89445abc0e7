"""Tree building from lexical events into a JSON value.

The builder walks the event stream once, opening one frame per element and
closing it on the matching end tag. Frames live on an explicit stack rather
than the interpreter stack, so nesting depth is bounded only by the
configured ``max_depth``.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from xml_to_json.events import EventPosition, EventType, XMLEvent, XMLEventReader
from xml_to_json.shared import (
    DepthLimitExceededError,
    DiagnosticEntry,
    DiagnosticSeverity,
    JSONValue,
    TreeConfig,
    get_logger,
)

from .node import NodeValues, discards_content, merge_attributes

EventSource = Union[XMLEventReader, Iterable[XMLEvent]]


@dataclass
class Frame:
    """State for one open element.

    The document itself is the frame at depth 0; it has no name and no
    attributes. ``name`` is also None for an element whose name could not be
    decoded, whose value is discarded when it closes.
    """

    depth: int
    name: Optional[str] = None
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    values: NodeValues = field(default_factory=NodeValues)
    position: Optional[EventPosition] = None

    @property
    def is_document(self) -> bool:
        return self.depth == 0


class _IterableSource:
    """Adapts a plain event iterable to the ``read_event`` interface."""

    def __init__(self, events: Iterable[XMLEvent]) -> None:
        self._events: Iterator[XMLEvent] = iter(events)

    def read_event(self) -> XMLEvent:
        return next(self._events, XMLEvent(EventType.END_OF_INPUT))


class JSONTreeBuilder:
    """Builds one JSON value from an event stream.

    Not thread-safe; create one builder per conversion.
    """

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None,
        collect_diagnostics: bool = True
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Tree configuration holding the depth limit
            correlation_id: Optional correlation ID for request tracking
            collect_diagnostics: Record structural repairs
        """
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.collect_diagnostics = collect_diagnostics
        self.logger = get_logger(__name__, correlation_id, "json_tree_builder")

        self.diagnostics: List[DiagnosticEntry] = []
        self.elements_converted = 0
        self.max_depth_reached = 0
        self.events_processed = 0
        self.processing_time_ms = 0.0

    def _reset_state(self) -> None:
        self.diagnostics = []
        self.elements_converted = 0
        self.max_depth_reached = 0
        self.events_processed = 0
        self.processing_time_ms = 0.0

    def build(self, source: EventSource) -> JSONValue:
        """Consume ``source`` up to END_OF_INPUT and return the document value.

        Args:
            source: An :class:`XMLEventReader` or any iterable of events

        Returns:
            The value tree: None for an empty document, otherwise an object
            keyed by the root element name (or an array for several top-level
            items)

        Raises:
            DepthLimitExceededError: If elements nest deeper than
                ``config.max_depth``
        """
        self._reset_state()
        start_time = time.time()
        reader = source if hasattr(source, "read_event") else _IterableSource(source)
        debug = self.logger.is_debug_enabled()

        stack: List[Frame] = [Frame(depth=0)]

        try:
            while True:
                event = reader.read_event()
                self.events_processed += 1

                if event.type == EventType.ELEMENT_START:
                    self._open_frame(stack, event, debug)
                elif event.type == EventType.TEXT:
                    stack[-1].values.insert_text(event.text or "")
                elif event.type == EventType.CDATA:
                    stack[-1].values.insert_cdata(event.text or "")
                elif event.type == EventType.ELEMENT_END:
                    self._handle_end(stack, event, debug)
                elif event.type == EventType.END_OF_INPUT:
                    return self._finish(stack, event)
        finally:
            self.processing_time_ms = (time.time() - start_time) * 1000

    def _open_frame(self, stack: List[Frame], event: XMLEvent, debug: bool) -> None:
        depth = len(stack)
        if depth > self.config.max_depth:
            self.logger.warning(
                "Depth limit exceeded",
                extra={
                    "depth": depth,
                    "max_depth": self.config.max_depth,
                    "element": event.name,
                }
            )
            raise DepthLimitExceededError(depth, self.config.max_depth)

        if debug:
            self.logger.debug(
                "Opening element frame",
                extra={"element": event.name, "depth": depth}
            )

        stack.append(Frame(
            depth=depth,
            name=event.name,
            attributes=list(event.attributes),
            position=event.position,
        ))
        self.max_depth_reached = max(self.max_depth_reached, depth)

    def _close_frame(self, stack: List[Frame], debug: bool) -> None:
        """Finalize the innermost frame and merge its value into its parent."""
        frame = stack.pop()
        value = frame.values.get_value()

        if frame.name is None:
            self._diagnose(
                DiagnosticSeverity.WARNING,
                "Element with undecodable name dropped",
                frame.position,
            )
            return

        if discards_content(frame.attributes, value):
            self._diagnose(
                DiagnosticSeverity.WARNING,
                f"Mixed content of <{frame.name}> not kept alongside its attributes",
                frame.position,
                {"element": frame.name, "discarded_items": len(value)},
            )

        stack[-1].values.insert(frame.name, merge_attributes(frame.attributes, value))
        self.elements_converted += 1

        if debug:
            self.logger.debug(
                "Closed element frame",
                extra={
                    "element": frame.name,
                    "depth": frame.depth,
                    "value_type": type(value).__name__,
                }
            )

    def _handle_end(self, stack: List[Frame], event: XMLEvent, debug: bool) -> None:
        if stack[-1].is_document:
            self._diagnose(
                DiagnosticSeverity.WARNING,
                f"Orphaned closing tag </{event.name}> ignored",
                event.position,
            )
            return

        if event.name is None or stack[-1].name == event.name:
            self._close_frame(stack, debug)
            return

        # Mismatched end tag: close back to the nearest open element of that name
        for index in range(len(stack) - 1, 0, -1):
            if stack[index].name == event.name:
                unclosed = len(stack) - 1 - index
                while len(stack) > index:
                    self._close_frame(stack, debug)
                self._diagnose(
                    DiagnosticSeverity.WARNING,
                    f"Auto-closed {unclosed} unclosed elements before </{event.name}>",
                    event.position,
                    {"unclosed_count": unclosed},
                )
                return

        self._diagnose(
            DiagnosticSeverity.WARNING,
            f"Orphaned closing tag </{event.name}> ignored",
            event.position,
        )

    def _finish(self, stack: List[Frame], event: XMLEvent) -> JSONValue:
        unclosed = len(stack) - 1
        if unclosed:
            self._diagnose(
                DiagnosticSeverity.WARNING,
                f"Auto-closed {unclosed} unclosed elements at end of input",
                event.position,
                {"unclosed_count": unclosed},
            )
        while len(stack) > 1:
            self._close_frame(stack, debug=False)

        return stack.pop().values.get_value()

    def _diagnose(
        self,
        severity: DiagnosticSeverity,
        message: str,
        position: Optional[EventPosition] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        if not self.collect_diagnostics:
            return
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component="json_tree_builder",
            position=position.to_dict() if position else None,
            details=details,
            correlation_id=self.correlation_id,
        ))
