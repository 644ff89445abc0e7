"""Lenient XML event reader.

This module turns an XML document into the ordered stream of lexical events
the tree builder consumes. It never raises on malformed markup: recoverable
pieces are emitted, the rest is skipped or kept as text, and every repair is
recorded as a diagnostic.
"""

import re
from collections import deque
from typing import Deque, Iterator, List, Optional, Tuple, Union

from xml_to_json.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ReaderConfig,
    get_logger,
)

from .entities import decode_entities
from .events import EventPosition, EventType, XMLEvent

InputType = Union[str, bytes, bytearray]

# Markup delimiters
COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
PI_CLOSE = "?>"
BYTE_ORDER_MARK = "\ufeff"

_NAME_START_PATTERN = re.compile(r"[A-Za-z_:\u0080-\U0010FFFF]")
_NAME_PATTERN = re.compile(r"[A-Za-z_:\u0080-\U0010FFFF][\w.\-:\u0080-\U0010FFFF]*")
_ATTRIBUTE_PATTERN = re.compile(
    r"""([^\s=/>"']+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+)))?"""
)


class XMLEventReader:
    """Pull-based reader producing :class:`XMLEvent` objects.

    Guarantees offered to the tree builder:

    - predefined entities and character references are decoded in text and
      attribute values (when ``decode_entities`` is on)
    - ``<name/>`` is expanded into a start event followed by an end event
    - text runs are stripped and whitespace-only runs dropped when
      ``trim_text`` is on
    - comments, processing instructions and declarations never surface
    - a fragment holding undecodable input is dropped on its own

    Once the input is exhausted every call to :meth:`read_event` returns an
    END_OF_INPUT event.
    """

    def __init__(
        self,
        source: InputType,
        config: Optional[ReaderConfig] = None,
        correlation_id: Optional[str] = None,
        collect_diagnostics: bool = True
    ) -> None:
        """Initialize the reader.

        Args:
            source: XML document as text or raw bytes
            config: Reader configuration (defaults apply when omitted)
            correlation_id: Optional correlation ID for request tracking
            collect_diagnostics: Record repairs and dropped fragments
        """
        self.config = config or ReaderConfig()
        self.correlation_id = correlation_id
        self.collect_diagnostics = collect_diagnostics
        self.logger = get_logger(__name__, correlation_id, "xml_event_reader")

        self.diagnostics: List[DiagnosticEntry] = []
        self.fragments_dropped = 0
        self.events_read = 0

        self._text = self._decode_source(source)
        self._pos = 0
        self._line = 1
        self._line_start = 0
        self._pending: Deque[XMLEvent] = deque()
        self._exhausted = False

    @property
    def character_count(self) -> int:
        """Number of characters in the decoded document."""
        return len(self._text)

    @property
    def exhausted(self) -> bool:
        """True once END_OF_INPUT has been returned."""
        return self._exhausted

    def read_event(self) -> XMLEvent:
        """Return the next event in document order."""
        while not self._pending:
            if self._pos >= len(self._text):
                self._exhausted = True
                return XMLEvent(EventType.END_OF_INPUT, position=self._position())
            self._scan()

        event = self._pending.popleft()
        self.events_read += 1
        return event

    def __iter__(self) -> Iterator[XMLEvent]:
        """Iterate over events up to and including END_OF_INPUT."""
        while True:
            event = self.read_event()
            yield event
            if event.type == EventType.END_OF_INPUT:
                return

    def _decode_source(self, source: InputType) -> str:
        if isinstance(source, (bytes, bytearray)):
            try:
                # Invalid sequences survive as lone surrogates and are
                # rejected per fragment later
                text = bytes(source).decode(self.config.encoding, errors="surrogateescape")
            except UnicodeDecodeError as e:
                self._diagnose(
                    DiagnosticSeverity.WARNING,
                    f"Input could not be decoded as {self.config.encoding}, "
                    "undecodable bytes replaced",
                    details={"error": str(e)},
                )
                text = bytes(source).decode(self.config.encoding, errors="replace")
        elif isinstance(source, str):
            text = source
        else:
            raise TypeError(
                f"XML source must be str or bytes, not {type(source).__name__}"
            )

        if text.startswith(BYTE_ORDER_MARK):
            text = text[1:]
        return text

    def _scan(self) -> None:
        """Consume the next piece of text or markup, queueing its events."""
        text = self._text
        start = self._pos

        if text[start] != "<" or not self._is_markup_start(start):
            end = self._find_markup(start)
            self._emit_text(text[start:end])
            self._advance(end)
            return

        if text.startswith(COMMENT_OPEN, start):
            self._skip_until(COMMENT_CLOSE, start + len(COMMENT_OPEN), "comment")
        elif text.startswith(CDATA_OPEN, start):
            self._read_cdata(start)
        elif text.startswith("<?", start):
            self._skip_until(PI_CLOSE, start + 2, "processing instruction")
        elif text.startswith("<!", start):
            self._skip_declaration(start)
        elif text.startswith("</", start):
            self._read_end_tag(start)
        else:
            self._read_start_tag(start)

    def _is_markup_start(self, index: int) -> bool:
        following = self._text[index + 1:index + 2]
        if not following:
            return False
        return following in "/!?" or _NAME_START_PATTERN.match(following) is not None

    def _find_markup(self, start: int) -> int:
        """Find where the text run beginning at ``start`` ends."""
        search_from = start
        while True:
            lt = self._text.find("<", search_from)
            if lt == -1:
                return len(self._text)
            if lt != start and self._is_markup_start(lt):
                return lt
            self._diagnose(
                DiagnosticSeverity.INFO,
                "Stray '<' kept as text",
                position=self._position(lt),
            )
            search_from = lt + 1

    def _emit_text(self, raw: str) -> None:
        position = self._position()
        if self.config.trim_text:
            raw = raw.strip()
        if not raw:
            return
        if not self._is_decodable(raw, "text", position):
            return

        decoded = decode_entities(raw) if self.config.decode_entities else raw
        self._pending.append(XMLEvent(EventType.TEXT, text=decoded, position=position))

    def _read_cdata(self, start: int) -> None:
        position = self._position()
        content_start = start + len(CDATA_OPEN)
        end = self._text.find(CDATA_CLOSE, content_start)

        if end == -1:
            self._diagnose(
                DiagnosticSeverity.WARNING,
                "Unterminated CDATA section runs to end of input",
                position=position,
            )
            content = self._text[content_start:]
            self._advance(len(self._text))
        else:
            content = self._text[content_start:end]
            self._advance(end + len(CDATA_CLOSE))

        if self._is_decodable(content, "CDATA", position):
            self._pending.append(XMLEvent(EventType.CDATA, text=content, position=position))

    def _skip_until(self, terminator: str, search_from: int, kind: str) -> None:
        end = self._text.find(terminator, search_from)
        if end == -1:
            self._diagnose(
                DiagnosticSeverity.WARNING,
                f"Unterminated {kind} skipped to end of input",
                position=self._position(),
            )
            self._advance(len(self._text))
        else:
            self._advance(end + len(terminator))

    def _skip_declaration(self, start: int) -> None:
        """Skip ``<!DOCTYPE ...>`` and similar, internal subset included."""
        text = self._text
        bracket_depth = 0
        quote: Optional[str] = None

        for index in range(start + 2, len(text)):
            char = text[index]
            if quote:
                if char == quote:
                    quote = None
            elif char in "\"'":
                quote = char
            elif char == "[":
                bracket_depth += 1
            elif char == "]":
                bracket_depth = max(0, bracket_depth - 1)
            elif char == ">" and bracket_depth == 0:
                self._advance(index + 1)
                return

        self._diagnose(
            DiagnosticSeverity.WARNING,
            "Unterminated declaration skipped to end of input",
            position=self._position(),
        )
        self._advance(len(text))

    def _find_tag_end(self, search_from: int) -> Tuple[int, bool]:
        """Locate the ``>`` closing a tag, ignoring any inside quoted values.

        Returns:
            Index of the terminator and whether it was a proper ``>``. An
            unterminated tag ends before the next ``<`` or at end of input.
        """
        text = self._text
        quote: Optional[str] = None
        previous = ""

        for index in range(search_from, len(text)):
            char = text[index]
            if quote:
                if char == quote:
                    quote = None
                    previous = char
                continue
            if char in "\"'" and previous == "=":
                quote = char
            elif char == ">":
                return index, True
            elif char == "<":
                return index, False
            if not char.isspace():
                previous = char

        return len(text), False

    def _read_end_tag(self, start: int) -> None:
        position = self._position()
        end, closed = self._find_tag_end(start + 2)
        name = self._text[start + 2:end].strip()
        self._advance(end + 1 if closed else end)

        if not closed:
            self._diagnose(
                DiagnosticSeverity.WARNING,
                f"Unterminated end tag </{name}",
                position=position,
            )
        if not name:
            self._diagnose(
                DiagnosticSeverity.WARNING,
                "End tag without a name skipped",
                position=position,
            )
            return

        if not self._is_decodable(name, "element name", position):
            name = None
        self._pending.append(XMLEvent(EventType.ELEMENT_END, name=name, position=position))

    def _read_start_tag(self, start: int) -> None:
        position = self._position()
        end, closed = self._find_tag_end(start + 1)
        body = self._text[start + 1:end]
        self._advance(end + 1 if closed else end)

        if not closed:
            self._diagnose(
                DiagnosticSeverity.WARNING,
                f"Unterminated start tag <{body.strip()}",
                position=position,
            )

        self_closing = body.rstrip().endswith("/")
        if self_closing:
            body = body.rstrip()[:-1]

        # _is_markup_start guarantees a name start character
        raw_name = _NAME_PATTERN.match(body).group(0)
        name: Optional[str] = raw_name
        if not self._is_decodable(raw_name, "element name", position):
            name = None

        attributes = self._read_attributes(body[len(raw_name):], position)

        self._pending.append(XMLEvent(
            EventType.ELEMENT_START,
            name=name,
            attributes=attributes,
            position=position,
        ))
        if self_closing:
            self._pending.append(XMLEvent(EventType.ELEMENT_END, name=name, position=position))

    def _read_attributes(
        self, source: str, position: EventPosition
    ) -> List[Tuple[str, str]]:
        attributes: List[Tuple[str, str]] = []

        for match in _ATTRIBUTE_PATTERN.finditer(source):
            key = match.group(1)
            value = next(
                (group for group in match.group(2, 3, 4) if group is not None), None
            )

            if value is None:
                self._diagnose(
                    DiagnosticSeverity.WARNING,
                    f"Attribute {key!r} without a value dropped",
                    position=position,
                )
                continue
            if match.group(4) is not None:
                self._diagnose(
                    DiagnosticSeverity.INFO,
                    f"Unquoted value accepted for attribute {key!r}",
                    position=position,
                )

            if not (
                self._is_decodable(key, "attribute name", position)
                and self._is_decodable(value, "attribute value", position)
            ):
                continue

            if self.config.decode_entities:
                value = decode_entities(value)
            attributes.append((key, value))

        return attributes

    def _is_decodable(self, fragment: str, kind: str, position: EventPosition) -> bool:
        """Check that ``fragment`` holds no undecodable input."""
        try:
            fragment.encode("utf-8")
        except UnicodeEncodeError:
            self.fragments_dropped += 1
            self._diagnose(
                DiagnosticSeverity.WARNING,
                f"Undecodable {kind} dropped",
                position=position,
            )
            return False
        return True

    def _advance(self, new_pos: int) -> None:
        text = self._text
        newlines = text.count("\n", self._pos, new_pos)
        if newlines:
            self._line += newlines
            self._line_start = text.rfind("\n", self._pos, new_pos) + 1
        self._pos = new_pos

    def _position(self, offset: Optional[int] = None) -> EventPosition:
        if offset is None or offset == self._pos:
            return EventPosition(self._line, self._pos - self._line_start + 1, self._pos)

        line = self._line + self._text.count("\n", self._pos, offset)
        line_start = self._text.rfind("\n", 0, offset) + 1
        return EventPosition(line, offset - line_start + 1, offset)

    def _diagnose(
        self,
        severity: DiagnosticSeverity,
        message: str,
        position: Optional[EventPosition] = None,
        details: Optional[dict] = None
    ) -> None:
        if self.logger.is_debug_enabled():
            self.logger.debug(
                message,
                extra={"position": position.to_dict() if position else None},
            )
        if not self.collect_diagnostics:
            return
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component="xml_event_reader",
            position=position.to_dict() if position else None,
            details=details,
            correlation_id=self.correlation_id,
        ))
