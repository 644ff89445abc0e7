"""Conversion API with progressive disclosure for XML to JSON conversion.

Level 1 is the module-level functions (``convert``, ``to_json``,
``convert_string``, ``convert_file``). Level 2 is the configured
``XMLToJSONConverter`` class, whose ``convert_with_result`` never raises and
reports diagnostics and metrics alongside the value.
"""

import time
from pathlib import Path
from typing import Optional, Union

from xml_to_json.events import XMLEventReader
from xml_to_json.shared import (
    ConversionError,
    ConversionResult,
    ConverterConfig,
    DiagnosticSeverity,
    JSONValue,
    get_logger,
)
from xml_to_json.tree import JSONTreeBuilder

# Type definitions for input data
InputType = Union[str, bytes, bytearray]

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000  # Milliseconds per second conversion


def _preview(xml: InputType) -> str:
    text = xml if isinstance(xml, str) else bytes(xml[:PREVIEW_LENGTH]).decode(
        "utf-8", errors="replace"
    )
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH] + "..."
    return text


class XMLToJSONConverter:
    """Configured XML to JSON converter.

    Holds only immutable configuration, so one instance may be shared between
    threads; every call builds its own reader and frame stack.

    Examples:
        >>> converter = XMLToJSONConverter(ConverterConfig.preserve_whitespace())
        >>> converter.convert("<e> x </e>")
        {'e': ' x '}
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the converter.

        Args:
            config: Converter configuration (defaults apply when omitted)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ConverterConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_to_json_converter")

    def convert(self, xml: InputType) -> JSONValue:
        """Convert an XML document into a JSON value.

        Args:
            xml: XML document as text or raw bytes

        Returns:
            The best-effort value tree

        Raises:
            DepthLimitExceededError: If elements nest deeper than the
                configured ``max_depth``
        """
        return self._convert(xml, ConversionResult(correlation_id=self.correlation_id))

    def convert_with_result(self, xml: InputType) -> ConversionResult:
        """Convert without raising, returning value, diagnostics and metrics.

        Examples:
            >>> result = XMLToJSONConverter().convert_with_result("<a><b>x</a>")
            >>> result.value
            {'a': {'b': 'x'}}
            >>> result.success, len(result.diagnostics) > 0
            (True, True)
        """
        result = ConversionResult(correlation_id=self.correlation_id)
        try:
            result.value = self._convert(xml, result)
        except ConversionError as e:
            result.success = False
            result.error = e
            result.value = None
            result.add_diagnostic(
                DiagnosticSeverity.CRITICAL,
                f"Conversion failed: {e}",
                "xml_to_json_converter",
                details={"exception_type": type(e).__name__}
            )
        return result

    def _convert(self, xml: InputType, result: ConversionResult) -> JSONValue:
        start_time = time.time()

        self.logger.info(
            "Starting conversion",
            extra={
                "input_type": type(xml).__name__,
                "content_length": len(xml),
                "preview": _preview(xml),
            }
        )

        reader = XMLEventReader(
            xml,
            config=self.config.reader,
            correlation_id=self.correlation_id,
            collect_diagnostics=self.config.collect_diagnostics,
        )
        builder = JSONTreeBuilder(
            config=self.config.tree,
            correlation_id=self.correlation_id,
            collect_diagnostics=self.config.collect_diagnostics,
        )

        try:
            value = builder.build(reader)
        finally:
            self._collect(result, reader, builder, start_time)

        self.logger.info(
            "Conversion completed",
            extra={
                "elements_converted": result.metrics.elements_converted,
                "diagnostic_count": len(result.diagnostics),
                "processing_time_ms": result.metrics.processing_time_ms,
            }
        )
        return value

    def _collect(
        self,
        result: ConversionResult,
        reader: XMLEventReader,
        builder: JSONTreeBuilder,
        start_time: float
    ) -> None:
        """Copy reader and builder statistics into ``result``."""
        metrics = result.metrics
        metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        metrics.characters_processed = reader.character_count
        metrics.events_processed = builder.events_processed
        metrics.elements_converted = builder.elements_converted
        metrics.max_depth_reached = builder.max_depth_reached
        metrics.fragments_dropped = reader.fragments_dropped

        diagnostics = reader.diagnostics + builder.diagnostics
        diagnostics.sort(
            key=lambda diag: diag.position["offset"] if diag.position else -1
        )
        result.diagnostics.extend(diagnostics)


def convert(
    xml: InputType,
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None
) -> JSONValue:
    """Convert an XML document into a JSON-shaped value.

    This is the primary entry point. Malformed markup is absorbed; only the
    nesting depth limit raises.

    Args:
        xml: XML document as text or raw bytes
        config: Optional converter configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        None, a string, a dict or a list

    Raises:
        DepthLimitExceededError: If elements nest deeper than the configured
            ``max_depth``

    Examples:
        >>> convert('<e name="value">text</e>')
        {'e': {'@name': 'value', '#text': 'text'}}
        >>> convert("<e><a>x</a><a>y</a></e>")
        {'e': {'a': ['x', 'y']}}
        >>> convert("") is None
        True
    """
    return XMLToJSONConverter(config, correlation_id).convert(xml)


def to_json(
    xml: InputType,
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None
) -> JSONValue:
    """Alias of :func:`convert`."""
    return convert(xml, config, correlation_id)


def convert_string(
    xml_string: str,
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None
) -> JSONValue:
    """Convert XML held in a string.

    Raises:
        TypeError: If ``xml_string`` is not a string
        DepthLimitExceededError: If elements nest deeper than allowed
    """
    if not isinstance(xml_string, str):
        raise TypeError(
            f"convert_string expects str, got {type(xml_string).__name__}"
        )
    return convert(xml_string, config, correlation_id)


def convert_file(
    file_path: Union[str, Path],
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None
) -> JSONValue:
    """Convert the XML document stored at ``file_path``.

    The file is read as bytes so that undecodable fragments are dropped one
    by one instead of failing the read.

    Raises:
        ConversionError: If the file does not exist or cannot be read
        DepthLimitExceededError: If elements nest deeper than allowed
    """
    logger = get_logger(__name__, correlation_id, "convert_file")
    path_obj = Path(file_path) if isinstance(file_path, str) else file_path

    if not path_obj.exists():
        raise ConversionError(f"File not found: {path_obj}")
    if not path_obj.is_file():
        raise ConversionError(f"Path is not a file: {path_obj}")

    try:
        raw_data = path_obj.read_bytes()
    except OSError as e:
        logger.error(
            "Failed to read XML file",
            extra={"file_path": str(path_obj)},
            exc_info=True
        )
        raise ConversionError(f"Could not read {path_obj}: {e}") from e

    logger.info(
        "Read XML file",
        extra={"file_path": str(path_obj), "size_bytes": len(raw_data)}
    )
    return convert(raw_data, config, correlation_id)
