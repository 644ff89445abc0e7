"""XML to JSON.

Converts XML documents of unknown shape into JSON-shaped Python values
(None, str, dict, list) without a schema, tolerating malformed input.

Progressive API Disclosure:
- Level 1: Simple functions - convert(), to_json(), convert_string(), convert_file()
- Level 2: Configured converter - XMLToJSONConverter class
- Level 3: Building blocks - XMLEventReader and JSONTreeBuilder
"""

__version__ = "0.1.0"
__author__ = "XML to JSON Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Configured converter
from .api import XMLToJSONConverter, convert, convert_file, convert_string, to_json

# Level 3: Building blocks
from .events import EventPosition, EventType, XMLEvent, XMLEventReader

# Configuration classes for advanced usage
from .shared.config import ConverterConfig, ReaderConfig, TreeConfig

# Errors
from .shared.errors import ConversionError, DepthLimitExceededError, XMLToJSONError

# Core result objects for all API levels
from .shared.result import ConversionMetrics, ConversionResult, DiagnosticSeverity
from .tree import JSONTreeBuilder

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple conversion functions (progressive disclosure entry point)
    "convert",
    "to_json",
    "convert_string",
    "convert_file",

    # Level 2: Configured converter class
    "XMLToJSONConverter",

    # Level 3: Building blocks
    "XMLEventReader",
    "XMLEvent",
    "EventType",
    "EventPosition",
    "JSONTreeBuilder",

    # Result objects
    "ConversionResult",
    "ConversionMetrics",
    "DiagnosticSeverity",

    # Configuration classes for advanced usage
    "ConverterConfig",
    "ReaderConfig",
    "TreeConfig",

    # Errors
    "XMLToJSONError",
    "ConversionError",
    "DepthLimitExceededError",
]
