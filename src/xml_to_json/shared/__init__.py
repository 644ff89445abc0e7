"""Shared utilities for XML to JSON conversion.

This module provides configuration objects, result and diagnostic types, the
exception hierarchy and logging helpers used by every layer.
"""

from .result import (
    ConversionMetrics,
    ConversionResult,
    DiagnosticEntry,
    DiagnosticSeverity,
    JSONValue,
)
from .config import (
    ConfigError,
    ConfigValidationError,
    ConverterConfig,
    ReaderConfig,
    TreeConfig,
)
from .errors import (
    ConversionError,
    DepthLimitExceededError,
    XMLToJSONError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "ConversionMetrics",
    "ConversionResult",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "JSONValue",
    "ConfigError",
    "ConfigValidationError",
    "ConverterConfig",
    "ReaderConfig",
    "TreeConfig",
    "ConversionError",
    "DepthLimitExceededError",
    "XMLToJSONError",
    "CorrelationLogger",
    "get_logger",
]
