"""Public conversion API for XML to JSON conversion.

Provides module-level convenience functions and the configured
``XMLToJSONConverter`` class.
"""

from .converter import (
    XMLToJSONConverter,
    convert,
    convert_file,
    convert_string,
    to_json,
)

__all__ = [
    "XMLToJSONConverter",
    "convert",
    "convert_file",
    "convert_string",
    "to_json",
]
