"""Configuration classes for XML to JSON conversion.

This module provides configuration objects for the event reader and the tree
builder, composed into one immutable ``ConverterConfig``.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

DEFAULT_MAX_DEPTH = 1000


@dataclass(frozen=True)
class ReaderConfig:
    """Configuration for the lexical event reader."""

    # Strip text runs and skip whitespace-only ones
    trim_text: bool = True
    # Replace predefined entities and character references
    decode_entities: bool = True
    # Encoding used when the input is bytes
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """Validate reader configuration."""
        if not self.encoding:
            raise ValueError("encoding cannot be empty")
        try:
            "".encode(self.encoding)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {self.encoding}") from e


@dataclass(frozen=True)
class TreeConfig:
    """Configuration for building the value tree."""

    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ValueError("max_depth must be an integer")
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


_COMPONENTS = ("reader", "tree")


@dataclass(frozen=True)
class ConverterConfig:
    """Complete configuration for a conversion.

    Frozen so one instance can be shared between threads converting
    different documents.
    """

    reader: ReaderConfig = field(default_factory=ReaderConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)

    collect_diagnostics: bool = True
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete converter configuration."""
        try:
            self.reader.__post_init__()
            self.tree.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "ConverterConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Field overrides; ``component__field`` targets a nested
                component configuration

        Returns:
            New ConverterConfig instance with overrides applied

        Example:
            >>> config = ConverterConfig()
            >>> config.override(reader__trim_text=False, tree__max_depth=64)
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        new_fields: Dict[str, Any] = {}

        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                new_fields[key] = value

        for component, overrides in nested_overrides.items():
            try:
                new_fields[component] = replace(getattr(self, component), **overrides)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=component) from e

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "reader": {
                "trim_text": self.reader.trim_text,
                "decode_entities": self.reader.decode_entities,
                "encoding": self.reader.encoding,
            },
            "tree": {
                "max_depth": self.tree.max_depth,
            },
            "collect_diagnostics": self.collect_diagnostics,
            "name": self.name,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConverterConfig":
        """Create configuration from dictionary.

        Missing keys keep their defaults.
        """
        try:
            reader = ReaderConfig(**data.get("reader", {}))
            tree = TreeConfig(**data.get("tree", {}))
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"Invalid configuration data: {e}") from e

        top_level = {
            key: data[key]
            for key in ("collect_diagnostics", "name")
            if key in data
        }
        return cls(reader=reader, tree=tree, **top_level)

    @classmethod
    def from_json(cls, json_str: str) -> "ConverterConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "ConverterConfig":
        """Trimmed text, entity decoding and the default depth limit."""
        return cls(name="default")

    @classmethod
    def preserve_whitespace(cls) -> "ConverterConfig":
        """Keep text runs exactly as they appear, whitespace-only ones included."""
        return cls(reader=ReaderConfig(trim_text=False), name="preserve_whitespace")

    @classmethod
    def strict_depth(cls, max_depth: int) -> "ConverterConfig":
        """Reject documents nested deeper than ``max_depth`` elements."""
        try:
            tree = TreeConfig(max_depth=max_depth)
        except ValueError as e:
            raise ConfigValidationError(str(e), field_name="max_depth") from e
        return cls(tree=tree, name="strict_depth")
