"""Result objects and diagnostic types for XML to JSON conversion.

The converter never aborts on malformed input. Instead, every fragment it
drops and every event it skips is recorded here so callers can decide for
themselves how much to trust a best-effort tree.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Union

# Output representation: None, str, ordered dict, list
JSONValue = Union[None, str, Dict[str, Any], List[Any]]


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Input was dropped or repaired
    ERROR = auto()      # Error conditions that were recovered
    CRITICAL = auto()   # Conversion failed


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert the entry into a JSON-serializable dictionary."""
        return {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
            "position": self.position,
            "details": self.details,
        }


@dataclass
class ConversionMetrics:
    """Performance and volume metrics for one conversion."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    events_processed: int = 0
    elements_converted: int = 0
    max_depth_reached: int = 0
    fragments_dropped: int = 0

    @property
    def events_per_second(self) -> float:
        """Calculate events processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.events_processed * 1000.0) / self.processing_time_ms

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms


@dataclass
class ConversionResult:
    """Outcome of a conversion that never raises.

    ``value`` holds the best-effort tree. When ``success`` is False the
    conversion hit a hard failure (the depth limit) and ``error`` carries the
    exception; ``value`` is then None.
    """

    value: JSONValue = None
    success: bool = True
    error: Optional[Exception] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: ConversionMetrics = field(default_factory=ConversionMetrics)
    correlation_id: Optional[str] = None

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    @property
    def is_lossless(self) -> bool:
        """True when nothing was dropped or skipped while converting."""
        return self.success and not any(
            diag.severity != DiagnosticSeverity.DEBUG
            and diag.severity != DiagnosticSeverity.INFO
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Summarize the result for logging and CLI output."""
        return {
            "success": self.success,
            "error": str(self.error) if self.error else None,
            "diagnostic_count": len(self.diagnostics),
            "fragments_dropped": self.metrics.fragments_dropped,
            "elements_converted": self.metrics.elements_converted,
            "max_depth_reached": self.metrics.max_depth_reached,
            "processing_time_ms": self.metrics.processing_time_ms,
        }
