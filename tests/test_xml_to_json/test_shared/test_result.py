"""Tests for result objects, diagnostics and the exception hierarchy."""

import pytest

from xml_to_json.shared import (
    ConversionError,
    ConversionMetrics,
    ConversionResult,
    DepthLimitExceededError,
    DiagnosticEntry,
    DiagnosticSeverity,
    XMLToJSONError,
)


class TestDiagnosticEntry:
    """Test DiagnosticEntry validation and serialization."""

    def test_entry_creation(self) -> None:
        """Test creating a diagnostic entry with position and details."""
        entry = DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message="Undecodable text dropped",
            component="xml_event_reader",
            position={"line": 1, "column": 4, "offset": 3},
            details={"kind": "text"},
            correlation_id="req-1",
        )

        assert entry.severity == DiagnosticSeverity.WARNING
        assert entry.timestamp > 0
        assert entry.correlation_id == "req-1"

    def test_empty_message_raises_error(self) -> None:
        """Test that an empty message raises ValueError."""
        with pytest.raises(ValueError, match="message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "", "reader")

    def test_empty_component_raises_error(self) -> None:
        """Test that an empty component raises ValueError."""
        with pytest.raises(ValueError, match="component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "message", "")

    def test_to_dict(self) -> None:
        """Test serialization uses the severity name."""
        entry = DiagnosticEntry(DiagnosticSeverity.ERROR, "boom", "builder")

        assert entry.to_dict() == {
            "severity": "ERROR",
            "message": "boom",
            "component": "builder",
            "position": None,
            "details": None,
        }


class TestConversionMetrics:
    """Test ConversionMetrics derived rates."""

    def test_rates_with_zero_time(self) -> None:
        """Test that rates are zero when no time was measured."""
        metrics = ConversionMetrics(events_processed=10, characters_processed=100)

        assert metrics.events_per_second == 0.0
        assert metrics.characters_per_second == 0.0

    def test_rates(self) -> None:
        """Test rate calculation from millisecond timings."""
        metrics = ConversionMetrics(
            processing_time_ms=500.0,
            events_processed=100,
            characters_processed=2000,
        )

        assert metrics.events_per_second == pytest.approx(200.0)
        assert metrics.characters_per_second == pytest.approx(4000.0)


class TestConversionResult:
    """Test ConversionResult helpers."""

    def test_default_result(self) -> None:
        """Test a fresh result is successful, empty and lossless."""
        result = ConversionResult()

        assert result.success is True
        assert result.value is None
        assert result.error is None
        assert result.diagnostics == []
        assert result.is_lossless
        assert not result.has_errors()

    def test_add_diagnostic_carries_correlation_id(self) -> None:
        """Test that added diagnostics inherit the result's correlation ID."""
        result = ConversionResult(correlation_id="abc")

        result.add_diagnostic(DiagnosticSeverity.INFO, "note", "test")

        assert result.diagnostics[0].correlation_id == "abc"

    def test_info_diagnostics_keep_result_lossless(self) -> None:
        """Test that informational entries do not count as loss."""
        result = ConversionResult()
        result.add_diagnostic(DiagnosticSeverity.INFO, "Unquoted value accepted", "reader")
        result.add_diagnostic(DiagnosticSeverity.DEBUG, "trace", "reader")

        assert result.is_lossless

    def test_warning_makes_result_lossy(self) -> None:
        """Test that a dropped fragment makes the result lossy."""
        result = ConversionResult()
        result.add_diagnostic(DiagnosticSeverity.WARNING, "Undecodable text dropped", "reader")

        assert not result.is_lossless
        assert not result.has_errors()

    def test_filter_by_severity(self) -> None:
        """Test filtering diagnostics by severity."""
        result = ConversionResult()
        result.add_diagnostic(DiagnosticSeverity.INFO, "one", "reader")
        result.add_diagnostic(DiagnosticSeverity.CRITICAL, "two", "converter")
        result.add_diagnostic(DiagnosticSeverity.INFO, "three", "reader")

        infos = result.get_diagnostics_by_severity(DiagnosticSeverity.INFO)

        assert [diag.message for diag in infos] == ["one", "three"]
        assert result.has_errors()

    def test_summary(self) -> None:
        """Test the summary dictionary."""
        result = ConversionResult(
            success=False,
            error=DepthLimitExceededError(3, 2),
            metrics=ConversionMetrics(elements_converted=2, fragments_dropped=1),
        )

        summary = result.summary()

        assert summary["success"] is False
        assert "exceeds the maximum of 2" in summary["error"]
        assert summary["elements_converted"] == 2
        assert summary["fragments_dropped"] == 1
        assert summary["diagnostic_count"] == 0


class TestErrors:
    """Test the exception hierarchy."""

    def test_hierarchy(self) -> None:
        """Test that every error derives from the package base error."""
        assert issubclass(ConversionError, XMLToJSONError)
        assert issubclass(DepthLimitExceededError, ConversionError)

    def test_depth_limit_error_attributes(self) -> None:
        """Test that the depth limit error keeps both depths."""
        error = DepthLimitExceededError(1001, 1000)

        assert error.depth == 1001
        assert error.max_depth == 1000
        assert str(error) == "Element nesting depth 1001 exceeds the maximum of 1000"
