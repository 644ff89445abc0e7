"""Tests for correlation-aware logging."""

import logging

from xml_to_json.shared.logging import CorrelationLogger, get_logger


class TestCorrelationLogger:
    """Test CorrelationLogger structured fields."""

    def test_component_defaults_to_module_name(self) -> None:
        """Test that the component falls back to the last name segment."""
        logger = get_logger("xml_to_json.tree.builder")

        assert logger.component == "builder"
        assert logger.correlation_id is None

    def test_records_carry_correlation_fields(self, caplog) -> None:
        """Test that component and correlation ID reach the log record."""
        logger = get_logger("xml_to_json.test", "req-42", "test_component")

        with caplog.at_level(logging.INFO, logger="xml_to_json.test"):
            logger.info("Converted", extra={"elements_converted": 3})

        record = caplog.records[-1]
        assert record.getMessage() == "Converted"
        assert record.component == "test_component"
        assert record.correlation_id == "req-42"
        assert record.elements_converted == 3

    def test_bind_adds_context(self, caplog) -> None:
        """Test that bound fields appear on every record."""
        logger = CorrelationLogger("xml_to_json.test", "req-7", "bound").bind(source="stdin")

        with caplog.at_level(logging.WARNING, logger="xml_to_json.test"):
            logger.warning("Something was dropped")

        record = caplog.records[-1]
        assert record.source == "stdin"
        assert record.correlation_id == "req-7"
        assert record.component == "bound"

    def test_bind_leaves_original_untouched(self) -> None:
        """Test that binding returns a new logger."""
        logger = get_logger("xml_to_json.test")
        bound = logger.bind(extra_field=1)

        assert bound is not logger
        assert logger.context == {}
        assert bound.context == {"extra_field": 1}

    def test_is_debug_enabled(self, caplog) -> None:
        """Test debug detection follows the logger level."""
        logger = get_logger("xml_to_json.debug_check")

        with caplog.at_level(logging.DEBUG, logger="xml_to_json.debug_check"):
            assert logger.is_debug_enabled()

        with caplog.at_level(logging.ERROR, logger="xml_to_json.debug_check"):
            assert not logger.is_debug_enabled()
