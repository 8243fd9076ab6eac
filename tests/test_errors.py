#!/usr/bin/env python3
"""
Tests for error types and severity classification.
"""

import pytest
import sys
import os
from unittest.mock import patch

# Add app to Python path for testing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from bookcal.core.errors import (
    BookcalError,
    ErrorSeverity,
    InvalidViewError,
    NotFoundError,
    determine_severity,
    log_error,
)


@pytest.mark.unit
class TestErrors:

    def test_not_found_message(self):
        err = NotFoundError("Appointment", "appt-1")
        assert isinstance(err, BookcalError)
        assert str(err) == "Appointment 'appt-1' not found"
        assert err.entity_id == "appt-1"

    def test_invalid_view_is_value_error(self):
        err = InvalidViewError("year")
        assert isinstance(err, ValueError)
        assert err.view == "year"

    def test_severity_by_type(self):
        assert determine_severity(NotFoundError("Appointment", "x")) is ErrorSeverity.LOW
        assert determine_severity(InvalidViewError("year")) is ErrorSeverity.HIGH
        assert determine_severity(RuntimeError("database is locked")) is ErrorSeverity.HIGH
        assert determine_severity(RuntimeError("boom")) is ErrorSeverity.MEDIUM

    def test_severity_by_status_code(self):
        err = RuntimeError("upstream")
        err.status_code = 404
        assert determine_severity(err) is ErrorSeverity.LOW
        err.status_code = 503
        assert determine_severity(err) is ErrorSeverity.HIGH

    def test_log_error_levels(self):
        with patch("bookcal.core.errors.logger") as mock_logger:
            assert log_error(NotFoundError("Appointment", "x"), {"endpoint": "/x"}) is ErrorSeverity.LOW
            mock_logger.warning.assert_called_once()
            assert mock_logger.warning.call_args.kwargs["endpoint"] == "/x"

            log_error(RuntimeError("boom"), severity=ErrorSeverity.CRITICAL)
            assert mock_logger.error.call_args.kwargs["severity"] == "critical"
