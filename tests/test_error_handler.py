"""
Unit tests for User-Friendly Error Handler.

Tests error mapping and formatting for the CLI and tool callers.
"""

import pytest
from tinyshot_core.error_handler import (
    format_user_friendly_error,
    should_retry_error,
    create_error_response
)
from tinyshot_core.exceptions import InputTooLarge, SnapshotToolError


def test_input_too_large_error():
    """Oversized HTML is not retryable."""
    error = InputTooLarge(6_000_000, 5_000_000)

    result = format_user_friendly_error(error)

    assert "too large" in result["message"].lower()
    assert result["severity"] == "error"
    assert result["can_retry"] is False
    assert "6000000" in result["technical"]


def test_wrapped_too_large_error():
    """Tool errors carrying the size message map the same way."""
    error = SnapshotToolError("Snapshot tool failed: HTML too large for processing")

    assert should_retry_error(error) is False


def test_missing_html_error():
    error = SnapshotToolError("HTML extraction failed")

    result = format_user_friendly_error(error)

    assert "did not contain any HTML" in result["message"]
    assert result["can_retry"] is True


def test_missing_file_error():
    error = FileNotFoundError(2, "No such file or directory", "page.html")

    result = format_user_friendly_error(error)

    assert result["message"] == "Input file not found"
    assert result["can_retry"] is False


def test_format_unknown_error():
    """Test unknown error fallback."""
    error = RuntimeError("Some random error")

    result = format_user_friendly_error(error)

    assert "unexpected" in result["message"].lower()
    assert result["severity"] == "error"
    assert result["can_retry"] is True
    assert result["technical"] == "Some random error"


def test_technical_details_override():
    result = format_user_friendly_error(RuntimeError("x"), technical_details="details")
    assert result["technical"] == "details"


def test_create_error_response():
    response = create_error_response(ValueError("max_text_length must be a positive integer, got 0"))

    assert response["success"] is False
    assert response["error"]["message"] == "Invalid snapshot limits"
    assert response["error"]["can_retry"] is False
