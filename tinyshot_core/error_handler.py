"""
User-Friendly Error Handler.

Converts snapshot errors into helpful messages with actionable suggestions.
"""

from typing import Dict, Optional
import logging

from .exceptions import InputTooLarge

logger = logging.getLogger(__name__)


def format_user_friendly_error(
    error: Exception,
    technical_details: Optional[str] = None
) -> Dict:
    """
    Convert technical error to user-friendly message.

    Args:
        error: The exception that occurred
        technical_details: Additional technical information

    Returns:
        Dictionary with user-friendly error information:
        {
            "message": str,          # User-friendly message
            "suggestion": str,       # Actionable suggestion
            "technical": str,        # Technical details
            "severity": str,         # "critical", "error", "warning"
            "can_retry": bool        # Whether retry might help
        }
    """
    error_str = str(error)

    if isinstance(error, InputTooLarge):
        result = ERROR_MAPPINGS["too large"].copy()
        result["technical"] = technical_details or error_str
        return result

    for pattern, friendly_error in ERROR_MAPPINGS.items():
        if pattern.lower() in error_str.lower():
            result = friendly_error.copy()
            result["technical"] = technical_details or error_str
            logger.debug(f"Mapped error to user-friendly: {result['message']}")
            return result

    return {
        "message": "Unexpected error while building the snapshot",
        "suggestion": "Re-run with --verbose and check the logs",
        "technical": technical_details or error_str,
        "severity": "error",
        "can_retry": True
    }


# Error mappings: pattern -> user-friendly info
ERROR_MAPPINGS = {
    "too large": {
        "message": "The page HTML is too large to compress",
        "suggestion": "Capture a smaller part of the page (e.g. a single frame or container)",
        "severity": "error",
        "can_retry": False
    },
    "html extraction failed": {
        "message": "The browser snapshot did not contain any HTML",
        "suggestion": "Make sure a page is open in the browser before taking a snapshot",
        "severity": "warning",
        "can_retry": True
    },
    "positive integer": {
        "message": "Invalid snapshot limits",
        "suggestion": "Use positive whole numbers for --max-text and --max-elems",
        "severity": "warning",
        "can_retry": False
    },
    "expecting value": {
        "message": "The snapshot file is not valid JSON",
        "suggestion": "Pass the JSON printed by 'tinyshot compress'",
        "severity": "error",
        "can_retry": False
    },
    "no such file": {
        "message": "Input file not found",
        "suggestion": "Check the path or use '-' to read from stdin",
        "severity": "error",
        "can_retry": False
    },
    "permission denied": {
        "message": "No permission to read the input file",
        "suggestion": "Check file permissions",
        "severity": "error",
        "can_retry": False
    },
}


def should_retry_error(error: Exception) -> bool:
    """Determine if error suggests a retry might help."""
    friendly = format_user_friendly_error(error)
    return friendly.get("can_retry", False)


def create_error_response(error: Exception) -> Dict:
    """
    Create standardized error response for tool callers and the CLI.

    Returns:
        {"success": False, "error": {message, suggestion, severity, can_retry, technical}}
    """
    friendly = format_user_friendly_error(error)
    return {
        "success": False,
        "error": {
            "message": friendly["message"],
            "suggestion": friendly["suggestion"],
            "severity": friendly["severity"],
            "can_retry": friendly["can_retry"],
            "technical": friendly["technical"],
        }
    }
