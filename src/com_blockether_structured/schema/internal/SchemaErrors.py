"""
Base exception classes for structured output extraction.

Each package defines its own exceptions on top of StructuredOutputError so
callers can catch the whole family with a single except clause.
"""

from typing import Any, Dict, Optional


class StructuredOutputError(Exception):
    """
    Base exception for all structured output errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for logging or API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidSchemaKind(StructuredOutputError):
    """Schema composition received a value that is neither a variant nor a composed schema."""

    def __init__(self, value: Any):
        super().__init__(
            f"Invalid schema kind: {type(value).__name__}",
            details={"value": repr(value)},
        )
        self.value = value
