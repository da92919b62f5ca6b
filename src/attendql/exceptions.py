"""Custom exceptions for AttendQL.

Every stage of the question pipeline raises a subclass of ``AttendQLError``
for failures caused by external data (the translator's output, the store).
The pipeline boundary turns these into a structured failure outcome; anything
else is a bug and propagates.
"""

from __future__ import annotations

from typing import Any


class AttendQLError(Exception):
    """Base exception for all AttendQL errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ConnectionError(AttendQLError):
    """Failed to connect to the database."""

    pass


class TranslationUnavailableError(AttendQLError):
    """The text-generation service did not produce a usable completion."""

    def __init__(self, kind: str, reason: str) -> None:
        message = f"Translation unavailable ({kind}): {reason}"
        super().__init__(message, {"kind": kind, "reason": reason})
        self.kind = kind
        self.reason = reason


class QueryNormalizationError(AttendQLError):
    """The translator's output contained no query once cleaned up."""

    pass


class UnsafeQueryRejectedError(AttendQLError):
    """Generated query text failed the read-only Student projection check."""

    def __init__(self, reason: str, sql: str) -> None:
        super().__init__(f"Unsafe query rejected: {reason}", {"reason": reason, "sql": sql})
        self.reason = reason
        self.sql = sql


class QueryExecutionError(AttendQLError):
    """The store rejected or failed on a well-formed query."""

    pass


class UnboundParameterError(QueryExecutionError):
    """Query references named placeholders that have no bound value."""

    def __init__(self, missing: list[str]) -> None:
        message = (
            f"Query references unbound parameters: {', '.join(missing)}. "
            "Include a YYYY-MM-DD date in the question for each date placeholder."
        )
        super().__init__(message, {"missing": missing})
        self.missing = missing
