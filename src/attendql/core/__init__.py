"""Core components for AttendQL."""

from attendql.core.config import Settings, get_database_url
from attendql.core.connection import DatabaseConnection
from attendql.core.types import (
    FailureKind,
    QueryOutcome,
    QueryPlan,
    QueryResponse,
    StudentView,
    TranslationFailure,
    TranslationResult,
    TranslationSuccess,
    ValidationReport,
)

__all__ = [
    "DatabaseConnection",
    "Settings",
    "get_database_url",
    "FailureKind",
    "QueryPlan",
    "QueryOutcome",
    "QueryResponse",
    "StudentView",
    "TranslationFailure",
    "TranslationResult",
    "TranslationSuccess",
    "ValidationReport",
]
