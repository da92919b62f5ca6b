"""AttendQL - natural language questions over student attendance data.

Turns a free-text question ("which students have more than 9 absence hours
in GÉNIE CIVIL?") into a parameterized, read-only SQL query, runs it against
the attendance store and summarizes the result.

Example:
    from attendql import QuestionPipeline, Settings

    with QuestionPipeline.from_settings(Settings.from_env()) as pipeline:
        outcome = pipeline.process_question("students with perfect attendance")
        print(outcome.summary)
        for student in outcome.students:
            print(student.full_name, student.department.name)
"""

from attendql.core.config import Settings
from attendql.core.connection import DatabaseConnection
from attendql.core.engine import QuestionPipeline
from attendql.core.types import (
    FailureKind,
    QueryOutcome,
    QueryPlan,
    QueryResponse,
    StudentView,
    TranslationFailure,
    TranslationSuccess,
    ValidationReport,
)
from attendql.exceptions import (
    AttendQLError,
    ConnectionError,
    QueryExecutionError,
    QueryNormalizationError,
    TranslationUnavailableError,
    UnboundParameterError,
    UnsafeQueryRejectedError,
)
from attendql.query import (
    PromptBuilder,
    QueryExecutor,
    QueryValidator,
    ResultValidator,
    classify,
    extract_date_params,
    normalize,
    summarize,
)
from attendql.translation import OpenAIGateway, TranslationGateway

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "QuestionPipeline",
    "DatabaseConnection",
    "Settings",
    # Types
    "QueryPlan",
    "QueryOutcome",
    "QueryResponse",
    "StudentView",
    "ValidationReport",
    "FailureKind",
    "TranslationSuccess",
    "TranslationFailure",
    # Stages
    "classify",
    "PromptBuilder",
    "TranslationGateway",
    "OpenAIGateway",
    "normalize",
    "extract_date_params",
    "QueryValidator",
    "QueryExecutor",
    "ResultValidator",
    "summarize",
    # Exceptions
    "AttendQLError",
    "ConnectionError",
    "TranslationUnavailableError",
    "QueryNormalizationError",
    "UnsafeQueryRejectedError",
    "QueryExecutionError",
    "UnboundParameterError",
]
