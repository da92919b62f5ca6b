"""Question-to-SQL translation, execution and summarization.

Stages, in pipeline order:
    1. Classifier - canonical plans for questions with a known-correct query
    2. Prompt Builder - schema context, worked examples and the question
    3. Normalizer - fence stripping and mis-decoded character repair
    4. Parameter Extractor - binds question dates to named placeholders
    5. Validator + Executor - safety gate, then read-only execution
    6. Result Validator - zero-absence consistency check
    7. Summarizer - deterministic prose description
"""

from attendql.query.classifier import classify, is_zero_absence_question
from attendql.query.context import SchemaContext, get_schema_context
from attendql.query.executor import QueryExecutor
from attendql.query.normalizer import normalize
from attendql.query.parameters import extract_date_params
from attendql.query.prompt import PromptBuilder, build_prompt
from attendql.query.results import ResultValidator
from attendql.query.summary import summarize
from attendql.query.validator import QueryValidator, ValidationResult

__all__ = [
    "classify",
    "is_zero_absence_question",
    "SchemaContext",
    "get_schema_context",
    "PromptBuilder",
    "build_prompt",
    "normalize",
    "extract_date_params",
    "QueryValidator",
    "ValidationResult",
    "QueryExecutor",
    "ResultValidator",
    "summarize",
]
