"""Safety gate for generated SQL.

Generated text comes from an untrusted source and runs with the store's
full privileges, so before execution it must:
- be a single SELECT that projects the Student table (``SELECT s.* FROM
  students s ...``, or a bare ``*`` when nothing is joined) followed only by
  JOIN/WHERE/GROUP/HAVING/ORDER/LIMIT
- contain no mutating or administrative keyword
- match none of the known injection patterns
String literals are blanked before the keyword checks, so a department
named 'Update Team' does not trip the gate.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum


class QueryType(StrEnum):
    """Types of SQL queries."""

    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    OTHER = "OTHER"


STUDENT_TABLE = "students"

CLAUSE_KEYWORDS = (
    "WHERE",
    "JOIN",
    "INNER",
    "LEFT",
    "RIGHT",
    "FULL",
    "CROSS",
    "GROUP",
    "HAVING",
    "ORDER",
    "LIMIT",
    "OFFSET",
)

_CLAUSE_ALTERNATION = "|".join(CLAUSE_KEYWORDS)

STUDENT_PROJECTION = re.compile(
    r"^SELECT\s+(?:DISTINCT\s+)?(?:(?P<projection>[A-Za-z_]\w*)\.)?\*\s+"
    rf"FROM\s+{STUDENT_TABLE}\b"
    rf"(?:\s+(?:AS\s+)?(?!(?:{_CLAUSE_ALTERNATION})\b)(?P<alias>[A-Za-z_]\w*))?"
    r"(?P<rest>.*)$",
    re.IGNORECASE | re.DOTALL,
)

JOIN_KEYWORD = re.compile(r"\bJOIN\b", re.IGNORECASE)

ALLOWED_CONTINUATION = re.compile(rf"^\s*(?:$|(?:{_CLAUSE_ALTERNATION})\b)", re.IGNORECASE)

MUTATING_KEYWORDS = re.compile(
    r"\b(INSERT|UPDATE|DELETE|DROP|ALTER|CREATE|TRUNCATE|REPLACE|MERGE|UPSERT|GRANT|"
    r"REVOKE|ATTACH|DETACH|PRAGMA|VACUUM|REINDEX|COPY|CALL|EXEC|EXECUTE|LOCK)\b",
    re.IGNORECASE,
)

STRING_LITERAL = re.compile(r"'(?:[^']|'')*'")

# Dangerous SQL patterns to block
INJECTION_PATTERNS = [
    r";",  # stacked statements
    r"--",  # line comments
    r"/\*",  # block comments
    r"\bUNION\b",  # second projection
    r"\bINTERSECT\b",
    r"\bEXCEPT\b",
    r"INTO\s+OUTFILE",
    r"INTO\s+DUMPFILE",
    r"LOAD_FILE\s*\(",
    r"BENCHMARK\s*\(",
    r"SLEEP\s*\(",
    r"WAITFOR\s+DELAY",
    r"xp_cmdshell",
    r"sp_executesql",
    r"pg_sleep\s*\(",
    r"pg_read_file\s*\(",
    r"pg_ls_dir\s*\(",
    r"randomblob\s*\(",
    r"load_extension\s*\(",
]


@dataclass
class ValidationResult:
    """Result of query validation."""

    valid: bool
    """Whether the query passed validation."""

    sql: str = ""
    """The validated SQL query, trailing semicolon removed."""

    error: str | None = None
    """Error message if validation failed."""

    query_type: QueryType = QueryType.OTHER
    """Detected query type."""

    warnings: list[str] = field(default_factory=list)
    """Non-fatal warnings about the query."""


class QueryValidator:
    """Checks generated SQL against the read-only Student projection shape."""

    def validate(self, sql: str) -> ValidationResult:
        """Validate an SQL query.

        Args:
            sql: SQL query string to validate

        Returns:
            ValidationResult with validation status and details
        """
        cleaned_sql = self._clean_sql(sql)

        if not cleaned_sql:
            return ValidationResult(valid=False, error="Empty query")

        query_type = self._detect_query_type(cleaned_sql)
        if query_type != QueryType.SELECT:
            return ValidationResult(
                valid=False,
                error=f"Only SELECT statements are allowed. Got: {query_type.value}",
                query_type=query_type,
            )

        # Keyword checks run on the text with string literals blanked out
        skeleton = STRING_LITERAL.sub("''", cleaned_sql)

        injection_check = self._check_injection_patterns(skeleton)
        if injection_check:
            return ValidationResult(
                valid=False,
                error=f"Query contains potentially unsafe pattern: {injection_check}",
                query_type=query_type,
            )

        mutating = MUTATING_KEYWORDS.search(skeleton)
        if mutating:
            return ValidationResult(
                valid=False,
                error=f"Query contains mutating keyword: {mutating.group(1).upper()}",
                query_type=query_type,
            )

        shape_error = self._check_projection(skeleton)
        if shape_error:
            return ValidationResult(valid=False, error=shape_error, query_type=query_type)

        return ValidationResult(
            valid=True,
            sql=cleaned_sql,
            query_type=query_type,
            warnings=self._check_warnings(skeleton),
        )

    def _clean_sql(self, sql: str) -> str:
        """Strip surrounding whitespace and trailing semicolons."""
        return sql.strip().rstrip(";").strip()

    def _detect_query_type(self, sql: str) -> QueryType:
        """Detect the type of SQL query.

        Args:
            sql: Cleaned SQL string

        Returns:
            QueryType enum value
        """
        upper_sql = sql.upper().lstrip()

        if upper_sql.startswith("SELECT"):
            return QueryType.SELECT
        elif upper_sql.startswith("INSERT"):
            return QueryType.INSERT
        elif upper_sql.startswith("UPDATE"):
            return QueryType.UPDATE
        elif upper_sql.startswith("DELETE"):
            return QueryType.DELETE
        else:
            return QueryType.OTHER

    def _check_injection_patterns(self, sql: str) -> str | None:
        """Return the first matching injection pattern, or None if clean."""
        for pattern in INJECTION_PATTERNS:
            if re.search(pattern, sql, re.IGNORECASE):
                return pattern
        return None

    def _check_projection(self, sql: str) -> str | None:
        """Return an error if the query does not project the Student table."""
        match = STUDENT_PROJECTION.match(sql)
        if match is None:
            return (
                "Query must start with a Student projection: "
                f"SELECT [DISTINCT] [<alias>.]* FROM {STUDENT_TABLE} [<alias>]"
            )

        projection = match.group("projection")
        alias = match.group("alias") or STUDENT_TABLE
        if projection is None:
            # a bare * would also project every joined table
            if JOIN_KEYWORD.search(match.group("rest")):
                return f"Use {alias}.* instead of * when joining other tables"
        elif projection.lower() != alias.lower():
            return f"Projection '{projection}.*' does not refer to the {STUDENT_TABLE} table"

        if not ALLOWED_CONTINUATION.match(match.group("rest")):
            return (
                "Only JOIN, WHERE, GROUP BY, HAVING, ORDER BY and LIMIT may follow "
                f"FROM {STUDENT_TABLE}"
            )
        return None

    def _check_warnings(self, sql: str) -> list[str]:
        """Generate warnings for potentially problematic queries."""
        warnings = []
        if re.search(r"\bJOIN\s+attendance_records\b", sql, re.IGNORECASE) and not re.search(
            r"\b(DISTINCT|GROUP\s+BY)\b", sql, re.IGNORECASE
        ):
            warnings.append(
                "Join on attendance_records without DISTINCT or GROUP BY may repeat students."
            )
        return warnings


def validate_query(sql: str) -> ValidationResult:
    """Convenience function to validate a query.

    Args:
        sql: SQL query to validate

    Returns:
        ValidationResult
    """
    return QueryValidator().validate(sql)
