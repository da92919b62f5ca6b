"""Prompt construction for question-to-SQL translation.

The prompt carries the task statement, the schema context, a unit note,
seven worked examples and the question itself. Composition is pure.
"""

from __future__ import annotations

from attendql.query.context import SchemaContext, get_schema_context

TASK_STATEMENT = (
    "You are a database expert that converts natural language questions about "
    "student attendance into SQL queries.\n"
    "The SQL must run unchanged on both PostgreSQL and SQLite."
)

UNIT_NOTE = (
    "IMPORTANT NOTE ON UNITS: attendance_records.duration is stored in minutes. "
    "When a question gives a threshold in hours, multiply it by 60 before comparing "
    "it with duration or SUM(duration)."
)

DATE_NOTE = (
    "IMPORTANT NOTE ON DATE PARAMETERS: for any predicate on a date, always use the "
    "named parameters :date (one day) or :startDate and :endDate (a range). Never "
    "write a literal date value in the query; the system binds these parameters "
    "from the dates written in the question (format YYYY-MM-DD)."
)

# Each example projects the student alias (s.*) so results map onto Student.
EXAMPLE_QUERIES = [
    {
        "description": (
            "Students with more than X absence hours "
            "(X is converted to minutes by multiplying by 60)"
        ),
        "sql": (
            "SELECT s.* FROM students s JOIN attendance_records a ON a.student_id = s.id "
            "WHERE a.is_present = false GROUP BY s.id HAVING SUM(a.duration) > (X * 60)"
        ),
    },
    {
        "description": "All students with at least one absence",
        "sql": (
            "SELECT DISTINCT s.* FROM students s JOIN attendance_records a "
            "ON a.student_id = s.id WHERE a.is_present = false"
        ),
    },
    {
        "description": "Students with exactly 0 absence hours (perfect attendance)",
        "sql": (
            "SELECT s.* FROM students s WHERE NOT EXISTS (SELECT 1 FROM attendance_records a "
            "WHERE a.student_id = s.id AND a.is_present = false)"
        ),
    },
    {
        "description": "Students absent on a specific date, e.g. 'absent on 2024-04-10'",
        "sql": (
            "SELECT DISTINCT s.* FROM students s JOIN attendance_records a "
            "ON a.student_id = s.id WHERE a.is_present = false AND a.date = :date"
        ),
    },
    {
        "description": (
            "Students absent within a date range, e.g. 'absent between 2024-04-01 and "
            "2024-04-30' (use only the :startDate and :endDate placeholders, never "
            "literal dates)"
        ),
        "sql": (
            "SELECT DISTINCT s.* FROM students s JOIN attendance_records a "
            "ON a.student_id = s.id WHERE a.is_present = false "
            "AND a.date BETWEEN :startDate AND :endDate"
        ),
    },
    {
        "description": "Students from a specific department",
        "sql": (
            "SELECT s.* FROM students s JOIN departments d ON d.id = s.department_id "
            "WHERE d.name = 'department_name'"
        ),
    },
    {
        "description": (
            "Students NOT in department 'XYZ' who have at least one absence "
            "(i.e. not perfect attendance)"
        ),
        "sql": (
            "SELECT s.* FROM students s JOIN departments d ON d.id = s.department_id "
            "WHERE d.name <> 'XYZ' AND EXISTS (SELECT 1 FROM attendance_records a "
            "WHERE a.student_id = s.id AND a.is_present = false)"
        ),
    },
]


def render_schema(context: SchemaContext) -> str:
    """Render the schema context as prompt text."""
    lines = [f"Database schema (version {context.version}) for a student attendance system:"]
    for entity in context.entities:
        lines.append("")
        lines.append(f"{entity.name} entity (table: {entity.table}):")
        for column in entity.columns:
            lines.append(f"- {column.name} ({column.type}): {column.description}")
        if entity.relationships:
            lines.append("- Relationships:")
            lines.extend(f"  * {rel}" for rel in entity.relationships)
    if context.notes:
        lines.append("")
        lines.append("Notes:")
        lines.extend(f"- {note}" for note in context.notes)
    return "\n".join(lines)


def render_examples() -> str:
    """Render the worked examples as a numbered list."""
    lines = ["Query examples and patterns:"]
    for number, example in enumerate(EXAMPLE_QUERIES, start=1):
        lines.append(f"{number}. {example['description']}:")
        lines.append(f"   {example['sql']}")
        lines.append("")
    return "\n".join(lines).rstrip()


class PromptBuilder:
    """Composes translation requests against a schema context."""

    def __init__(self, context: SchemaContext | None = None) -> None:
        """Initialize the builder.

        Args:
            context: Schema context to describe (defaults to the attendance schema)
        """
        self._context = context or get_schema_context()

    @property
    def context(self) -> SchemaContext:
        """The schema context rendered into every prompt."""
        return self._context

    def build(self, question: str) -> str:
        """Build the translation prompt for a question.

        Args:
            question: The user's natural language question

        Returns:
            Prompt text
        """
        return build_prompt(question, self._context)


def build_prompt(question: str, context: SchemaContext | None = None) -> str:
    """Convenience function to build a translation prompt.

    Args:
        question: The user's natural language question
        context: Schema context (defaults to the attendance schema)

    Returns:
        Prompt text
    """
    sections = [
        TASK_STATEMENT,
        render_schema(context or get_schema_context()),
        UNIT_NOTE,
        DATE_NOTE,
        render_examples(),
        (
            "Convert this natural language question to a SQL query that returns "
            f'a list of students (s.*): "{question}"\n'
            "Only return the SQL query, nothing else. Do not include any explanations."
        ),
    ]
    return "\n\n".join(sections)
