"""Tests for translation prompt construction."""

from __future__ import annotations

import pytest

from attendql.query.context import SCHEMA_VERSION, get_schema_context
from attendql.query.prompt import (
    DATE_NOTE,
    EXAMPLE_QUERIES,
    UNIT_NOTE,
    PromptBuilder,
    build_prompt,
    render_examples,
    render_schema,
)
from attendql.query.validator import QueryValidator


class TestSchemaContext:
    """Test the static schema context."""

    def test_all_entities_described(self) -> None:
        """Every queryable entity is present."""
        context = get_schema_context()
        names = [e.name for e in context.entities]
        assert names == ["Student", "Department", "Semester", "Subject", "AttendanceRecord"]

    def test_entity_lookup(self) -> None:
        """Entities can be looked up by name."""
        entity = get_schema_context().entity("AttendanceRecord")
        assert entity.table == "attendance_records"
        assert "duration" in [c.name for c in entity.columns]

    def test_entity_lookup_unknown(self) -> None:
        """Unknown entity names raise KeyError listing the available ones."""
        with pytest.raises(KeyError, match="Available entities: Student"):
            get_schema_context().entity("Course")

    def test_to_dict(self) -> None:
        """Context serializes to a plain dict."""
        data = get_schema_context().to_dict()
        assert data["version"] == SCHEMA_VERSION
        assert len(data["entities"]) == 5
        assert data["entities"][0]["columns"][0] == {
            "name": "id",
            "type": "integer",
            "description": "Primary key",
        }


class TestExamples:
    """Test the worked examples."""

    def test_seven_examples(self) -> None:
        """Seven worked examples are provided."""
        assert len(EXAMPLE_QUERIES) == 7

    def test_examples_pass_safety_gate(self) -> None:
        """Every example has the shape the executor accepts."""
        validator = QueryValidator()
        for example in EXAMPLE_QUERIES:
            result = validator.validate(example["sql"])
            assert result.valid, f"{example['description']}: {result.error}"

    def test_date_examples_use_placeholders(self) -> None:
        """Date examples reference named placeholders only."""
        sql = " ".join(e["sql"] for e in EXAMPLE_QUERIES)
        assert ":date" in sql
        assert ":startDate" in sql
        assert ":endDate" in sql
        assert "2024-" not in sql

    def test_render_examples_numbered(self) -> None:
        """Examples are rendered as a numbered list."""
        rendered = render_examples()
        assert rendered.startswith("Query examples and patterns:")
        assert "\n7. " in rendered


class TestBuildPrompt:
    """Test full prompt composition."""

    def test_contains_schema_and_notes(self) -> None:
        """The prompt carries the schema, the unit note and the date note."""
        prompt = build_prompt("students absent on 2024-04-10")

        assert render_schema(get_schema_context()) in prompt
        assert UNIT_NOTE in prompt
        assert DATE_NOTE in prompt
        assert "multiply it by 60" in prompt

    def test_ends_with_question_and_instruction(self) -> None:
        """The question comes last, followed by the answer-format instruction."""
        question = "students with more than 9 absence hours"
        prompt = build_prompt(question)

        assert f'"{question}"' in prompt
        assert prompt.index(question) > prompt.index(render_examples())
        assert prompt.endswith(
            "Only return the SQL query, nothing else. Do not include any explanations."
        )

    def test_builder_matches_function(self) -> None:
        """PromptBuilder.build is the same composition."""
        builder = PromptBuilder()
        assert builder.build("hello") == build_prompt("hello")
        assert builder.context is get_schema_context()

    def test_is_deterministic(self) -> None:
        """Building twice gives the same text."""
        assert build_prompt("q") == build_prompt("q")
