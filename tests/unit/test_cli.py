"""CLI command tests for AttendQL."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from attendql.cli.main import app

runner = CliRunner()


@pytest.fixture
def api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Configure a dummy OpenAI key; zero-absence questions never use it."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")


class TestVersionCommand:
    """Test the version command."""

    def test_version_output(self) -> None:
        """Test that version command shows version info."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "AttendQL v0.1.0" in result.stdout


class TestStoreCommands:
    """Test store setup and schema commands."""

    def test_init(self, temp_db: str) -> None:
        """Init creates the tables and reports success."""
        result = runner.invoke(app, ["-d", temp_db, "--json", "init"])
        assert result.exit_code == 0, result.stdout

        data = json.loads(result.stdout)
        assert data["success"] is True
        assert data["database"] == temp_db

    def test_init_is_repeatable(self, seeded_db: str) -> None:
        """Init on an existing store leaves it intact."""
        result = runner.invoke(app, ["-d", seeded_db, "init"])
        assert result.exit_code == 0
        assert "Database initialized" in result.stdout

    def test_schema_json(self) -> None:
        """Schema prints the schema context as JSON."""
        result = runner.invoke(app, ["--json", "schema"])
        assert result.exit_code == 0

        data = json.loads(result.stdout)
        assert [e["table"] for e in data["entities"]] == [
            "students",
            "departments",
            "semesters",
            "subjects",
            "attendance_records",
        ]

    def test_schema_tables(self) -> None:
        """Schema prints one table per entity."""
        result = runner.invoke(app, ["schema"])
        assert result.exit_code == 0
        assert "Student (students)" in result.stdout


class TestPromptCommand:
    """Test the prompt command."""

    def test_prompt_text(self) -> None:
        """The prompt ends with the question and the answer instruction."""
        result = runner.invoke(app, ["prompt", "students absent on 2024-04-10"])
        assert result.exit_code == 0
        assert '"students absent on 2024-04-10"' in result.stdout
        assert "Only return the SQL query" in result.stdout

    def test_prompt_json(self) -> None:
        """JSON mode returns the question and the prompt."""
        result = runner.invoke(app, ["--json", "prompt", "hello"])
        data = json.loads(result.stdout)
        assert data["question"] == "hello"
        assert data["prompt"].startswith("You are a database expert")


class TestAskCommand:
    """Test the ask command."""

    def test_ask_zero_absence_json(self, seeded_db: str, api_key: None) -> None:
        """Zero-absence questions are answered from the canonical plan."""
        result = runner.invoke(
            app, ["-d", seeded_db, "--json", "ask", "students with perfect attendance"]
        )
        assert result.exit_code == 0, result.stdout

        data = json.loads(result.stdout)
        assert data["total_results"] == 2
        assert {s["student_code"] for s in data["students"]} == {"GC002", "GC003"}
        assert all(s["absence_hours"] == 0 for s in data["students"])
        assert data["original_query"] == "students with perfect attendance"
        assert data["error"] is None
        assert "EXISTS" in data["generated_query"]

    def test_ask_summary(self, seeded_db: str, api_key: None) -> None:
        """Rich output starts with the summary."""
        result = runner.invoke(app, ["-d", seeded_db, "ask", "students with zero absences"])
        assert result.exit_code == 0
        assert "Found 2 students matching your query." in result.stdout

    def test_ask_blank_question(self, seeded_db: str, api_key: None) -> None:
        """Blank questions fail with a prompt to ask again."""
        result = runner.invoke(app, ["-d", seeded_db, "--json", "ask", "   "])
        assert result.exit_code == 1

        data = json.loads(result.stdout)
        assert data["summary"] == "Please provide a valid search query."
        assert data["error"] == "EmptyQuestion"

    def test_zero_absence_without_api_key(
        self, seeded_db: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Canonical questions need no OpenAI key."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        result = runner.invoke(
            app, ["-d", seeded_db, "--json", "ask", "students with perfect attendance"]
        )
        assert result.exit_code == 0, result.stdout

        data = json.loads(result.stdout)
        assert {s["student_code"] for s in data["students"]} == {"GC002", "GC003"}

    def test_translated_without_api_key(
        self, seeded_db: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Without a key, translated questions get the generic failure summary."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        result = runner.invoke(app, ["-d", seeded_db, "ask", "students in INFORMATIQUE"])
        assert result.exit_code == 1
        assert "Error processing your query. Please try again." in result.stdout
        assert "OpenAI API key" not in result.stdout
