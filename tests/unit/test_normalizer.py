"""Tests for completion normalization."""

from __future__ import annotations

import pytest

from attendql.exceptions import QueryNormalizationError
from attendql.query.normalizer import (
    CHARACTER_REPAIRS,
    REPAIR_TABLE,
    WORD_REPAIRS,
    normalize,
    repair_characters,
    strip_code_fences,
)

QUERY = "SELECT s.* FROM students s"


class TestStripCodeFences:
    """Test markdown fence removal."""

    def test_fence_with_language_tag(self) -> None:
        """The fence and the sql tag are dropped."""
        assert strip_code_fences(f"```sql\n{QUERY}\n```") == QUERY

    def test_fence_with_other_tag(self) -> None:
        """Any language tag line is dropped."""
        assert strip_code_fences(f"```postgresql\n{QUERY}\n```") == QUERY

    def test_fence_without_tag(self) -> None:
        """A bare fence is dropped."""
        assert strip_code_fences(f"```\n{QUERY}\n```") == QUERY

    def test_inline_fence(self) -> None:
        """A single-line fence is dropped."""
        assert strip_code_fences(f"```{QUERY}```") == QUERY

    def test_query_on_tag_line_is_kept(self) -> None:
        """A first line holding the query is not mistaken for a tag."""
        text = "```SELECT s.*\nFROM students s\n```"
        assert strip_code_fences(text) == "SELECT s.*\nFROM students s"

    def test_no_fence(self) -> None:
        """Unfenced text is only trimmed."""
        assert strip_code_fences(f"  {QUERY}\n") == QUERY


class TestRepairCharacters:
    """Test the mis-decoded character table."""

    def test_department_names(self) -> None:
        """Known department names are repaired as whole words."""
        assert repair_characters("d.name = 'G╔NIE CIVIL'") == "d.name = 'GÉNIE CIVIL'"
        assert repair_characters("'G╔NIE ╔LECTRIQUE'") == "'GÉNIE ÉLECTRIQUE'"

    def test_single_characters(self) -> None:
        """Each single-character entry is applied."""
        for broken, fixed in CHARACTER_REPAIRS:
            assert repair_characters(f"x{broken}y") == f"x{fixed}y"

    def test_words_applied_before_characters(self) -> None:
        """Whole-word entries come first in the table."""
        assert REPAIR_TABLE[: len(WORD_REPAIRS)] == WORD_REPAIRS

    def test_correct_text_unchanged(self) -> None:
        """Correctly encoded text passes through."""
        text = "SELECT s.* FROM students s WHERE d.name = 'GÉNIE CIVIL'"
        assert repair_characters(text) == text

    @pytest.mark.parametrize("fixed", [fixed for _, fixed in REPAIR_TABLE])
    def test_repair_is_idempotent(self, fixed: str) -> None:
        """Repairing an already-correct string twice changes nothing."""
        once = repair_characters(fixed)
        assert once == fixed
        assert repair_characters(once) == fixed

    def test_no_target_is_a_source(self) -> None:
        """Replacement targets never feed another replacement."""
        sources = {broken for broken, _ in CHARACTER_REPAIRS}
        targets = {fixed for _, fixed in CHARACTER_REPAIRS}
        assert not sources & targets


class TestNormalize:
    """Test the full normalization step."""

    def test_fence_then_repair(self) -> None:
        """Fences are stripped and characters repaired."""
        raw = "```sql\nSELECT s.* FROM students s JOIN departments d ON d.id = s.department_id "
        raw += "WHERE d.name = 'G╔NIE CIVIL'\n```"
        assert normalize(raw).endswith("WHERE d.name = 'GÉNIE CIVIL'")
        assert normalize(raw).startswith("SELECT s.*")

    @pytest.mark.parametrize("raw", ["", "   \n", "```\n```", "```sql\n\n```"])
    def test_empty_result_raises(self, raw: str) -> None:
        """Nothing left after cleanup is a normalization error."""
        with pytest.raises(QueryNormalizationError):
            normalize(raw)
