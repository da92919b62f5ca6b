"""Cleanup of the translator's raw completion text.

Two steps, in order:
1. Strip markdown code fences and a leading language tag.
2. Repair accented letters that the translation channel is known to
   mis-decode (a Latin-1/CP850 mix-up on French department names).

The repair table is a best-effort fallback. Responses are decoded as UTF-8
by the OpenAI client, so a correct completion passes through unchanged:
no replacement target is also a replacement source, which keeps the
repair idempotent.
"""

from __future__ import annotations

import logging
import re

from attendql.exceptions import QueryNormalizationError

logger = logging.getLogger(__name__)

FENCE = "```"
LANGUAGE_TAG = re.compile(r"[A-Za-z][\w+-]*")

# Whole words are applied before single letters.
WORD_REPAIRS: list[tuple[str, str]] = [
    ("G╔NIE CIVIL", "GÉNIE CIVIL"),
    ("G╔NIE INFORMATIQUE", "GÉNIE INFORMATIQUE"),
    ("G╔NIE ╔LECTRIQUE", "GÉNIE ÉLECTRIQUE"),
]

CHARACTER_REPAIRS: list[tuple[str, str]] = [
    ("╔", "É"),
    ("Ú", "é"),
    ("Þ", "à"),
    ("Ó", "è"),
    ("Ö", "ê"),
    ("ü", "ù"),
    ("Ñ", "ç"),
    ("á", "ô"),
    ("¯", "î"),
    ("¹", "û"),
    ("Ù", "ë"),
    ("´", "ï"),
]

REPAIR_TABLE: list[tuple[str, str]] = WORD_REPAIRS + CHARACTER_REPAIRS


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ``` fence and its language tag, if present."""
    cleaned = text.strip()
    if not (cleaned.startswith(FENCE) and cleaned.endswith(FENCE) and len(cleaned) > 5):
        return cleaned

    inner = cleaned[len(FENCE) : -len(FENCE)]
    first_line, newline, rest = inner.partition("\n")
    tag = first_line.strip()
    if newline and LANGUAGE_TAG.fullmatch(tag) and tag.upper() != "SELECT":
        inner = rest
    elif newline and not tag:
        inner = rest
    return inner.strip()


def repair_characters(text: str) -> str:
    """Apply the mis-decoded character table."""
    repaired = text
    for broken, fixed in REPAIR_TABLE:
        repaired = repaired.replace(broken, fixed)
    if repaired != text:
        logger.info(f"Repaired mis-decoded characters in query: {repaired}")
    return repaired


def normalize(raw_text: str) -> str:
    """Turn a raw completion into query text.

    Args:
        raw_text: Completion text from the translation gateway

    Returns:
        Query text, without fences and with accented literals repaired

    Raises:
        QueryNormalizationError: If nothing remains after cleanup
    """
    query = repair_characters(strip_code_fences(raw_text))
    if not query:
        raise QueryNormalizationError("Translator returned no query text")
    return query
