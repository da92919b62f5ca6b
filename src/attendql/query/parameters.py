"""Date parameter extraction.

Generated queries reference dates only through named placeholders. The
values come from YYYY-MM-DD literals in the original question, never from
the generated text.
"""

from __future__ import annotations

import datetime as dt
import logging
import re

logger = logging.getLogger(__name__)

DATE_LITERAL = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")

# Same shape SQLAlchemy's text() uses to find bind parameters.
PLACEHOLDER = re.compile(r"(?<![:\w\\]):([A-Za-z_]\w*)(?!:)")
STRING_LITERAL = re.compile(r"'(?:[^']|'')*'")
RANGE_KEYWORD = re.compile(r"\bBETWEEN\b", re.IGNORECASE)

DATE_PARAM = "date"
START_DATE_PARAM = "startDate"
END_DATE_PARAM = "endDate"


def find_placeholders(query_text: str) -> list[str]:
    """Named placeholders referenced by a query, in order of first use.

    String literals are skipped, so a value like '10:30' is not a placeholder.
    """
    names: list[str] = []
    for match in PLACEHOLDER.finditer(STRING_LITERAL.sub("''", query_text)):
        if match.group(1) not in names:
            names.append(match.group(1))
    return names


def find_dates(text: str) -> list[dt.date]:
    """Calendar dates written as YYYY-MM-DD, in order of appearance."""
    dates = []
    for literal in DATE_LITERAL.findall(text):
        try:
            dates.append(dt.date.fromisoformat(literal))
        except ValueError:
            logger.warning(f"Ignoring invalid date literal in question: {literal}")
    return dates


def extract_date_params(question: str, query_text: str) -> dict[str, dt.date]:
    """Bind dates from the question to the query's date placeholders.

    A range predicate (BETWEEN, or the :startDate/:endDate placeholders) takes
    the first date as startDate and the second as endDate; a lone date is used
    for both ends. A :date placeholder takes the first date. Only placeholders
    the query actually references are bound.

    Args:
        question: Original question text
        query_text: Normalized generated query

    Returns:
        Mapping of placeholder name to date (empty if the question has no dates)
    """
    dates = find_dates(question)
    if not dates:
        return {}

    placeholders = set(find_placeholders(query_text))
    bindings: dict[str, dt.date] = {}

    is_range = RANGE_KEYWORD.search(query_text) is not None or bool(
        placeholders & {START_DATE_PARAM, END_DATE_PARAM}
    )
    if is_range:
        start = dates[0]
        end = dates[1] if len(dates) > 1 else dates[0]
        if len(dates) == 1:
            logger.info(f"Single date {start} used for both ends of the range")
        else:
            logger.info(f"Setting date range from {start} to {end}")
        bindings[START_DATE_PARAM] = start
        bindings[END_DATE_PARAM] = end

    if DATE_PARAM in placeholders:
        logger.info(f"Setting single date parameter: {dates[0]}")
        bindings[DATE_PARAM] = dates[0]

    return {name: value for name, value in bindings.items() if name in placeholders}
