"""AI-assisted tag suggestion for staged import rows.

Suggestions are an enhancement, never a gate: a chunk whose model call or
response parsing fails is logged and skipped, and ``TagSuggester.suggest``
always returns whatever the other chunks produced.
"""

import json
import re
import time
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from budgetkit.ai.base import TextGenerator
from budgetkit.database.base import Database
from budgetkit.domain.entities import BatchStatus, SuggestionRow, Tag, TagSuggestion
from budgetkit.domain.import_batch import load_batch, require_status
from budgetkit.domain.staging import StagingService
from budgetkit.logging_setup import get_logger

_logger = get_logger(__name__)

CHUNK_SIZE = 20
MAX_TAGS_PER_ROW = 3

# First '[' through last ']', tolerating prose or code fences around it
_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


def _format_amount(amount: int) -> str:
    sign = "+" if amount >= 0 else ""
    return f"{sign}{Decimal(amount) / 100:.2f}"


def build_prompt(rows: Sequence[SuggestionRow], tag_names: Sequence[str]) -> str:
    """Build the categorisation prompt for one chunk of rows (numbered from 1)."""
    lines = "\n".join(
        f'{number}. "{row.description}" ({_format_amount(row.amount)})' for number, row in enumerate(rows, start=1)
    )
    return (
        "You categorize bank transactions. Given the available tags and a list of "
        "transactions, suggest which tags apply to each transaction.\n\n"
        f"Available tags: {', '.join(tag_names)}\n\n"
        f"Transactions:\n{lines}\n\n"
        f"For each transaction give 0-{MAX_TAGS_PER_ROW} tag names. "
        "Use ONLY tags from the available list.\n\n"
        "Respond with a JSON array in exactly this format:\n"
        "[\n"
        '  {"index": 1, "tags": ["tag1", "tag2"]},\n'
        '  {"index": 2, "tags": []}\n'
        "]\n\n"
        "Only include tags that clearly match. If unsure, use an empty array."
    )


def parse_suggestions(
    text: str, rows: Sequence[SuggestionRow], tag_ids_by_name: Mapping[str, int]
) -> list[TagSuggestion]:
    """Turn a model response into suggestions for rows.

    Args:
        text: Raw model output
        rows: The chunk the prompt was built from
        tag_ids_by_name: Lower-cased tag name to tag id

    Returns:
        Suggestions for rows that received at least one known tag

    Raises:
        ValueError: If the response is not a JSON array of
            ``{"index": int, "tags": list}`` objects
    """
    match = _JSON_ARRAY_RE.search(text)
    payload: Any = json.loads(match.group(0) if match else text)
    if not isinstance(payload, list):
        raise ValueError("Expected a JSON array")

    suggestions: list[TagSuggestion] = []
    for item in payload:
        if not isinstance(item, dict):
            raise ValueError("Expected objects in the JSON array")
        index = item.get("index")
        tags = item.get("tags")
        # bool is an int subclass; true/false are not row numbers
        if isinstance(index, bool) or not isinstance(index, int) or not isinstance(tags, list):
            raise ValueError("Expected an integer 'index' and a list 'tags'")

        position = index - 1
        if position < 0 or position >= len(rows):
            continue

        tag_ids: list[int] = []
        for name in tags:
            if not isinstance(name, str):
                continue
            tag_id = tag_ids_by_name.get(name.lower())
            if tag_id is not None and tag_id not in tag_ids:
                tag_ids.append(tag_id)
        if tag_ids:
            suggestions.append(TagSuggestion(row_id=rows[position].row_id, tag_ids=tuple(tag_ids)))
    return suggestions


class TagSuggester:
    """Asks a text generator to pick tags from a fixed vocabulary."""

    def __init__(self, generator: TextGenerator, chunk_size: int = CHUNK_SIZE):
        self.generator = generator
        self.chunk_size = chunk_size

    def suggest(self, rows: Sequence[SuggestionRow], vocabulary: Sequence[Tag]) -> list[TagSuggestion]:
        """Suggest tags for rows, chunk by chunk. Never raises for model failures.

        Args:
            rows: Rows to categorise
            vocabulary: The project's tags; only these may be suggested

        Returns:
            Suggestions in row order; empty when nothing could be suggested
        """
        if not rows or not vocabulary:
            return []

        tag_names = [tag.name for tag in vocabulary]
        tag_ids_by_name: dict[str, int] = {}
        for tag in vocabulary:
            tag_ids_by_name.setdefault(tag.name.lower(), tag.id)

        suggestions: list[TagSuggestion] = []
        for start in range(0, len(rows), self.chunk_size):
            chunk = rows[start : start + self.chunk_size]
            chunk_index = start // self.chunk_size
            t0 = time.perf_counter()
            try:
                text = self.generator.generate(build_prompt(chunk, tag_names))
                chunk_suggestions = parse_suggestions(text, chunk, tag_ids_by_name)
            except Exception as e:  # noqa: BLE001
                _logger.warning(
                    "tag_suggestion:chunk_failed chunk=%d rows=%d error=%s: %s",
                    chunk_index,
                    len(chunk),
                    e.__class__.__name__,
                    e,
                )
                continue
            dt_ms = (time.perf_counter() - t0) * 1000.0
            _logger.info(
                "tag_suggestion:chunk_done chunk=%d rows=%d suggested=%d latency_ms=%.2f",
                chunk_index,
                len(chunk),
                len(chunk_suggestions),
                dt_ms,
            )
            suggestions.extend(chunk_suggestions)
        return suggestions


class TagSuggestionService:
    """Runs the suggester over a batch and stores its picks as pending tags."""

    def __init__(self, db: Database, generator: TextGenerator):
        """Initialize tag suggestion service.

        Args:
            db: Database instance
            generator: Text generator used for suggestions
        """
        self.db = db
        self.staging_service = StagingService(db)
        self.suggester = TagSuggester(generator)

    def suggest_for_batch(self, batch_id: int, project_id: int) -> list[TagSuggestion]:
        """Suggest and apply tags for the non-excluded rows of a reviewing batch.

        Rows without a suggestion keep their current pending tags.

        Returns:
            The suggestions that were applied (possibly empty)

        Raises:
            NotFoundError: If batch doesn't exist in the project
            ConflictError: If the batch is not 'reviewing'
        """
        batch = load_batch(self.db, batch_id, project_id)
        require_status(batch, BatchStatus.REVIEWING)

        vocabulary = self.db.list_tags(project_id)
        rows = [
            SuggestionRow(
                row_id=row.id,
                description=row.parsed_description or "",
                amount=row.parsed_amount or 0,
            )
            for row in self.staging_service.non_excluded_rows(batch_id, project_id)
        ]

        suggestions = self.suggester.suggest(rows, vocabulary)
        if suggestions:
            self.staging_service.bulk_replace_tags(batch_id, project_id, suggestions)
        _logger.info(
            "tag_suggestion:batch_done batch_id=%d rows=%d suggested=%d",
            batch_id,
            len(rows),
            len(suggestions),
        )
        return suggestions
