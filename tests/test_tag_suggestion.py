"""Tests for AI tag suggestion."""

import json

import pytest

from budgetkit.domain.entities import SuggestionRow
from budgetkit.domain.errors import ConflictError
from budgetkit.domain.tag_suggestion import (
    TagSuggester,
    TagSuggestionService,
    build_prompt,
    parse_suggestions,
)


def _rows(count: int, start_id: int = 1) -> list[SuggestionRow]:
    return [SuggestionRow(row_id=start_id + i, description=f"Shop {i}", amount=-100 * (i + 1)) for i in range(count)]


def _answer(*items) -> str:
    return json.dumps([{"index": index, "tags": tags} for index, tags in items])


def test_prompt_lists_tags_and_numbered_rows():
    rows = [
        SuggestionRow(row_id=10, description="Grocery Store", amount=-4250),
        SuggestionRow(row_id=11, description="Salary", amount=250000),
    ]

    prompt = build_prompt(rows, ["Groceries", "Income"])

    assert "Available tags: Groceries, Income" in prompt
    assert '1. "Grocery Store" (-42.50)' in prompt
    assert '2. "Salary" (+2500.00)' in prompt
    assert '{"index": 1, "tags": ["tag1", "tag2"]}' in prompt


def test_parse_maps_names_case_insensitively():
    rows = _rows(2)
    text = "Sure! Here you go:\n```json\n" + _answer((1, ["groceries", "DINING"]), (2, [])) + "\n```"

    suggestions = parse_suggestions(text, rows, {"groceries": 5, "dining": 6})

    assert len(suggestions) == 1
    assert suggestions[0].row_id == rows[0].row_id
    assert suggestions[0].tag_ids == (5, 6)


def test_parse_drops_unknown_tags_and_out_of_range_indices():
    rows = _rows(2)
    text = _answer((0, ["groceries"]), (3, ["groceries"]), (2, ["Pets", "groceries"]), (1, ["Pets"]))

    suggestions = parse_suggestions(text, rows, {"groceries": 5})

    assert [(s.row_id, s.tag_ids) for s in suggestions] == [(rows[1].row_id, (5,))]


def test_parse_requires_exact_tag_names():
    rows = _rows(2)
    text = _answer((1, [" groceries ", "groceries\n"]), (2, ["Groceries"]))

    suggestions = parse_suggestions(text, rows, {"groceries": 5})

    assert [(s.row_id, s.tag_ids) for s in suggestions] == [(rows[1].row_id, (5,))]


@pytest.mark.parametrize(
    "text",
    [
        "no json here",
        "[not valid json]",
        '{"index": 1}',
        '[{"index": "1", "tags": []}]',
        '[{"index": true, "tags": ["groceries"]}]',
        '[{"index": 1, "tags": "groceries"}]',
        '[1, 2]',
    ],
)
def test_parse_rejects_bad_shapes(text):
    with pytest.raises(ValueError):
        parse_suggestions(text, _rows(2), {"groceries": 5})


def test_suggest_empty_inputs_skip_model(stub_generator_factory, sample_tags):
    generator = stub_generator_factory(_answer((1, ["Groceries"])))
    suggester = TagSuggester(generator)

    assert suggester.suggest([], list(sample_tags.values())) == []
    assert suggester.suggest(_rows(3), []) == []
    assert generator.prompts == []


def test_suggest_chunks_rows_by_twenty(stub_generator_factory, sample_tags):
    generator = stub_generator_factory(_answer((1, ["Groceries"]), (20, ["Dining"])))
    suggester = TagSuggester(generator)
    rows = _rows(45)

    suggestions = suggester.suggest(rows, list(sample_tags.values()))

    assert len(generator.prompts) == 3
    assert '20. "Shop 19"' in generator.prompts[0]
    assert '21.' not in generator.prompts[0]
    assert '5. "Shop 44"' in generator.prompts[2]
    # Index 20 is out of range for the last chunk of 5
    assert [s.row_id for s in suggestions] == [1, 20, 21, 40, 41]


def test_suggest_skips_failed_chunks(stub_generator_factory, sample_tags):
    groceries = sample_tags["Groceries"]
    generator = stub_generator_factory(
        RuntimeError("model unavailable"),
        "I cannot help with that",
        _answer((1, ["groceries"])),
    )
    suggester = TagSuggester(generator)

    suggestions = suggester.suggest(_rows(60), list(sample_tags.values()))

    assert len(generator.prompts) == 3
    assert [(s.row_id, s.tag_ids) for s in suggestions] == [(41, (groceries.id,))]


def test_suggest_all_chunks_failing_returns_empty(stub_generator_factory, sample_tags):
    generator = stub_generator_factory(RuntimeError("down"))

    assert TagSuggester(generator).suggest(_rows(30), list(sample_tags.values())) == []


def test_suggest_for_batch_applies_suggestions(
    stub_generator_factory, temp_db, staging_service, mapped_batch, sample_project, sample_tags
):
    rows = temp_db.list_staging_rows(mapped_batch.id)
    staging_service.set_excluded(mapped_batch.id, sample_project.id, rows[0].id, True)
    staging_service.replace_tags(mapped_batch.id, sample_project.id, rows[4].id, [sample_tags["Dining"].id])
    # Included rows are rows[1:], so prompt index 2 is rows[2] (Salary)
    generator = stub_generator_factory(_answer((2, ["income"]), (3, ["Utilities", "Hallucinated"]), (4, [])))
    service = TagSuggestionService(temp_db, generator)

    suggestions = service.suggest_for_batch(mapped_batch.id, sample_project.id)

    assert [s.row_id for s in suggestions] == [rows[2].id, rows[3].id]
    assert '"Grocery Store"' not in generator.prompts[0]
    assert temp_db.get_staging_row(rows[2].id).tag_ids == (sample_tags["Income"].id,)
    assert temp_db.get_staging_row(rows[3].id).tag_ids == (sample_tags["Utilities"].id,)
    # Rows without a suggestion keep their tags
    assert temp_db.get_staging_row(rows[4].id).tag_ids == (sample_tags["Dining"].id,)


def test_suggest_for_batch_without_tags_returns_empty(stub_generator_factory, temp_db, mapped_batch, sample_project):
    generator = stub_generator_factory(_answer((1, ["anything"])))

    assert TagSuggestionService(temp_db, generator).suggest_for_batch(mapped_batch.id, sample_project.id) == []
    assert generator.prompts == []


def test_suggest_for_batch_requires_reviewing(
    stub_generator_factory, temp_db, import_service, mapped_batch, sample_project, sample_tags
):
    import_service.commit(mapped_batch.id, sample_project.id)
    service = TagSuggestionService(temp_db, stub_generator_factory())

    with pytest.raises(ConflictError):
        service.suggest_for_batch(mapped_batch.id, sample_project.id)
