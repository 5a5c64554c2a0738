"""Tests for staging row review operations."""

import pytest

from budgetkit.domain.entities import TagSuggestion
from budgetkit.domain.errors import ConflictError, NotFoundError, ValidationError


def _rows(temp_db, batch):
    return temp_db.list_staging_rows(batch.id)


def test_list_rows_ordered_by_index(staging_service, temp_db, mapped_batch, sample_project):
    rows = staging_service.list_rows(mapped_batch.id, sample_project.id)
    assert [r.row_index for r in rows] == list(range(6))
    assert rows[0].parsed_description == "Grocery Store"


def test_toggle_exclude_twice_restores_value(staging_service, temp_db, mapped_batch, sample_project):
    row = _rows(temp_db, mapped_batch)[0]

    assert staging_service.toggle_exclude(mapped_batch.id, sample_project.id, row.id) is True
    assert temp_db.get_staging_row(row.id).excluded is True
    assert staging_service.toggle_exclude(mapped_batch.id, sample_project.id, row.id) is False
    assert temp_db.get_staging_row(row.id).excluded is False


def test_set_excluded_is_idempotent(staging_service, temp_db, mapped_batch, sample_project):
    row = _rows(temp_db, mapped_batch)[2]

    staging_service.set_excluded(mapped_batch.id, sample_project.id, row.id, True)
    staging_service.set_excluded(mapped_batch.id, sample_project.id, row.id, True)

    assert temp_db.get_staging_row(row.id).excluded is True


def test_summary_counts(staging_service, temp_db, mapped_batch, sample_project):
    rows = _rows(temp_db, mapped_batch)
    staging_service.set_excluded(mapped_batch.id, sample_project.id, rows[0].id, True)

    summary = staging_service.summary(mapped_batch.id, sample_project.id)

    assert (summary.total, summary.included, summary.excluded, summary.duplicates) == (6, 5, 1, 0)


def test_non_excluded_rows(staging_service, temp_db, mapped_batch, sample_project):
    rows = _rows(temp_db, mapped_batch)
    staging_service.set_excluded(mapped_batch.id, sample_project.id, rows[4].id, True)

    included = staging_service.non_excluded_rows(mapped_batch.id, sample_project.id)

    assert [r.row_index for r in included] == [0, 1, 2, 3, 5]


def test_replace_tags_overwrites_and_dedupes(staging_service, temp_db, mapped_batch, sample_project, sample_tags):
    row = _rows(temp_db, mapped_batch)[0]
    groceries, dining = sample_tags["Groceries"].id, sample_tags["Dining"].id

    staging_service.replace_tags(mapped_batch.id, sample_project.id, row.id, [dining])
    stored = staging_service.replace_tags(mapped_batch.id, sample_project.id, row.id, [groceries, dining, groceries])

    assert stored == (groceries, dining)
    assert temp_db.get_staging_row(row.id).tag_ids == (groceries, dining)


def test_replace_tags_with_empty_list_clears(staging_service, temp_db, mapped_batch, sample_project, sample_tags):
    row = _rows(temp_db, mapped_batch)[0]
    staging_service.replace_tags(mapped_batch.id, sample_project.id, row.id, [sample_tags["Dining"].id])

    staging_service.replace_tags(mapped_batch.id, sample_project.id, row.id, [])

    assert temp_db.get_staging_row(row.id).tag_ids == ()


def test_replace_tags_rejects_foreign_tag(
    staging_service, tag_service, project_service, temp_db, mapped_batch, sample_project, sample_tags
):
    other_id = project_service.create_project("Other")
    foreign_tag = tag_service.create_tag(other_id, "Travel")
    row = _rows(temp_db, mapped_batch)[0]
    staging_service.replace_tags(mapped_batch.id, sample_project.id, row.id, [sample_tags["Dining"].id])

    with pytest.raises(ValidationError, match=f"Tag {foreign_tag} not found"):
        staging_service.replace_tags(
            mapped_batch.id, sample_project.id, row.id, [sample_tags["Groceries"].id, foreign_tag]
        )

    assert temp_db.get_staging_row(row.id).tag_ids == (sample_tags["Dining"].id,)


def test_row_from_another_batch_is_not_found(
    staging_service, import_service, sample_project, sample_account, statement_bytes, temp_db, mapped_batch
):
    other = import_service.upload(sample_project.id, sample_account.id, "again.csv", statement_bytes)
    import_service.apply_mapping(
        other.id, sample_project.id, {"date": "Date", "amount": "Amount", "description": "Description"}
    )
    foreign_row = temp_db.list_staging_rows(other.id)[0]

    with pytest.raises(NotFoundError, match=f"Row {foreign_row.id} not found in import batch {mapped_batch.id}"):
        staging_service.toggle_exclude(mapped_batch.id, sample_project.id, foreign_row.id)


def test_mutations_require_reviewing(staging_service, import_service, temp_db, mapped_batch, sample_project):
    row = _rows(temp_db, mapped_batch)[0]
    import_service.abandon(mapped_batch.id, sample_project.id)

    with pytest.raises(ConflictError):
        staging_service.toggle_exclude(mapped_batch.id, sample_project.id, row.id)
    with pytest.raises(ConflictError):
        staging_service.replace_tags(mapped_batch.id, sample_project.id, row.id, [])


def test_bulk_replace_tags_applies_each_row(staging_service, temp_db, mapped_batch, sample_project, sample_tags):
    rows = _rows(temp_db, mapped_batch)
    updates = [
        TagSuggestion(row_id=rows[0].id, tag_ids=(sample_tags["Groceries"].id,)),
        TagSuggestion(row_id=rows[2].id, tag_ids=(sample_tags["Income"].id, sample_tags["Income"].id)),
    ]

    updated = staging_service.bulk_replace_tags(mapped_batch.id, sample_project.id, updates)

    assert updated == 2
    assert temp_db.get_staging_row(rows[0].id).tag_ids == (sample_tags["Groceries"].id,)
    assert temp_db.get_staging_row(rows[2].id).tag_ids == (sample_tags["Income"].id,)
    assert temp_db.get_staging_row(rows[1].id).tag_ids == ()


def test_bulk_replace_tags_is_not_atomic(staging_service, temp_db, mapped_batch, sample_project, sample_tags):
    rows = _rows(temp_db, mapped_batch)
    updates = [
        TagSuggestion(row_id=rows[0].id, tag_ids=(sample_tags["Groceries"].id,)),
        TagSuggestion(row_id=999_999, tag_ids=(sample_tags["Dining"].id,)),
        TagSuggestion(row_id=rows[1].id, tag_ids=(sample_tags["Dining"].id,)),
    ]

    with pytest.raises(NotFoundError):
        staging_service.bulk_replace_tags(mapped_batch.id, sample_project.id, updates)

    # Rows before the failure keep their update, rows after it are untouched
    assert temp_db.get_staging_row(rows[0].id).tag_ids == (sample_tags["Groceries"].id,)
    assert temp_db.get_staging_row(rows[1].id).tag_ids == ()


def test_deleting_tag_strips_it_from_pending_rows(
    staging_service, tag_service, temp_db, mapped_batch, sample_project, sample_tags
):
    row = _rows(temp_db, mapped_batch)[0]
    dining, groceries = sample_tags["Dining"].id, sample_tags["Groceries"].id
    staging_service.replace_tags(mapped_batch.id, sample_project.id, row.id, [dining, groceries])

    changed = tag_service.delete_tag(dining, sample_project.id)

    assert changed == 1
    assert temp_db.get_staging_row(row.id).tag_ids == (groceries,)
