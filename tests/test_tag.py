"""Tests for tags."""

import pytest

from budgetkit.cli.main import cli
from budgetkit.domain.entities import TransactionDraft
from budgetkit.domain.errors import ConflictError, NotFoundError, ValidationError


def test_create_tag_unique_ignoring_case(tag_service, sample_project, sample_tags):
    with pytest.raises(ConflictError):
        tag_service.create_tag(sample_project.id, "groceries")


def test_create_tag_empty_name(tag_service, sample_project):
    with pytest.raises(ValidationError):
        tag_service.create_tag(sample_project.id, "  ")


def test_list_tags_sorted(tag_service, sample_project, sample_tags):
    assert [t.name for t in tag_service.list_tags(sample_project.id)] == ["Dining", "Groceries", "Income", "Utilities"]


def test_find_by_name(tag_service, sample_project, sample_tags):
    assert tag_service.find_by_name(sample_project.id, " DINING ").id == sample_tags["Dining"].id
    assert tag_service.find_by_name(sample_project.id, "Travel") is None


def test_get_tag_from_other_project(tag_service, project_service, sample_tags):
    other = project_service.create_project("Work")
    with pytest.raises(NotFoundError):
        tag_service.get_tag(sample_tags["Dining"].id, other)


def test_delete_tag_unlinks_transactions(tag_service, temp_db, sample_project, sample_account, sample_tags):
    dining, income = sample_tags["Dining"].id, sample_tags["Income"].id
    txn_id = temp_db.create_transaction(
        TransactionDraft(
            project_id=sample_project.id,
            account_id=sample_account.id,
            amount=-1500,
            date="2024-03-01",
            description="Pizza",
            tag_ids=(dining, income),
        )
    )

    tag_service.delete_tag(dining, sample_project.id)

    assert temp_db.get_tag(dining) is None
    assert temp_db.get_transaction(txn_id).tag_ids == (income,)


def test_cli_tag_create_list_delete(cli_runner, cli_obj, temp_db, sample_project):
    result = cli_runner.invoke(cli, ["tag", "create", "Groceries", "-p", "Household"], obj=cli_obj)
    assert result.exit_code == 0
    assert "Created tag 'Groceries'" in result.output

    result = cli_runner.invoke(cli, ["tag", "list", "-p", "Household"], obj=cli_obj)
    assert "Groceries" in result.output

    result = cli_runner.invoke(cli, ["tag", "delete", "groceries", "-p", "Household"], obj=cli_obj)
    assert result.exit_code == 0
    assert "Deleted tag" in result.output

    result = cli_runner.invoke(cli, ["tag", "list", "-p", "Household"], obj=cli_obj)
    assert "No tags found." in result.output


def test_cli_tag_delete_unknown(cli_runner, cli_obj, temp_db, sample_project):
    result = cli_runner.invoke(cli, ["tag", "delete", "Travel", "-p", "Household"], obj=cli_obj)
    assert result.exit_code == 1
    assert "Tag 'Travel' not found" in result.output
