"""Tests for accounts."""

import pytest

from budgetkit.cli.main import cli
from budgetkit.domain.errors import ConflictError, NotFoundError, ValidationError


def test_create_account_defaults(account_service, sample_project):
    account_id = account_service.create_account(sample_project.id, "Chase")
    account = account_service.get_account(account_id, sample_project.id)

    assert account.name == "Chase"
    assert account.account_type == "checking"
    assert account.balance == 0


def test_create_account_unknown_type(account_service, sample_project):
    with pytest.raises(ValidationError, match="Unknown account type"):
        account_service.create_account(sample_project.id, "Visa", account_type="bitcoin")


def test_create_account_duplicate_name(account_service, sample_project, sample_account):
    with pytest.raises(ConflictError, match="already exists"):
        account_service.create_account(sample_project.id, "Checking")


def test_same_account_name_in_two_projects(account_service, project_service, sample_project, sample_account):
    other = project_service.create_project("Work")
    assert account_service.create_account(other, "Checking") != sample_account.id


def test_get_account_from_other_project(account_service, project_service, sample_account):
    other = project_service.create_project("Work")
    with pytest.raises(NotFoundError):
        account_service.get_account(sample_account.id, other)


def test_account_create_with_type(cli_runner, temp_db, sample_project):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "account", "create", "Visa", "--project", "Household", "--type", "credit"],
    )

    assert result.exit_code == 0
    assert "Created account 'Visa'" in result.output
    assert "ID:" in result.output


def test_account_list_empty(cli_runner, temp_db, sample_project):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list", "-p", "Household"])

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_account_list_with_data(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list", "-p", "Household"])

    assert result.exit_code == 0
    assert "Checking" in result.output
    assert "Balance: $0.00" in result.output


def test_account_create_duplicate(cli_runner, temp_db, sample_project):
    args = ["--db-path", temp_db.database_path, "account", "create", "Savings", "-p", "Household"]
    result1 = cli_runner.invoke(cli, args)
    assert result1.exit_code == 0

    result2 = cli_runner.invoke(cli, args)
    assert result2.exit_code == 1
    assert "already exists" in result2.output.lower()


def test_account_requires_project(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])
    assert result.exit_code == 2
    assert "--project" in result.output
