"""Shared pytest fixtures for budgetkit tests."""

import tempfile
import os
from pathlib import Path
import pytest

from budgetkit.ai.base import TextGenerator
from budgetkit.database.factories import create_sqlite_database
from budgetkit.domain.account import AccountService
from budgetkit.domain.csv_import import CSVImportService
from budgetkit.domain.project import ProjectService
from budgetkit.domain.staging import StagingService
from budgetkit.domain.tag import TagService
from budgetkit.domain.transaction import TransactionService
from budgetkit.storage.memory import InMemoryBlobStore


class StubTextGenerator(TextGenerator):
    """Text generator returning canned responses, one per call.

    A response that is an exception instance is raised instead of returned.
    Once the list is exhausted the last response is repeated. Prompts are
    recorded in ``prompts``.
    """

    def __init__(self, *responses):
        self.responses = list(responses) or ["[]"]
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        index = min(len(self.prompts) - 1, len(self.responses) - 1)
        response = self.responses[index]
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def blob_store():
    """Create an empty in-memory blob store."""
    return InMemoryBlobStore()


@pytest.fixture
def project_service(temp_db):
    """Create a ProjectService with a temporary database."""
    return ProjectService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def tag_service(temp_db):
    """Create a TagService with a temporary database."""
    return TagService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def staging_service(temp_db):
    """Create a StagingService with a temporary database."""
    return StagingService(temp_db)


@pytest.fixture
def import_service(temp_db, blob_store):
    """Create a CSVImportService over the temporary database and in-memory blobs."""
    return CSVImportService(temp_db, blob_store)


@pytest.fixture
def sample_project(project_service):
    """Create a sample project."""
    project_id = project_service.create_project("Household")
    return project_service.get_project(project_id)


@pytest.fixture
def sample_account(account_service, sample_project):
    """Create a checking account in the sample project."""
    account_id = account_service.create_account(sample_project.id, "Checking")
    return account_service.get_account(account_id, sample_project.id)


@pytest.fixture
def sample_tags(tag_service, sample_project):
    """Create a few tags in the sample project, keyed by name."""
    return {
        name: tag_service.get_tag(tag_service.create_tag(sample_project.id, name), sample_project.id)
        for name in ("Groceries", "Dining", "Utilities", "Income")
    }


@pytest.fixture
def statement_bytes(fixtures_dir):
    """Raw bytes of the sample bank statement."""
    return (fixtures_dir / "statement.csv").read_bytes()


@pytest.fixture
def mapped_batch(import_service, sample_project, sample_account, statement_bytes):
    """A batch of the sample statement, uploaded and mapped, ready for review."""
    batch = import_service.upload(sample_project.id, sample_account.id, "statement.csv", statement_bytes)
    return import_service.apply_mapping(
        batch.id,
        sample_project.id,
        {"date": "Date", "amount": "Amount", "description": "Description"},
    )


@pytest.fixture
def stub_generator_factory():
    """Return the StubTextGenerator class for building per-test stubs."""
    return StubTextGenerator


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_blob_dir(tmp_path, monkeypatch):
    """Keep CLI-created blob stores out of the home directory."""
    blob_dir = tmp_path / "blobs"
    monkeypatch.setenv("BUDGETKIT_BLOB_DIR", str(blob_dir))
    return blob_dir


@pytest.fixture
def cli_obj(temp_db, blob_store):
    """Context object that makes CLI commands share the test database and blob store."""
    return {"db": temp_db, "blob_store": blob_store}
