"""SQLAlchemy models for budgetkit database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Boolean,
    JSON,
    Table,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


transaction_tags = Table(
    "transaction_tags",
    Base.metadata,
    Column("transaction_id", Integer, ForeignKey("transactions.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Project(Base):
    """Project model with hierarchical structure."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    account_type = Column(String, default="checking", nullable=False)
    balance = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class Tag(Base):
    """Tag model. Name uniqueness per project is enforced by TagService."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class Transaction(Base):
    """Transaction model. Amount is stored in minor units."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Integer, nullable=False)
    date = Column(String, nullable=False)
    description = Column(String, nullable=False)
    notes = Column(String, nullable=True)
    source_hash = Column(String, nullable=True, index=True)
    import_batch_id = Column(
        Integer, ForeignKey("import_batches.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    tags = relationship("Tag", secondary=transaction_tags, order_by="Tag.id")


class ImportBatch(Base):
    """Import batch model."""

    __tablename__ = "import_batches"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    filename = Column(String, nullable=False)
    row_count = Column(Integer, nullable=True)
    status = Column(String, default="uploading", nullable=False)
    blob_key = Column(String, nullable=True)
    column_mapping = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)

    # Relationships
    rows = relationship(
        "ImportBatchRow",
        back_populates="batch",
        cascade="all, delete-orphan",
        order_by="ImportBatchRow.row_index",
    )


class ImportBatchRow(Base):
    """Staging row model; tag_ids NULL means no pending tags."""

    __tablename__ = "import_batch_rows"

    id = Column(Integer, primary_key=True)
    batch_id = Column(Integer, ForeignKey("import_batches.id", ondelete="CASCADE"), nullable=False)
    row_index = Column(Integer, nullable=False)
    raw_data = Column(JSON, nullable=False)
    source_hash = Column(String, nullable=False)
    parsed_amount = Column(Integer, nullable=True)
    parsed_date = Column(String, nullable=True)
    parsed_description = Column(String, nullable=True)
    is_duplicate = Column(Boolean, default=False, nullable=False)
    excluded = Column(Boolean, default=False, nullable=False)
    tag_ids = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    batch = relationship("ImportBatch", back_populates="rows")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
