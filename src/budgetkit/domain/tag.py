"""Tag domain service."""

from typing import Optional

from budgetkit.database.base import Database
from budgetkit.domain.entities import Tag as TagEntity
from budgetkit.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_name,
    project_not_found,
    tag_not_found,
)
from budgetkit.logging_setup import get_logger

_logger = get_logger(__name__)


class TagService:
    """Service for managing a project's tag vocabulary."""

    def __init__(self, db: Database):
        """Initialize tag service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_tag(self, project_id: int, name: str) -> int:
        """Create a tag.

        Args:
            project_id: Owning project ID
            name: Tag name, unique per project ignoring case

        Returns:
            Tag ID

        Raises:
            NotFoundError: If project doesn't exist
            ValidationError: If name is empty
            ConflictError: If a tag with the same name exists in the project
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))

        name = name.strip()
        if not name:
            raise ValidationError("Tag name cannot be empty")
        if self.find_by_name(project_id, name) is not None:
            raise ConflictError(duplicate_name("Tag", name))

        return self.db.create_tag(project_id=project_id, name=name)

    def get_tag(self, tag_id: int, project_id: int) -> TagEntity:
        """Get a tag that belongs to project.

        Raises:
            NotFoundError: If tag doesn't exist or belongs to another project
        """
        tag = self.db.get_tag(tag_id)
        if tag is None or tag.project_id != project_id:
            raise NotFoundError(tag_not_found(tag_id))
        return tag

    def find_by_name(self, project_id: int, name: str) -> Optional[TagEntity]:
        """Find a tag by name, ignoring case."""
        wanted = name.strip().lower()
        for tag in self.db.list_tags(project_id):
            if tag.name.lower() == wanted:
                return tag
        return None

    def list_tags(self, project_id: int) -> list[TagEntity]:
        """List tags of a project ordered by name."""
        return self.db.list_tags(project_id)

    def delete_tag(self, tag_id: int, project_id: int) -> int:
        """Delete a tag.

        Transaction links go with the tag. The id is also removed from the
        pending tag lists of staging rows in the project's batches.

        Args:
            tag_id: Tag ID
            project_id: Project the tag must belong to

        Returns:
            Number of staging rows whose pending tags changed

        Raises:
            NotFoundError: If tag doesn't exist or belongs to another project
        """
        self.get_tag(tag_id, project_id)
        changed = self.db.remove_tag_from_staging_rows(project_id, tag_id)
        self.db.delete_tag(tag_id)
        _logger.info("tag:deleted tag_id=%d staging_rows_changed=%d", tag_id, changed)
        return changed
