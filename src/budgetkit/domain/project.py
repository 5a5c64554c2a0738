"""Project domain service."""

from typing import Optional

from budgetkit.database.base import Database
from budgetkit.domain.entities import Project as ProjectEntity
from budgetkit.domain.errors import (
    DependencyError,
    NotFoundError,
    ValidationError,
    project_delete_blocked,
    project_not_found,
)
from budgetkit.logging_setup import get_logger

_logger = get_logger(__name__)


class ProjectService:
    """Service for managing the project hierarchy."""

    def __init__(self, db: Database):
        """Initialize project service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_project(self, name: str, parent_id: Optional[int] = None) -> int:
        """Create a project.

        Args:
            name: Project name
            parent_id: Optional parent project ID

        Returns:
            Project ID

        Raises:
            ValidationError: If name is empty
            NotFoundError: If parent project doesn't exist
        """
        name = name.strip()
        if not name:
            raise ValidationError("Project name cannot be empty")
        if parent_id is not None:
            self.require_project(parent_id)
        return self.db.create_project(name=name, parent_id=parent_id)

    def get_project(self, project_id: int) -> Optional[ProjectEntity]:
        """Get project by ID.

        Args:
            project_id: Project ID

        Returns:
            Project entity or None if not found
        """
        return self.db.get_project(project_id)

    def require_project(self, project_id: int) -> ProjectEntity:
        """Get project by ID or raise NotFoundError."""
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))
        return project

    def list_projects(self, roots_only: bool = False) -> list[ProjectEntity]:
        """List projects ordered by name.

        Args:
            roots_only: If True, only return projects without a parent

        Returns:
            List of project entities
        """
        return self.db.list_projects(roots_only=roots_only)

    def list_children(self, project_id: int) -> list[ProjectEntity]:
        """List direct child projects."""
        self.require_project(project_id)
        return self.db.list_projects(parent_id=project_id)

    def get_ancestors(self, project_id: int) -> list[ProjectEntity]:
        """Return the ancestor chain of a project, root first.

        The chain is resolved one parent at a time. The project itself is
        not included.

        Raises:
            NotFoundError: If project doesn't exist
        """
        project = self.require_project(project_id)
        chain: list[ProjectEntity] = []
        seen = {project.id}
        parent_id = project.parent_id
        while parent_id is not None and parent_id not in seen:
            parent = self.db.get_project(parent_id)
            if parent is None:
                break
            chain.append(parent)
            seen.add(parent.id)
            parent_id = parent.parent_id
        chain.reverse()
        return chain

    def delete_project(self, project_id: int) -> None:
        """Delete a project with its accounts, tags, transactions and batches.

        Raises:
            NotFoundError: If project doesn't exist
            DependencyError: If the project has child projects or open import batches
        """
        self.require_project(project_id)

        child_count = self.db.count_child_projects(project_id)
        if child_count > 0:
            raise DependencyError(project_delete_blocked(project_id, child_count))

        open_batches = self.db.count_open_import_batches(project_id)
        if open_batches > 0:
            raise DependencyError(
                f"Cannot delete project {project_id}: it has {open_batches} open import "
                f"batch{'es' if open_batches != 1 else ''}. Commit or abandon them first."
            )

        self.db.delete_project(project_id)
        _logger.info("project:deleted project_id=%d", project_id)
