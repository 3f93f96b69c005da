"""Project domain service."""

import logging
from datetime import date
from typing import Optional

from bookkeep.database.base import Database
from bookkeep.domain.entities import Project
from bookkeep.domain.errors import NotFoundError, ValidationError, project_not_found

logger = logging.getLogger(__name__)


class ProjectService:
    """Service for managing projects."""

    def __init__(self, db: Database):
        """Initialize project service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_project(
        self,
        account_id: int,
        name: str,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        """Create a project.

        Raises:
            ValidationError: If the name is blank or the end date precedes the start date
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Project name is required")
        if start_date and end_date and end_date < start_date:
            raise ValidationError("Project end date cannot be before its start date")
        project_id = self.db.create_project(
            account_id=account_id,
            name=name,
            description=(description or "").strip() or None,
            start_date=start_date,
            end_date=end_date,
        )
        logger.info("Created project %s '%s'", project_id, name)
        return project_id

    def require_project(self, account_id: int, project_id: int) -> Project:
        """Get a tenant's project or raise NotFoundError."""
        project = self.db.get_project(project_id)
        if project is None or project.account_id != account_id:
            raise NotFoundError(project_not_found(project_id))
        return project

    def list_projects(self, account_id: int, active_only: bool = True) -> list[Project]:
        """List a tenant's projects."""
        return self.db.list_projects(account_id, active_only=active_only)

    def deactivate_project(self, account_id: int, project_id: int) -> None:
        """Deactivate a project; its transactions keep their project link."""
        self.require_project(account_id, project_id)
        self.db.deactivate_project(project_id)
        logger.info("Deactivated project %s", project_id)
