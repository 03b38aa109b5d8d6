"""
Project Service - in-memory project tracking with cascading delete
"""

from typing import List, Optional

from staffhub.core.exceptions import ProjectNotFoundError, ValidationError
from staffhub.core.logging_config import logger
from staffhub.schemas.auth import Identity
from staffhub.schemas.tracking import Project, ProjectCreate, ProjectUpdate
from staffhub.services.record_store import TrackerState, generate_id, utcnow


def normalize_member_ids(member_ids: Optional[list]) -> List[str]:
    if not member_ids:
        return []
    return [str(member_id) for member_id in member_ids]


class ProjectService:
    """Project CRUD. Role checks happen at the route layer (admin-only writes)."""

    def __init__(self, state: TrackerState):
        self.state = state

    def list_projects(self) -> List[Project]:
        return self.state.projects.all()

    def get_project(self, project_id: str) -> Project:
        project = self.state.projects.get(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    def create_project(self, creator: Identity, data: ProjectCreate) -> Project:
        name = (data.name or "").strip()
        if not name:
            raise ValidationError("Project name is required", field="name")

        now = utcnow()
        project = Project(
            id=generate_id(),
            name=name,
            description=data.description if data.description is not None else "",
            member_ids=normalize_member_ids(data.member_ids),
            created_by=creator.id,
            created_at=now,
            updated_at=now,
        )
        self.state.projects.insert(project)
        logger.info(f"[Projects] {creator.id} created project {project.id} ({project.name})")
        return project

    def update_project(self, project_id: str, data: ProjectUpdate) -> Project:
        self.get_project(project_id)

        changes = {}
        provided = data.model_fields_set
        if data.name:
            changes["name"] = data.name.strip()
        if "description" in provided:
            changes["description"] = data.description
        if "member_ids" in provided:
            changes["member_ids"] = normalize_member_ids(data.member_ids)

        return self.state.projects.update(project_id, changes)

    def delete_project(self, project_id: str) -> int:
        """
        Remove the project and every task filed under it.

        Returns the number of tasks removed with it.
        """
        project = self.state.projects.remove(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)

        removed_tasks = self.state.tasks.remove_where(lambda task: task.project_id == project.id)
        logger.info(f"[Projects] Deleted project {project.id} and {removed_tasks} task(s)")
        return removed_tasks
