"""
Task Service - task tracking scoped by assignee

Admins see and change every task. Everyone else only sees the tasks assigned
to them, can only change those, and can never hand a task to somebody else:
whatever assignee they send is replaced by their own id. Deleting a task is
admin-only.
"""

from typing import Any, Dict, List, Optional, Tuple

from staffhub.core.exceptions import (
    AttachmentNotFoundError,
    InvalidProjectReferenceError,
    TaskNotFoundError,
    ValidationError,
)
from staffhub.core.logging_config import logger
from staffhub.modules.auth import policies
from staffhub.schemas.auth import Identity
from staffhub.schemas.tracking import (
    TASK_PRIORITIES,
    TASK_STATUSES,
    Attachment,
    Task,
    TaskCreate,
    TaskUpdate,
)
from staffhub.services.record_store import TrackerState, generate_id, utcnow


class TaskService:

    def __init__(self, state: TrackerState):
        self.state = state

    # ========== Helpers ==========

    def _find(self, task_id: str) -> Task:
        task = self.state.tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def _check_project(self, project_id) -> Optional[str]:
        """Normalize a projectId and make sure it points at a live project"""
        if project_id is None:
            return None
        project_id = str(project_id)
        if self.state.projects.get(project_id) is None:
            raise InvalidProjectReferenceError(project_id)
        return project_id

    # ========== Reads ==========

    def list_tasks(self, identity: Identity) -> List[Task]:
        return policies.visible_tasks(identity, self.state.tasks.all())

    def get_task(self, identity: Identity, task_id: str) -> Task:
        return policies.require_task_view(identity, self._find(task_id))

    def get_modifiable_task(self, identity: Identity, task_id: str) -> Task:
        return policies.require_task_modify(identity, self._find(task_id))

    # ========== Writes ==========

    def create_task(self, identity: Identity, data: TaskCreate) -> Task:
        title = (data.title or "").strip()
        if not title:
            raise ValidationError("Task title is required", field="title")

        if identity.is_admin and data.assignee_id in (None, ""):
            raise ValidationError("assigneeId is required", field="assigneeId")
        assignee_id = policies.resolve_assignee(identity, data.assignee_id)

        project_id = self._check_project(data.project_id)

        now = utcnow()
        task = Task(
            id=generate_id(),
            title=title,
            description=data.description if data.description is not None else "",
            status=data.status if data.status in TASK_STATUSES else "pending",
            priority=data.priority if data.priority in TASK_PRIORITIES else "medium",
            deadline=data.deadline,
            assignee_id=assignee_id,
            project_id=project_id,
            attachments=data.attachments,
            created_by_id=identity.id,
            created_at=now,
            updated_at=now,
        )
        self.state.tasks.insert(task)
        logger.info(f"[Tasks] {identity.id} created task {task.id} for {task.assignee_id}")
        return task

    def update_task(self, identity: Identity, task_id: str, data: TaskUpdate) -> Task:
        task = self.get_modifiable_task(identity, task_id)
        provided = data.model_fields_set
        changes: Dict[str, Any] = {}

        # Validate everything before touching the record
        if "project_id" in provided:
            changes["project_id"] = self._check_project(data.project_id)

        if "title" in provided and data.title is not None:
            title = data.title.strip()
            if not title:
                raise ValidationError("Task title is required", field="title")
            changes["title"] = title

        if "assignee_id" in provided:
            if identity.is_admin and data.assignee_id in (None, ""):
                raise ValidationError("assigneeId cannot be empty", field="assigneeId")
            changes["assignee_id"] = policies.resolve_assignee(identity, data.assignee_id)

        if "description" in provided:
            changes["description"] = data.description
        if "status" in provided and data.status in TASK_STATUSES:
            changes["status"] = data.status
        if "priority" in provided and data.priority in TASK_PRIORITIES:
            changes["priority"] = data.priority
        if "deadline" in provided:
            changes["deadline"] = data.deadline
        if "attachments" in provided:
            changes["attachments"] = data.attachments or []

        return self.state.tasks.update(task.id, changes)

    def delete_task(self, identity: Identity, task_id: str) -> Task:
        policies.require_task_delete(identity)
        task = self.state.tasks.remove(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        logger.info(f"[Tasks] {identity.id} deleted task {task.id}")
        return task

    # ========== Attachments ==========

    def add_attachment(self, identity: Identity, task_id: str, attachment: Attachment) -> Task:
        task = self.get_modifiable_task(identity, task_id)
        return self.state.tasks.update(task.id, {"attachments": [attachment, *task.attachments]})

    def remove_attachment(
        self, identity: Identity, task_id: str, attachment_id: str
    ) -> Tuple[Task, Attachment]:
        """Detach an attachment; returns the updated task and the removed entry"""
        task = self.get_modifiable_task(identity, task_id)

        removed = None
        remaining = []
        for attachment in task.attachments:
            if removed is None and attachment.id == attachment_id:
                removed = attachment
            else:
                remaining.append(attachment)

        if removed is None:
            raise AttachmentNotFoundError(attachment_id)

        return self.state.tasks.update(task.id, {"attachments": remaining}), removed
