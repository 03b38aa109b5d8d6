"""
Authorization rules for tasks, files and projects.

Every predicate takes the caller Identity and, where ownership matters, the
record in question. ``require_*`` helpers raise ForbiddenError, ``can_*``
helpers answer with a bool. Anyone who is not an admin is scoped like staff.
"""

from typing import Iterable, List

from staffhub.core.exceptions import ForbiddenError
from staffhub.schemas.auth import Identity
from staffhub.schemas.tracking import Task, FileRecord


ADMIN_ROLE = "admin"
STAFF_ROLE = "staff"
ROLES = (ADMIN_ROLE, STAFF_ROLE)


def require_admin(identity: Identity) -> Identity:
    if identity.role != ADMIN_ROLE:
        raise ForbiddenError("Admin access required")
    return identity


def require_staff_or_admin(identity: Identity) -> Identity:
    if identity.role not in ROLES:
        raise ForbiddenError("Staff or Admin access required")
    return identity


# ==================== Tasks ====================

def can_view_task(identity: Identity, task: Task) -> bool:
    return identity.is_admin or task.assignee_id == identity.id


def visible_tasks(identity: Identity, tasks: Iterable[Task]) -> List[Task]:
    if identity.is_admin:
        return list(tasks)
    return [task for task in tasks if task.assignee_id == identity.id]


def can_modify_task(identity: Identity, task: Task) -> bool:
    return identity.is_admin or task.assignee_id == identity.id


def resolve_assignee(identity: Identity, requested_assignee_id) -> str:
    """
    Admins assign freely. Everyone else is always the assignee, whatever they
    asked for.
    """
    if identity.is_admin:
        return str(requested_assignee_id)
    return identity.id


def require_task_view(identity: Identity, task: Task) -> Task:
    if not can_view_task(identity, task):
        raise ForbiddenError("Not allowed")
    return task


def require_task_modify(identity: Identity, task: Task) -> Task:
    if not can_modify_task(identity, task):
        raise ForbiddenError("Staff cannot modify others' tasks")
    return task


def require_task_delete(identity: Identity) -> Identity:
    if not identity.is_admin:
        raise ForbiddenError("Only admin can delete tasks")
    return identity


# ==================== Files ====================

def can_view_file(identity: Identity, record: FileRecord) -> bool:
    return identity.is_admin or record.is_public or record.uploaded_by == identity.id


def visible_files(identity: Identity, records: Iterable[FileRecord]) -> List[FileRecord]:
    return [record for record in records if can_view_file(identity, record)]


def can_delete_file(identity: Identity, record: FileRecord) -> bool:
    return identity.is_admin or record.uploaded_by == identity.id


def require_file_delete(identity: Identity, record: FileRecord) -> FileRecord:
    if not can_delete_file(identity, record):
        raise ForbiddenError("Not allowed to delete this file")
    return record


# ==================== Projects ====================

def require_project_manage(identity: Identity) -> Identity:
    """Create, update and delete are admin-only; reading is open"""
    return require_admin(identity)
