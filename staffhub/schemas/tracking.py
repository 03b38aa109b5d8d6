from pydantic import ConfigDict, Field, field_validator
from typing import Optional, List, Literal, Union
from datetime import datetime, date

from staffhub.schemas.base import CamelModel


TaskStatus = Literal["pending", "in_progress", "done"]
TaskPriority = Literal["low", "medium", "high"]

TASK_STATUSES = ("pending", "in_progress", "done")
TASK_PRIORITIES = ("low", "medium", "high")

IdValue = Union[str, int]


def _blank_to_none(value):
    if value == "":
        return None
    return value


# ============================================
# Stored records
# ============================================

class Project(CamelModel):
    id: str
    name: str
    description: Optional[str] = ""
    member_ids: List[str] = Field(default_factory=list)
    created_by: str
    created_at: datetime
    updated_at: datetime


class Attachment(CamelModel):
    # Clients may attach arbitrary metadata when creating a task
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    original_name: Optional[str] = None
    file_name: Optional[str] = None
    size: Optional[int] = None
    url: Optional[str] = None
    uploaded_by: Optional[str] = None
    uploaded_at: Optional[datetime] = None


class Task(CamelModel):
    id: str
    title: str
    description: Optional[str] = ""
    status: TaskStatus = "pending"
    priority: TaskPriority = "medium"
    deadline: Optional[date] = None
    assignee_id: str
    project_id: Optional[str] = None
    attachments: List[Attachment] = Field(default_factory=list)
    created_by_id: str
    created_at: datetime
    updated_at: datetime


class FileRecord(CamelModel):
    id: str
    original_name: str
    file_name: str
    size: int
    url: str
    description: str = ""
    is_public: bool = True
    uploaded_by: str
    uploaded_by_role: Optional[str] = None
    uploaded_at: datetime


# ============================================
# Request bodies
# ============================================

class ProjectCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = ""
    member_ids: Optional[List[IdValue]] = None


class ProjectUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    member_ids: Optional[List[IdValue]] = None


class TaskCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = ""
    status: Optional[str] = "pending"
    priority: Optional[str] = "medium"
    deadline: Optional[date] = None
    assignee_id: Optional[IdValue] = None
    project_id: Optional[IdValue] = None
    attachments: List[Attachment] = Field(default_factory=list)

    @field_validator("deadline", "project_id", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        return _blank_to_none(value)


class TaskUpdate(CamelModel):
    """Partial update; only fields present in the body are applied"""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    deadline: Optional[date] = None
    assignee_id: Optional[IdValue] = None
    project_id: Optional[IdValue] = None
    attachments: Optional[List[Attachment]] = None

    @field_validator("deadline", "project_id", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        return _blank_to_none(value)


# ============================================
# Responses
# ============================================

class MessageResponse(CamelModel):
    message: str


class StatusCounts(CamelModel):
    done: int = 0
    in_progress: int = 0
    pending: int = 0


class AssigneeSummary(StatusCounts):
    assignee_id: str


class DeadlineSummary(StatusCounts):
    deadline: date


class TaskReport(CamelModel):
    total: int
    by_status: StatusCounts
    by_priority: dict
    by_assignee: List[AssigneeSummary]
    by_deadline: List[DeadlineSummary]
