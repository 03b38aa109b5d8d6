from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from typing import List, Optional

from staffhub.core.exceptions import StaffHubError, ValidationError
from staffhub.modules.auth.dependencies import get_current_user
from staffhub.schemas.auth import Identity
from staffhub.schemas.tracking import Attachment, MessageResponse, Task, TaskCreate, TaskUpdate
from staffhub.services.record_store import TrackerState, generate_id, get_tracker_state, utcnow
from staffhub.services.storage_service import UploadStorage, get_upload_storage
from staffhub.services.task_service import TaskService

router = APIRouter()


def get_task_service(state: TrackerState = Depends(get_tracker_state)) -> TaskService:
    return TaskService(state)


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    current_user: Identity = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    """Create a task; non-admins always become the assignee"""
    return tasks.create_task(current_user, task_data)


@router.get("", response_model=List[Task])
async def list_tasks(
    current_user: Identity = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return tasks.list_tasks(current_user)


@router.get("/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    current_user: Identity = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return tasks.get_task(current_user, task_id)


@router.put("/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    task_data: TaskUpdate,
    current_user: Identity = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return tasks.update_task(current_user, task_id, task_data)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    current_user: Identity = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    tasks.delete_task(current_user, task_id)
    return MessageResponse(message="Task deleted")


# ==================== Attachments ====================

@router.post("/{task_id}/attachments", response_model=Task, status_code=status.HTTP_201_CREATED)
async def upload_attachment(
    task_id: str,
    request: Request,
    file: Optional[UploadFile] = File(None),
    current_user: Identity = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
    storage: UploadStorage = Depends(get_upload_storage),
):
    # Ownership is checked before anything is written to disk
    tasks.get_modifiable_task(current_user, task_id)
    if file is None or not file.filename:
        raise ValidationError("No file uploaded", field="file")

    blob = await storage.save(file)
    attachment = Attachment(
        id=generate_id(),
        original_name=blob.original_name,
        file_name=blob.file_name,
        size=blob.size,
        url=storage.public_url(str(request.base_url), blob.file_name),
        uploaded_by=current_user.id,
        uploaded_at=utcnow(),
    )

    try:
        return tasks.add_attachment(current_user, task_id, attachment)
    except StaffHubError:
        # Task vanished while the upload was being written
        await storage.delete(blob.file_name)
        raise


@router.delete("/{task_id}/attachments/{attachment_id}", response_model=Task)
async def delete_attachment(
    task_id: str,
    attachment_id: str,
    current_user: Identity = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
    storage: UploadStorage = Depends(get_upload_storage),
):
    task, removed = tasks.remove_attachment(current_user, task_id, attachment_id)
    if removed.file_name:
        await storage.delete(removed.file_name)
    return task
