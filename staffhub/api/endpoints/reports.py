from fastapi import APIRouter, Depends

from staffhub.api.endpoints.tasks import get_task_service
from staffhub.modules.auth.dependencies import get_current_user
from staffhub.schemas.auth import Identity
from staffhub.schemas.tracking import TaskReport
from staffhub.services.report_service import build_task_report
from staffhub.services.task_service import TaskService

router = APIRouter()


@router.get("/tasks", response_model=TaskReport)
async def task_report(
    current_user: Identity = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    """Dashboard aggregates over the tasks the caller can see"""
    return build_task_report(tasks.list_tasks(current_user))
