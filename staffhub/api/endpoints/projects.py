from fastapi import APIRouter, Depends, status
from typing import List

from staffhub.modules.auth.dependencies import get_current_user, require_admin
from staffhub.schemas.auth import Identity
from staffhub.schemas.tracking import MessageResponse, Project, ProjectCreate, ProjectUpdate
from staffhub.services.project_service import ProjectService
from staffhub.services.record_store import TrackerState, get_tracker_state

router = APIRouter()


def get_project_service(state: TrackerState = Depends(get_tracker_state)) -> ProjectService:
    return ProjectService(state)


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    current_user: Identity = Depends(require_admin),
    projects: ProjectService = Depends(get_project_service),
):
    return projects.create_project(current_user, project_data)


@router.get("", response_model=List[Project])
async def list_projects(
    current_user: Identity = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    return projects.list_projects()


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    current_user: Identity = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    return projects.get_project(project_id)


@router.put("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    current_user: Identity = Depends(require_admin),
    projects: ProjectService = Depends(get_project_service),
):
    return projects.update_project(project_id, project_data)


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: str,
    current_user: Identity = Depends(require_admin),
    projects: ProjectService = Depends(get_project_service),
):
    """Delete a project together with every task filed under it"""
    projects.delete_project(project_id)
    return MessageResponse(message="Project deleted")
