from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from typing import List, Optional

from staffhub.core.exceptions import ValidationError
from staffhub.modules.auth.dependencies import get_current_user
from staffhub.schemas.auth import Identity
from staffhub.schemas.tracking import FileRecord, MessageResponse
from staffhub.services.file_service import FileService, parse_is_public
from staffhub.services.record_store import TrackerState, get_tracker_state
from staffhub.services.storage_service import UploadStorage, get_upload_storage

router = APIRouter()


def get_file_service(state: TrackerState = Depends(get_tracker_state)) -> FileService:
    return FileService(state)


@router.post("/upload", response_model=FileRecord, status_code=status.HTTP_201_CREATED)
async def upload_file(
    request: Request,
    file: Optional[UploadFile] = File(None),
    is_public: str = Form("true", alias="isPublic"),
    description: str = Form(""),
    current_user: Identity = Depends(get_current_user),
    files: FileService = Depends(get_file_service),
    storage: UploadStorage = Depends(get_upload_storage),
):
    """Store a shared document; visible to everyone unless isPublic is not "true" """
    if file is None or not file.filename:
        raise ValidationError("No file uploaded", field="file")

    blob = await storage.save(file)
    return files.create_record(
        current_user,
        blob,
        url=storage.public_url(str(request.base_url), blob.file_name),
        description=description,
        is_public=parse_is_public(is_public),
    )


@router.get("", response_model=List[FileRecord])
async def list_files(
    current_user: Identity = Depends(get_current_user),
    files: FileService = Depends(get_file_service),
):
    return files.list_files(current_user)


@router.delete("/{file_id}", response_model=MessageResponse)
async def delete_file(
    file_id: str,
    current_user: Identity = Depends(get_current_user),
    files: FileService = Depends(get_file_service),
    storage: UploadStorage = Depends(get_upload_storage),
):
    record = files.delete_record(current_user, file_id)
    await storage.delete(record.file_name)
    return MessageResponse(message="File deleted")
