"""
File Service - metadata for shared documents

Admins see every record. Others see public records plus their own uploads,
and may delete only their own.
"""

from typing import List

from staffhub.core.exceptions import FileRecordNotFoundError
from staffhub.core.logging_config import logger
from staffhub.modules.auth import policies
from staffhub.schemas.auth import Identity
from staffhub.schemas.tracking import FileRecord
from staffhub.services.record_store import TrackerState, generate_id, utcnow
from staffhub.services.storage_service import StoredBlob


def parse_is_public(value) -> bool:
    """Form fields arrive as strings; only the literal "true" means public"""
    return str(value) == "true"


class FileService:

    def __init__(self, state: TrackerState):
        self.state = state

    def list_files(self, identity: Identity) -> List[FileRecord]:
        return policies.visible_files(identity, self.state.files.all())

    def create_record(
        self,
        identity: Identity,
        blob: StoredBlob,
        url: str,
        description: str = "",
        is_public: bool = True,
    ) -> FileRecord:
        record = FileRecord(
            id=generate_id(),
            original_name=blob.original_name,
            file_name=blob.file_name,
            size=blob.size,
            url=url,
            description=description,
            is_public=is_public,
            uploaded_by=identity.id,
            uploaded_by_role=identity.role,
            uploaded_at=utcnow(),
        )
        self.state.files.insert(record)
        logger.info(
            f"[Files] {identity.id} uploaded {record.original_name} "
            f"({record.size} bytes, {'public' if is_public else 'private'})"
        )
        return record

    def delete_record(self, identity: Identity, file_id: str) -> FileRecord:
        """Remove a record the caller may delete; returns it so the blob can go too"""
        record = self.state.files.get(file_id)
        if record is None:
            raise FileRecordNotFoundError(file_id)
        policies.require_file_delete(identity, record)

        self.state.files.remove(file_id)
        logger.info(f"[Files] {identity.id} deleted {record.file_name}")
        return record
