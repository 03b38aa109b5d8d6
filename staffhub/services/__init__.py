from staffhub.services.user_directory import UserDirectory, user_directory
from staffhub.services.record_store import RecordStore, TrackerState, tracker_state
from staffhub.services.storage_service import UploadStorage, upload_storage
