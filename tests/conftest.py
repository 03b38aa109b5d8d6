"""
StaffHub - Test Configuration and Fixtures
"""
import os
import tempfile
from typing import AsyncGenerator, Dict
import pytest
from httpx import AsyncClient, ASGITransport

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['LOG_FILE'] = ''
os.environ['LOG_LEVEL'] = 'WARNING'
os.environ['UPLOAD_PATH'] = tempfile.mkdtemp(prefix='staffhub-uploads-')
os.environ['USER_DIRECTORY_URL'] = 'http://directory.test/users'

from staffhub.main import app
from staffhub.core.security import create_user_token
from staffhub.services.record_store import TrackerState, get_tracker_state
from staffhub.services.storage_service import UploadStorage, get_upload_storage
from staffhub.services.user_directory import UserDirectory, get_user_directory

from mocks.factories import make_user_data
from mocks.mock_user_api import MockUserAPI


@pytest.fixture
def mock_user_api() -> MockUserAPI:
    return MockUserAPI()


@pytest.fixture
def directory(mock_user_api: MockUserAPI) -> UserDirectory:
    """Directory client wired to the in-memory users collection"""
    return UserDirectory(base_url=mock_user_api.base_url, transport=mock_user_api.transport)


@pytest.fixture
def tracker() -> TrackerState:
    """Fresh projects/tasks/files collections for each test"""
    return TrackerState()


@pytest.fixture
def storage(tmp_path) -> UploadStorage:
    return UploadStorage(upload_dir=tmp_path / 'uploads')


@pytest.fixture
async def client(directory, tracker, storage) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with directory, store and storage overrides"""
    app.dependency_overrides[get_user_directory] = lambda: directory
    app.dependency_overrides[get_tracker_state] = lambda: tracker
    app.dependency_overrides[get_upload_storage] = lambda: storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(mock_user_api: MockUserAPI) -> Dict:
    """Seed an admin user"""
    return mock_user_api.add_user(**make_user_data(role='admin'))


@pytest.fixture
def staff_user(mock_user_api: MockUserAPI) -> Dict:
    """Seed a staff user"""
    return mock_user_api.add_user(**make_user_data())


@pytest.fixture
def other_staff_user(mock_user_api: MockUserAPI) -> Dict:
    """Seed a second staff user"""
    return mock_user_api.add_user(**make_user_data())


def auth_headers_for(user: Dict) -> Dict[str, str]:
    return {'Authorization': f'Bearer {create_user_token(user)}'}


@pytest.fixture
def admin_headers(admin_user) -> Dict[str, str]:
    return auth_headers_for(admin_user)


@pytest.fixture
def staff_headers(staff_user) -> Dict[str, str]:
    return auth_headers_for(staff_user)


@pytest.fixture
def other_staff_headers(other_staff_user) -> Dict[str, str]:
    return auth_headers_for(other_staff_user)
