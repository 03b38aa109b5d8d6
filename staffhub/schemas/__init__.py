# Pydantic schemas
from staffhub.schemas.auth import (
    Identity,
    UserRegister,
    UserLogin,
    ChangePasswordRequest,
    ProfileUpdate,
    UserSummary,
    RegisterResponse,
    LoginResponse,
    MeResponse,
)
from staffhub.schemas.tracking import (
    Project,
    ProjectCreate,
    ProjectUpdate,
    Task,
    TaskCreate,
    TaskUpdate,
    Attachment,
    FileRecord,
    MessageResponse,
    TaskReport,
)
from staffhub.schemas.user import UserCreate, UserUpdate
