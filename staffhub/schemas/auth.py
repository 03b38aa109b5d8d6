from pydantic import ConfigDict
from typing import Optional, Dict, Any

from staffhub.schemas.base import CamelModel


class Identity(CamelModel):
    """Caller identity resolved from a bearer credential"""
    id: str
    email: Optional[str] = None
    role: Optional[str] = None
    full_name: Optional[str] = None
    position: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Identity":
        return cls(
            id=str(claims.get("id")),
            email=claims.get("email"),
            role=claims.get("role"),
            full_name=claims.get("fullName"),
            position=claims.get("position"),
        )


# Request bodies keep every field optional so that missing input is reported
# with a readable message instead of a schema error.

class UserRegister(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    position: Optional[str] = None
    role: Optional[str] = None


class UserLogin(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ChangePasswordRequest(CamelModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class ProfileUpdate(CamelModel):
    full_name: Optional[str] = None
    position: Optional[str] = None
    avatar: Optional[str] = None


class UserSummary(CamelModel):
    """Public view of a directory user returned by auth endpoints"""
    model_config = ConfigDict(extra="ignore")

    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    position: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "UserSummary":
        return cls.model_validate({**record, "id": str(record.get("id"))})


class RegisterResponse(CamelModel):
    message: str = "User registered successfully"
    user: UserSummary
    token: str


class LoginResponse(CamelModel):
    message: str = "Login successful"
    token: str
    user: UserSummary


class MeResponse(CamelModel):
    user: Identity
