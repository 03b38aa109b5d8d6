from pydantic import ConfigDict
from typing import Optional

from staffhub.schemas.base import CamelModel


class UserCreate(CamelModel):
    """Admin-side user creation; unknown fields are forwarded to the directory"""
    model_config = ConfigDict(extra="allow")

    full_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    position: Optional[str] = None
    role: Optional[str] = None
    avatar: Optional[str] = None


class UserUpdate(CamelModel):
    """Partial update forwarded to the directory"""
    model_config = ConfigDict(extra="allow")

    full_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    position: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None
    avatar: Optional[str] = None
