from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import bcrypt
import time

from staffhub.core.config import settings
from staffhub.core.exceptions import InvalidCredentialError


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against a bcrypt hash"""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def password_matches(plain_password: str, stored_password: Optional[str]) -> bool:
    """
    Check a login password against the value kept in the user directory.

    Demo records in the directory hold plain-text passwords, records created
    through this service hold bcrypt hashes. Both are accepted.
    """
    if not stored_password:
        return False
    if stored_password == plain_password:
        return True
    return verify_password(plain_password, stored_password)


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "type": "access"})
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return encoded_jwt


def create_user_token(user: Dict[str, Any]) -> str:
    """Issue an access token whose claims are the caller identity"""
    return create_access_token({
        "id": str(user.get("id")),
        "email": user.get("email"),
        "role": user.get("role"),
        "fullName": user.get("fullName"),
        "position": user.get("position"),
    })


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and verify a JWT access token"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise InvalidCredentialError()

    if payload.get("type") != "access":
        raise InvalidCredentialError()

    return payload


def is_mock_token(token: str) -> bool:
    return settings.ALLOW_MOCK_TOKENS and token.startswith(settings.MOCK_TOKEN_PREFIX)


def parse_mock_token(token: str) -> str:
    """
    Extract the user id from a ``mock_token_<userId>_<timestamp>`` credential.

    Raises InvalidCredentialError when the id segment is missing.
    """
    parts = token.split("_")
    user_id = parts[2] if len(parts) > 2 else ""
    if not user_id:
        raise InvalidCredentialError("Invalid mock token")
    return user_id


def create_mock_token(user_id: str) -> str:
    """Build a mock credential in the shape the legacy frontend issues"""
    return f"{settings.MOCK_TOKEN_PREFIX}{user_id}_{int(time.time() * 1000)}"
