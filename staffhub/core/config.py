from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"


def split_origins(raw: str) -> List[str]:
    """``"a, b"`` -> ``["a", "b"]``; blanks are dropped"""
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings(BaseSettings):
    """StaffHub settings, read from the environment or a .env file"""

    # ---------- Service ----------
    APP_NAME: str = "StaffHub"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    API_PREFIX: str = "/api"
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 5000

    # ---------- Tokens & passwords ----------
    JWT_SECRET_KEY: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12
    PASSWORD_MIN_LENGTH: int = 6

    # Legacy frontend credentials: mock_token_<userId>_<epochMillis>
    ALLOW_MOCK_TOKENS: bool = True
    MOCK_TOKEN_PREFIX: str = "mock_token_"

    # ---------- User directory (hosted mock API) ----------
    USER_DIRECTORY_URL: str = "https://68911551944bf437b59833cb.mockapi.io/users"
    USER_DIRECTORY_TIMEOUT: float = 10.0

    # ---------- Uploads ----------
    UPLOAD_PATH: str = "uploads"
    MAX_UPLOAD_SIZE: int = 50 * 1024 * 1024

    # ---------- CORS ----------
    CORS_ORIGINS_STR: str = "*"

    # ---------- Rate limits (slowapi notation) ----------
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    LOGIN_RATE_LIMIT: str = "5/minute"
    REGISTER_RATE_LIMIT: str = "3/minute"

    # ---------- Logging ----------
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._upload_dir = Path(self.UPLOAD_PATH).resolve()
        self._upload_dir.mkdir(parents=True, exist_ok=True)

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return split_origins(self.CORS_ORIGINS_STR)

    @property
    def UPLOAD_DIR(self) -> Path:
        """Absolute upload directory; created on startup"""
        return self._upload_dir

    def is_dev_mode(self) -> bool:
        return self.DEBUG or self.ENVIRONMENT == "development"

    def uses_default_jwt_secret(self) -> bool:
        return self.JWT_SECRET_KEY == DEFAULT_JWT_SECRET


settings = Settings()
