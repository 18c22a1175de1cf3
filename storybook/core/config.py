"""
Application settings
"""

from pydantic_settings import BaseSettings
from typing import Optional, List
from pathlib import Path
from dotenv import load_dotenv


"""env load order
1) OS environment variables
2) .env at the project root
"""

_here = Path(__file__).resolve()
_repo_root_env = _here.parents[2] / ".env"
try:
    if _repo_root_env.exists():
        load_dotenv(dotenv_path=str(_repo_root_env), override=False)
except OSError:
    pass


class Settings(BaseSettings):
    """Storybook Studio settings"""
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    DATABASE_URL: str = "sqlite+aiosqlite:///./data/storybook.db"

    # JWT
    JWT_SECRET_KEY: str = "your-super-secret-jwt-key-change-this-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    UPLOAD_TOKEN_EXPIRE_MINUTES: int = 15

    # AI image provider
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    IMAGE_MODEL: str = "dall-e-3"
    IMAGE_SIZE: str = "1024x1024"
    IMAGE_QUALITY: str = "standard"
    IMAGE_GENERATION_TIMEOUT_SECONDS: float = 120.0
    IMAGE_FETCH_TIMEOUT_SECONDS: float = 30.0

    # Asset storage: local | s3
    STORAGE_BACKEND: str = "local"
    UPLOAD_DIRECTORY: Optional[str] = None
    S3_ENDPOINT_URL: Optional[str] = None
    S3_ACCESS_KEY_ID: Optional[str] = None
    S3_SECRET_ACCESS_KEY: Optional[str] = None
    S3_BUCKET: Optional[str] = None
    S3_REGION: Optional[str] = None
    S3_PUBLIC_BASE_URL: Optional[str] = None
    S3_PRESIGN_EXPIRES_SECONDS: int = 3600
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # Externally reachable address of this service (upload and /static URLs)
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    PRINT_BASE_URL: str = "https://print-demo.com"

    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'ignore'


settings = Settings()


def validate_settings():
    """Validate settings"""
    if settings.ENVIRONMENT == "production":
        if settings.JWT_SECRET_KEY == "your-super-secret-jwt-key-change-this-in-production":
            raise ValueError("JWT_SECRET_KEY must be changed in production.")
        if settings.STORAGE_BACKEND not in ("local", "s3"):
            raise ValueError(f"Unsupported STORAGE_BACKEND: {settings.STORAGE_BACKEND}")
    return True


validate_settings()
