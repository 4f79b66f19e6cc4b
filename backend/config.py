# backend/config.py
from pathlib import Path
from typing import ClassVar, Optional

from fastapi import Request
from pydantic_settings import BaseSettings

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./warehouse_map.db"

    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12

    # Uploaded files live under UPLOAD_DIR and are served from /uploads
    UPLOAD_DIR: str = "uploads"
    PLACEHOLDER_IMAGE: str = "/warehouse-scheme.svg"
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024
    MAX_IMPORT_BYTES: int = 10 * 1024 * 1024

    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    # Bootstrap account created on first start when the users table is empty
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"
    SEED_DEMO_DATA: bool = True

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

    @property
    def upload_root(self) -> Path:
        return Path(self.UPLOAD_DIR)

    @property
    def warehouse_image_dir(self) -> Path:
        return self.upload_root / "warehouses"

    @property
    def import_temp_dir(self) -> Path:
        return self.upload_root / "temp"


# FastAPI dependency: the settings the running app was built with
def get_settings(request: Request) -> Settings:
    return request.app.state.settings
