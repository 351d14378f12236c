# Settings

from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # App
    APP_NAME: str = "Jaggle Grids"
    APP_VERSION: str = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    # Database
    DATABASE_URL: str = "sqlite:///./jaggle_grids.db"

    # Sessions
    SESSION_TTL_DAYS: int = 7

    class Config:
        env_file = ".env"

settings = Settings()
