from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "PlowTrack"
    APP_PORT: int = 9202
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "plowtrack"
    POSTGRES_PORT: int = 5432
    DB_URL: Optional[str] = None  # Full URL override, e.g. sqlite:///./plowtrack.db
    
    # Admin panel
    ADMIN_USER: str = "Admin"
    ADMIN_PASSWORD: str = ""
    
    # Housekeeping
    ACTIVITY_RETENTION_DAYS: int = 180
    CACHE_TTL_SECONDS: float = 60.0
    
    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
    
    class Config:
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
