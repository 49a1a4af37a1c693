# backend/config.py
from functools import lru_cache
from pathlib import Path
from typing import ClassVar, Optional

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

DEFAULT_SQLITE_URL = "sqlite:///./inventory.db"


class Settings(BaseSettings):
    # Storage target: host, credentials and schema of the inventory database
    DB_HOST: str = "localhost"
    DB_USER: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    DB_SCHEMA: str = "magazzino"
    DB_DRIVER: str = "mysql+pymysql"

    # Full URL wins over the parts above
    DATABASE_URL: Optional[str] = None

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            url = self.DATABASE_URL
            # SQLAlchemy wants postgresql://, some hosts still hand out postgres://
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql://", 1)
            return url
        if self.DB_USER:
            return URL.create(
                self.DB_DRIVER,
                username=self.DB_USER,
                password=self.DB_PASSWORD,
                host=self.DB_HOST,
                database=self.DB_SCHEMA,
            ).render_as_string(hide_password=False)
        return DEFAULT_SQLITE_URL


@lru_cache
def get_settings() -> Settings:
    return Settings()
