# File: src/tasktimetracker/config.py

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# --- 1. One SQLite store ---
class StoreConfig(BaseModel):
    path: str
    echo: bool = False
    foreign_keys: bool = True
    timeout: float = 5.0

    def get_dsn(self) -> str:
        """Builds the async SQLAlchemy DSN for this store."""
        if self.path == ":memory:":
            return "sqlite+aiosqlite://"
        return f"sqlite+aiosqlite:///{self.path}"

    def ensure_parent_dir(self) -> None:
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)


class BookingStoreConfig(StoreConfig):
    path: str = "data/bookings.db"


class TaskStoreConfig(StoreConfig):
    path: str = "data/tasks.db"


# --- 2. HTTP server ---
class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 3000


# --- 3. Explicit configuration passed to create_client() ---
class TimeTrackerConfig(BaseModel):
    bookings: StoreConfig = Field(default_factory=BookingStoreConfig)
    tasks: StoreConfig = Field(default_factory=TaskStoreConfig)


# --- 4. Settings read from the environment / .env ---
class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    bookings: BookingStoreConfig = Field(default_factory=BookingStoreConfig)
    tasks: TaskStoreConfig = Field(default_factory=TaskStoreConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    def to_client_config(self) -> TimeTrackerConfig:
        return TimeTrackerConfig(bookings=self.bookings, tasks=self.tasks)


_cached_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Returns the settings singleton, building it on first use so that
    importing this module never fails on a broken environment.
    """
    global _cached_settings
    if _cached_settings is None:
        _cached_settings = Settings()
    return _cached_settings


def reset_settings() -> None:
    global _cached_settings
    _cached_settings = None
