"""Configuration management for Project Timer."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project Timer config directory
PROJECT_TIMER_DIR = Path.home() / ".project_timer"
PROJECT_TIMER_ENV_FILE = PROJECT_TIMER_DIR / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PROJECT_TIMER_",
        # Later files override earlier ones
        env_file=(str(PROJECT_TIMER_ENV_FILE), ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # MCP server identity
    server_name: str = Field(
        default="project-timer",
        description="Name the MCP server reports to connecting clients",
    )

    # Timer storage
    timers_file: Path | None = Field(
        default=None,
        description="Path of the active timers JSON file (default: ~/.project_timer/timers.json)",
    )
    lock_timers_file: bool = Field(
        default=False,
        description="Guard read-modify-write of the timers file with a lock file",
    )

    # Notification stream
    notifications_enabled: bool = Field(
        default=True,
        description="Whether to serve the start/stop event stream",
    )
    events_host: str = Field(
        default="127.0.0.1",
        description="Interface the event stream binds to",
    )
    events_port: int = Field(
        default=3001,
        description="Port the event stream binds to",
    )
    events_path: str = Field(
        default="/events",
        description="HTTP path of the event stream",
    )
    events_queue_size: int = Field(
        default=100,
        description="Maximum pending frames per subscriber before frames are dropped",
    )

    def get_timers_file(self) -> Path:
        """Get the timers file path, using default if not set."""
        if self.timers_file:
            return self.timers_file
        return PROJECT_TIMER_DIR / "timers.json"

    def get_events_url(self) -> str:
        """Get the URL listeners connect to.

        Returns:
            URL like 'http://127.0.0.1:3001/events'
        """
        return f"http://{self.events_host}:{self.events_port}{self.events_path}"


# Global settings instance
settings = Settings()
