"""Runtime configuration for the HackCraft client."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="HACKCRAFT_", env_file=".env", extra="ignore")

    app_name: str = "hackcraft"
    log_level: str = "INFO"
    host: str = Field(default="localhost", description="HackCraft server host.")
    port: int = Field(default=25570, description="HackCraft server WebSocket port.")
    ws_path: str = "/ws"
    connect_timeout_seconds: float = Field(default=5.0, gt=0)
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    player_name: str | None = Field(default=None, description="Default player for CLI commands.")


settings = Settings()
