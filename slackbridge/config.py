from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Slackbridge"
    debug: bool = False
    host: str = "127.0.0.1"
    port: int = 8000

    # Slack
    slack_bot_token: str = ""

    # Matrix
    matrix_server_name: str = "localhost"
    matrix_user_prefix: str = "slack_"

    # Message parsing
    max_upload_size: Optional[int] = None  # Bytes; files above this are linked
    lookup_timeout: float = 10.0  # Seconds per directory/profile lookup
    file_download_timeout: float = 30.0  # Seconds
    bot_messages_as_notice: bool = False

    model_config = ConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
