from datetime import timedelta

from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = "mongodb://localhost:27017/deltaiota"
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 1898
    debug: bool = False
    cors_origins: list[str] = []
    session_duration: timedelta = timedelta(days=7)  # Sliding lifetime added on every key authentication
    bcrypt_rounds: int = 12
    graceful_timeout: float = 5.0  # Seconds uvicorn waits for in-flight requests on shutdown
    root_password: str | None = None  # Password for the bootstrap root account (random if unset)

    model_config = {
        "env_file": [".env"],
        "env_prefix": "DELTAIOTA_",
        "extra": "ignore",
    }
