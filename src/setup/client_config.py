from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """Configuration for the task board HTTP client."""
    TASK_API_URL: str = "http://localhost/api/v1"
    TASK_API_TIMEOUT: float = 10.0

    model_config = ConfigDict(env_file=".env", extra="ignore")


def get_client_settings() -> ClientSettings:
    """Return a fresh client settings instance."""
    return ClientSettings()
