from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class ApiSettings(BaseSettings):
    APP_NAME: str = "task-board"
    APP_VERSION: str = "1.0.0"
    HOST: str = "0.0.0.0"
    PORT: int = 80
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api/v1"

    model_config = ConfigDict(env_file=".env", extra="ignore")


def get_api_settings() -> ApiSettings:
    return ApiSettings()  # type: ignore[call-arg]
