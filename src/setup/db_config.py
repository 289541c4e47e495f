from pydantic import ConfigDict
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class DatabaseSettings(BaseSettings):
    """Row-store connection settings; ``DATABASE_URL`` wins over the DB_* parts."""

    DATABASE_URL: str | None = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "taskmanager"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_SSL: bool = False
    DB_MAX_CONNECTIONS: int = 20
    DB_CONNECT_TIMEOUT: float = 2.0
    DB_ECHO: bool = False

    model_config = ConfigDict(env_file=".env", extra="ignore")

    @property
    def url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            "postgresql+asyncpg",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        ).render_as_string(hide_password=False)


def get_database_settings() -> DatabaseSettings:
    return DatabaseSettings()  # type: ignore[call-arg]
