import uvicorn

from src.app.presentation.app import create_app
from src.setup.api_config import get_api_settings
from src.setup.app_config import configure_di
from src.setup.logging_config import configure_logging

# Configure DI once at process start
settings = get_api_settings()
configure_logging(settings.LOG_LEVEL)
configure_di()

app = create_app(settings)


def main() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
