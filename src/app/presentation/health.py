from datetime import UTC, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

router = APIRouter(tags=["health"])


class HealthStatus(BaseModel):
    status: str = Field(description="Always 'ok' while the process is serving.")
    timestamp: datetime = Field(description="Server time of the check.")
    version: str = Field(description="Running application version.")


@router.get(
    "/health",
    response_model=HealthStatus,
    summary="Liveness check",
    description="Reports that the process is up. Does not touch the database.",
)
async def health(request: Request) -> HealthStatus:
    return HealthStatus(
        status="ok",
        timestamp=datetime.now(UTC),
        version=request.app.state.settings.APP_VERSION,
    )
