from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import BaseModel

from src.app.domain.models import Task, TaskPage
from src.setup.client_config import ClientSettings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised for non-2xx answers and transport failures talking to the task API."""

    def __init__(self, status_code: int | None, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        # The server's {"error": ...} text, when the response carried one.
        self.detail = detail


class TaskApiClient:
    """Thin async wrapper over the task REST endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._health_url = httpx.URL(base_url).join("/health")
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
            event_hooks={"request": [self._log_request], "response": [self._log_response]},
        )

    @classmethod
    def from_settings(
        cls, settings: ClientSettings, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> TaskApiClient:
        return cls(settings.TASK_API_URL, timeout=settings.TASK_API_TIMEOUT, transport=transport)

    async def get_tasks(self, page: int = 1, limit: int = 50) -> TaskPage:
        response = await self._request("GET", "/tasks", params={"page": page, "limit": limit})
        return TaskPage.model_validate(response.json())

    async def get_task(self, task_id: str) -> Task:
        response = await self._request("GET", f"/tasks/{task_id}")
        return Task.model_validate(response.json())

    async def create_task(self, payload: Mapping[str, Any] | BaseModel) -> Task:
        response = await self._request("POST", "/tasks", json=self._to_body(payload))
        return Task.model_validate(response.json())

    async def update_task(self, task_id: str, payload: Mapping[str, Any] | BaseModel) -> Task:
        response = await self._request("PUT", f"/tasks/{task_id}", json=self._to_body(payload))
        return Task.model_validate(response.json())

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")

    async def health_check(self) -> dict[str, Any]:
        response = await self._request("GET", self._health_url)
        return response.json()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> TaskApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, method: str, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(None, str(exc) or type(exc).__name__) from exc
        if response.is_error:
            detail = self._error_detail(response)
            raise ApiError(
                response.status_code,
                detail or response.reason_phrase or f"HTTP {response.status_code}",
                detail,
            )
        return response

    @staticmethod
    def _to_body(payload: Mapping[str, Any] | BaseModel) -> dict[str, Any]:
        if isinstance(payload, BaseModel):
            return payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return dict(payload)

    @staticmethod
    def _error_detail(response: httpx.Response) -> str | None:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), str):
            return body["error"]
        return None

    @staticmethod
    async def _log_request(request: httpx.Request) -> None:
        logger.debug("Making %s request to %s", request.method, request.url)

    @staticmethod
    async def _log_response(response: httpx.Response) -> None:
        if response.is_error:
            await response.aread()
            logger.warning(
                "API error",
                extra={
                    "status_code": response.status_code,
                    "method": response.request.method,
                    "url": str(response.request.url),
                },
            )
