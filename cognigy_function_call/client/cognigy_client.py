"""Async Cognigy REST API client using httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cognigy_function_call.client.config import Settings


def is_error(raw: Any) -> bool:
    """True when *raw* is the error dict returned by a failed request."""
    return isinstance(raw, dict) and "error" in raw


class CognigyClient:
    """Thin async wrapper around the Cognigy discovery endpoints."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._settings = settings
        self._logger = logger or logging.getLogger("cognigy_function_call.client")
        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            headers=settings.headers,
            timeout=httpx.Timeout(settings.timeout, connect=10.0),
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> CognigyClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _get(self, path: str, params: dict | None = None) -> Any:
        try:
            r = await self._client.get(path, params=params)
            r.raise_for_status()
            return r.json()
        except httpx.HTTPStatusError as e:
            self._logger.debug("GET %s -> %s", path, e.response.status_code)
            return {"error": f"HTTP {e.response.status_code}", "detail": e.response.text}
        except Exception as e:
            self._logger.debug("GET %s failed: %s", path, e)
            return {"error": str(e)}

    # ==================================================================
    # FLOWS
    # ==================================================================

    async def list_flows(self, project_id: str, limit: int, skip: int = 0) -> Any:
        params = {"limit": limit, "skip": skip, "projectId": project_id}
        return await self._get("/flows", params=params)

    async def list_flow_nodes(self, flow_id: str, limit: int, skip: int = 0) -> Any:
        params = {"limit": limit, "skip": skip}
        return await self._get(f"/flows/{flow_id}/chart/nodes", params=params)
