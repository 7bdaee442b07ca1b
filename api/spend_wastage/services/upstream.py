from __future__ import annotations

from datetime import date
import logging
from typing import Any

import httpx

from spend_wastage.core.config import get_settings
from spend_wastage.core.dates import format_api_date, resolve_date_range
from spend_wastage.schemas.actions import SpendWastageAction, parse_actions

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Raised when the spend wastage API cannot be reached or answers with an error."""


class SpendWastageClient:
    """Read-only client for the upstream clients and spend wastage actions API."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = client

    async def fetch_clients(self) -> list[dict[str, Any]]:
        payload = await self._get("/clients/simple")
        return payload if isinstance(payload, list) else []

    async def fetch_clients_by_agency(self, agency_id: str) -> list[dict[str, Any]]:
        clients = await self.fetch_clients()
        return [row for row in clients if isinstance(row, dict) and row.get("agency_id") == agency_id]

    async def fetch_actions(
        self,
        client_ids: list[str],
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[SpendWastageAction]:
        if not client_ids:
            return []
        start, end = resolve_date_range(start_date, end_date)
        payload = await self._get(
            "/spendwastageactions",
            params={
                "client_ids": ",".join(client_ids),
                "start_date": format_api_date(start),
                "end_date": format_api_date(end),
            },
        )
        if not isinstance(payload, list):
            logger.warning("spend wastage payload was not a list; treating as empty type=%s", type(payload).__name__)
            return []
        actions = parse_actions(payload)
        logger.info(
            "fetched spend wastage actions count=%s clients=%s start=%s end=%s",
            len(actions),
            len(client_ids),
            format_api_date(start),
            format_api_date(end),
        )
        return actions

    async def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        if self._client is not None:
            return await self._request(self._client, path, params)
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await self._request(client, path, params)

    async def _request(self, client: httpx.AsyncClient, path: str, params: dict[str, str] | None) -> Any:
        try:
            response = await client.get(f"{self.base_url}{path}", params=params, headers=self.headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(f"upstream {path} returned status {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"upstream {path} request failed: {exc}") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(f"upstream {path} returned invalid JSON") from exc


def get_upstream_client() -> SpendWastageClient:
    settings = get_settings()
    return SpendWastageClient(
        settings.upstream_base_url,
        token=settings.upstream_token,
        timeout_seconds=settings.upstream_timeout_seconds,
    )
