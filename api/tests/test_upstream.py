from __future__ import annotations

import asyncio
from datetime import date
from typing import Any

import httpx
import pytest

from spend_wastage.services.upstream import SpendWastageClient, UpstreamError


def test_fetch_actions_sends_client_ids_and_date_range() -> None:
    captured: dict[str, Any] = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        captured["path"] = request.url.path
        captured["params"] = dict(request.url.params)
        captured["authorization"] = request.headers.get("authorization")
        return httpx.Response(status_code=200, json=[_payload("job-1"), _payload("job-2")], request=request)

    actions = _run(
        handler,
        lambda client: client.fetch_actions(["c-1", "c-2"], date(2024, 1, 1), date(2024, 1, 31)),
        token="secret",
    )

    assert [action.job_id for action in actions] == ["job-1", "job-2"]
    assert captured["path"] == "/spendwastageactions"
    assert captured["params"] == {"client_ids": "c-1,c-2", "start_date": "2024-01-01", "end_date": "2024-01-31"}
    assert captured["authorization"] == "Bearer secret"


def test_fetch_actions_skips_request_without_client_ids() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert _run(handler, lambda client: client.fetch_actions([])) == []


def test_fetch_actions_treats_non_list_payload_as_empty() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=200, json={"message": "no data"}, request=request)

    assert _run(handler, lambda client: client.fetch_actions(["c-1"])) == []


def test_fetch_actions_defaults_to_month_to_date() -> None:
    captured: dict[str, str] = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        captured.update(dict(request.url.params))
        return httpx.Response(status_code=200, json=[], request=request)

    _run(handler, lambda client: client.fetch_actions(["c-1"]))

    today = date.today()
    assert captured["start_date"] == today.replace(day=1).isoformat()
    assert captured["end_date"] == today.isoformat()


def test_fetch_actions_raises_upstream_error_on_http_failure() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=503, request=request)

    with pytest.raises(UpstreamError, match="503"):
        _run(handler, lambda client: client.fetch_actions(["c-1"]))


def test_fetch_actions_raises_upstream_error_on_transport_failure() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamError, match="request failed"):
        _run(handler, lambda client: client.fetch_actions(["c-1"]))


def test_fetch_clients_by_agency_filters_client_list() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/clients/simple"
        return httpx.Response(
            status_code=200,
            json=[
                {"client_id": "c-1", "client_name": "Acme", "agency_id": "ag-1"},
                {"client_id": "c-2", "client_name": "Globex", "agency_id": "ag-2"},
            ],
            request=request,
        )

    clients = _run(handler, lambda client: client.fetch_clients_by_agency("ag-2"))

    assert [row["client_id"] for row in clients] == ["c-2"]


def _run(handler, call, *, token: str | None = None):
    async def run() -> Any:
        transport = httpx.MockTransport(handler)
        async with httpx.AsyncClient(transport=transport) as http_client:
            client = SpendWastageClient("https://upstream.example.com/", token=token, client=http_client)
            return await call(client)

    return asyncio.run(run())


def _payload(job_id: str) -> dict[str, Any]:
    return {
        "job_id": job_id,
        "placement_id": "pl-1",
        "action": "PAUSE_JOB_PUBLISHER",
        "pause_date": "2024-01-10",
        "client_name": "Acme",
        "rules": {"application_per_dollar": 0.05},
        "stats": {"TG": {"tg_mtd_applies": 0, "tg_mtd_net_spend": 12.0}},
    }
