from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status as http_status
from pydantic import ValidationError

from spend_wastage.core.config import Settings, get_settings
from spend_wastage.core.dates import parse_client_ids
from spend_wastage.schemas.reports import (
    ClientViewOut,
    MetricRowOut,
    MetricsRequest,
    SpendWastageReportOut,
    SpendWastageRequest,
)
from spend_wastage.services.grouping import build_client_views
from spend_wastage.services.metrics import compute_job_metrics
from spend_wastage.services.report import build_report
from spend_wastage.services.upstream import UpstreamError, get_upstream_client

router = APIRouter()


@router.post("/report", response_model=SpendWastageReportOut)
async def report_from_actions(
    payload: SpendWastageRequest,
    settings: Settings = Depends(get_settings),
) -> SpendWastageReportOut:
    report = build_report(
        payload.actions,
        payload.filters,
        filters_by_client=payload.client_filters,
        unknown_client=settings.unknown_client_label,
    )
    return SpendWastageReportOut.from_report(report)


@router.post("/clients", response_model=list[ClientViewOut])
async def client_views(
    payload: SpendWastageRequest,
    settings: Settings = Depends(get_settings),
) -> list[ClientViewOut]:
    views = build_client_views(
        payload.actions,
        payload.filters,
        filters_by_client=payload.client_filters,
        unknown_client=settings.unknown_client_label,
    )
    return [ClientViewOut.from_view(view) for view in views]


@router.post("/metrics", response_model=list[MetricRowOut])
async def job_metrics(payload: MetricsRequest) -> list[MetricRowOut]:
    return [MetricRowOut.from_row(row) for row in compute_job_metrics(payload.actions)]


@router.get("/report", response_model=SpendWastageReportOut)
async def fetch_report(
    client_ids: str = Query(..., min_length=1),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    settings: Settings = Depends(get_settings),
    upstream=Depends(get_upstream_client),
) -> SpendWastageReportOut:
    try:
        actions = await upstream.fetch_actions(parse_client_ids(client_ids), start_date, end_date)
    except ValidationError as exc:
        raise HTTPException(
            status_code=http_status.HTTP_502_BAD_GATEWAY,
            detail="upstream returned malformed spend wastage actions",
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=http_status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except UpstreamError as exc:
        raise HTTPException(status_code=http_status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    report = build_report(actions, unknown_client=settings.unknown_client_label)
    return SpendWastageReportOut.from_report(report)
