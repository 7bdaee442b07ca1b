from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, Mapping

from opentelemetry import trace

from spend_wastage.schemas.actions import SpendWastageAction
from spend_wastage.services.dedupe import UNKNOWN_CLIENT
from spend_wastage.services.filters import FilterCriteria
from spend_wastage.services.grouping import ClientView, build_client_views
from spend_wastage.services.metrics import MetricRow, compute_job_metrics

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass(slots=True)
class SpendWastageReport:
    total_actions: int
    clients: list[ClientView]
    metrics: list[MetricRow]


def build_report(
    actions: Iterable[SpendWastageAction],
    criteria: FilterCriteria | None = None,
    *,
    filters_by_client: Mapping[str, FilterCriteria] | None = None,
    unknown_client: str = UNKNOWN_CLIENT,
) -> SpendWastageReport:
    rows = list(actions)
    with tracer.start_as_current_span("spend_wastage.build_report") as span:
        span.set_attribute("spend_wastage.action_count", len(rows))
        clients = build_client_views(
            rows,
            criteria,
            filters_by_client=filters_by_client,
            unknown_client=unknown_client,
        )
        metrics = compute_job_metrics(rows)
        span.set_attribute("spend_wastage.client_count", len(clients))
    logger.debug("built spend wastage report actions=%s clients=%s metric_rows=%s", len(rows), len(clients), len(metrics))
    return SpendWastageReport(total_actions=len(rows), clients=clients, metrics=metrics)
