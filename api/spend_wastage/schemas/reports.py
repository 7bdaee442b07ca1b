from __future__ import annotations

from pydantic import BaseModel, Field

from spend_wastage.schemas.actions import SpendWastageAction
from spend_wastage.services.filters import FilterColumn, FilterCriteria
from spend_wastage.services.grouping import ClientView
from spend_wastage.services.metrics import MetricRow
from spend_wastage.services.reasons import CPA_ABOVE_TARGET_REASON, ReasonSummary
from spend_wastage.services.report import SpendWastageReport


class SpendWastageRequest(BaseModel):
    actions: list[SpendWastageAction] = Field(default_factory=list)
    filters: FilterCriteria | None = None
    client_filters: dict[str, FilterCriteria] = Field(default_factory=dict)


class MetricsRequest(BaseModel):
    actions: list[SpendWastageAction] = Field(default_factory=list)


class ReasonSummaryOut(BaseModel):
    reason: str
    count: int
    trading_group_cpa: float | None = None
    jg_cpa: float | None = None

    @classmethod
    def from_summary(cls, summary: ReasonSummary, *, with_cpa: bool) -> ReasonSummaryOut:
        if not with_cpa:
            return cls(reason=summary.reason, count=summary.count)
        return cls(
            reason=summary.reason,
            count=summary.count,
            trading_group_cpa=round(summary.trading_group_cpa, 2),
            jg_cpa=round(summary.jg_cpa, 2),
        )


class ClientSummaryOut(BaseModel):
    resumed_count: int
    paused_count: int
    job_group_count: int
    publisher_names: list[str]
    reasons: list[ReasonSummaryOut]


class ActionRowOut(BaseModel):
    display_key: str
    reason: str
    action: SpendWastageAction


class ClientViewOut(BaseModel):
    client_name: str
    summary: ClientSummaryOut
    rows: list[ActionRowOut]
    column_values: dict[FilterColumn, list[str]] = Field(default_factory=dict)

    @classmethod
    def from_view(cls, view: ClientView) -> ClientViewOut:
        summary = view.summary
        return cls(
            client_name=view.client_name,
            summary=ClientSummaryOut(
                resumed_count=summary.resumed_count,
                paused_count=summary.paused_count,
                job_group_count=summary.job_group_count,
                publisher_names=summary.publisher_names,
                reasons=[
                    ReasonSummaryOut.from_summary(row, with_cpa=row.reason == CPA_ABOVE_TARGET_REASON)
                    for row in summary.reasons.values()
                ],
            ),
            rows=[ActionRowOut(display_key=row.display_key, reason=row.reason, action=row.action) for row in view.rows],
            column_values=view.column_values,
        )


class MetricRowOut(BaseModel):
    action_type: str
    reason: str
    job_count: int
    total_applies: int | None = None
    total_net_spend: float | None = None

    @classmethod
    def from_row(cls, row: MetricRow) -> MetricRowOut:
        return cls(
            action_type=row.action_type,
            reason=row.reason,
            job_count=row.job_count,
            total_applies=row.display_applies,
            total_net_spend=row.display_net_spend,
        )


class SpendWastageReportOut(BaseModel):
    total_actions: int
    clients: list[ClientViewOut]
    metrics: list[MetricRowOut]

    @classmethod
    def from_report(cls, report: SpendWastageReport) -> SpendWastageReportOut:
        return cls(
            total_actions=report.total_actions,
            clients=[ClientViewOut.from_view(view) for view in report.clients],
            metrics=[MetricRowOut.from_row(row) for row in report.metrics],
        )
