from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from spend_wastage.schemas.actions import PAUSE_JOB_PUBLISHER, SpendWastageAction
from spend_wastage.services.dedupe import dedupe_jobs
from spend_wastage.services.reasons import classify


@dataclass(slots=True)
class MetricRow:
    action_type: str
    reason: str
    job_count: int = 0
    total_applies: int = 0
    total_net_spend: float = 0.0

    @property
    def is_pause(self) -> bool:
        return self.action_type == PAUSE_JOB_PUBLISHER

    @property
    def display_applies(self) -> int | None:
        return self.total_applies if self.is_pause else None

    @property
    def display_net_spend(self) -> float | None:
        return round(self.total_net_spend, 2) if self.is_pause else None


def aggregate_metrics(actions: Iterable[SpendWastageAction]) -> list[MetricRow]:
    """Count jobs and sum TG month-to-date totals per ``(action, reason)``.

    Expects input already collapsed to one record per ``(job_id, action)``.
    Only pauses contribute applies and spend. Pause rows come first, each
    action type ordered by reason.
    """
    rows: dict[tuple[str, str], MetricRow] = {}
    for action in actions:
        reason = classify(action)
        row = rows.setdefault((action.action, reason), MetricRow(action_type=action.action, reason=reason))
        row.job_count += 1
        if action.is_pause:
            row.total_applies += action.stats.TG.tg_mtd_applies or 0
            row.total_net_spend += action.stats.TG.tg_mtd_net_spend or 0.0
    return sorted(rows.values(), key=lambda row: (not row.is_pause, row.reason))


def compute_job_metrics(actions: Iterable[SpendWastageAction]) -> list[MetricRow]:
    return aggregate_metrics(dedupe_jobs(actions))
