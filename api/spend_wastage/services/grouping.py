from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from spend_wastage.schemas.actions import SpendWastageAction
from spend_wastage.services.dedupe import UNKNOWN_CLIENT, client_name_of, dedupe_client_jobs
from spend_wastage.services.filters import FilterColumn, FilterCriteria, distinct_column_values, filter_actions
from spend_wastage.services.reasons import ReasonSummary, classify, summarize_reasons

ClientGroups = dict[str, list[SpendWastageAction]]


@dataclass(slots=True)
class ClientSummary:
    resumed_count: int
    paused_count: int
    job_group_count: int
    publisher_names: list[str]
    reasons: dict[str, ReasonSummary]

    @property
    def publisher_label(self) -> str:
        return ", ".join(self.publisher_names)


@dataclass(frozen=True, slots=True)
class ActionRow:
    action: SpendWastageAction
    reason: str

    @property
    def display_key(self) -> str:
        return self.action.display_key


@dataclass(slots=True)
class ClientView:
    client_name: str
    summary: ClientSummary
    rows: list[ActionRow]
    column_values: dict[FilterColumn, list[str]] = field(default_factory=dict)


def group_by_client(
    actions: Iterable[SpendWastageAction],
    *,
    unknown_client: str = UNKNOWN_CLIENT,
) -> ClientGroups:
    """Partition actions by client in first-seen client order.

    Within a client only one record per ``(job_id, action)`` survives; a
    strictly later ``pause_date`` replaces the kept record in place.
    """
    groups: ClientGroups = {}
    for action in dedupe_client_jobs(actions, unknown_client=unknown_client):
        groups.setdefault(client_name_of(action, default=unknown_client), []).append(action)
    return groups


def sort_key(action: SpendWastageAction) -> tuple[int, float]:
    return (0 if action.is_resume else 1, -action.pause_date.timestamp())


def sort_actions(actions: Iterable[SpendWastageAction]) -> list[SpendWastageAction]:
    """Resumptions first, then most recent ``pause_date`` first; stable on ties."""
    return sorted(actions, key=sort_key)


def summarize_client(actions: Iterable[SpendWastageAction]) -> ClientSummary:
    rows = list(actions)
    return ClientSummary(
        resumed_count=sum(1 for action in rows if action.is_resume),
        paused_count=sum(1 for action in rows if action.is_pause),
        job_group_count=len({action.job_group_id for action in rows}),
        publisher_names=list(dict.fromkeys(action.publisher_name for action in rows)),
        reasons=summarize_reasons(rows),
    )


def build_client_views(
    actions: Iterable[SpendWastageAction],
    criteria: FilterCriteria | None = None,
    *,
    filters_by_client: Mapping[str, FilterCriteria] | None = None,
    unknown_client: str = UNKNOWN_CLIENT,
) -> list[ClientView]:
    views: list[ClientView] = []
    for client_name, client_actions in group_by_client(actions, unknown_client=unknown_client).items():
        client_criteria = (filters_by_client or {}).get(client_name, criteria)
        visible = sort_actions(filter_actions(client_actions, client_criteria))
        views.append(
            ClientView(
                client_name=client_name,
                summary=summarize_client(client_actions),
                rows=[ActionRow(action=action, reason=classify(action)) for action in visible],
                column_values=distinct_column_values(client_actions),
            )
        )
    return views
