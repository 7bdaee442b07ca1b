from __future__ import annotations

from functools import partial
from typing import Callable, Hashable, Iterable

from spend_wastage.schemas.actions import SpendWastageAction

DedupeKey = Callable[[SpendWastageAction], Hashable]
TieBreak = Callable[[SpendWastageAction, SpendWastageAction], bool]

UNKNOWN_CLIENT = "Unknown Client"


def client_name_of(action: SpendWastageAction, *, default: str = UNKNOWN_CLIENT) -> str:
    return action.client_name or default


def job_action_key(action: SpendWastageAction) -> tuple[str, str]:
    return (action.job_id, action.action)


def client_job_action_key(
    action: SpendWastageAction,
    *,
    unknown_client: str = UNKNOWN_CLIENT,
) -> tuple[str, str, str]:
    return (client_name_of(action, default=unknown_client), action.job_id, action.action)


def later_pause_date_wins(incoming: SpendWastageAction, existing: SpendWastageAction) -> bool:
    return incoming.pause_date > existing.pause_date


def deduplicate(
    actions: Iterable[SpendWastageAction],
    key: DedupeKey = job_action_key,
    tie_break: TieBreak = later_pause_date_wins,
) -> list[SpendWastageAction]:
    """Collapse records sharing ``key`` into one, keeping first-seen positions.

    ``tie_break(incoming, existing)`` decides whether a colliding record
    replaces the one already kept. The replacement takes over the slot of the
    record it replaces, so the output order is the order in which keys were
    first seen.
    """
    kept: dict[Hashable, SpendWastageAction] = {}
    for action in actions:
        action_key = key(action)
        existing = kept.get(action_key)
        if existing is None or tie_break(action, existing):
            kept[action_key] = action
    return list(kept.values())


def dedupe_jobs(actions: Iterable[SpendWastageAction]) -> list[SpendWastageAction]:
    return deduplicate(actions, key=job_action_key)


def dedupe_client_jobs(
    actions: Iterable[SpendWastageAction],
    *,
    unknown_client: str = UNKNOWN_CLIENT,
) -> list[SpendWastageAction]:
    return deduplicate(actions, key=partial(client_job_action_key, unknown_client=unknown_client))
