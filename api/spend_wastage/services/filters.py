from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Iterable, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

from spend_wastage.schemas.actions import SpendWastageAction
from spend_wastage.services.reasons import classify

FilterColumn = Literal["job_title", "job_ref", "job_group", "publisher", "action", "reason"]

FILTER_COLUMNS: tuple[FilterColumn, ...] = get_args(FilterColumn)

_COLUMN_GETTERS: dict[FilterColumn, Callable[[SpendWastageAction], str]] = {
    "job_title": lambda action: action.job_title,
    "job_ref": lambda action: action.job_ref_number,
    "job_group": lambda action: action.job_group_name,
    "publisher": lambda action: action.publisher_name,
    "action": lambda action: action.action,
    "reason": classify,
}


class FilterCriteria(BaseModel):
    """Accepted values per column; an empty list leaves the column unconstrained."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    job_title: list[str] = Field(default_factory=list)
    job_ref: list[str] = Field(default_factory=list)
    job_group: list[str] = Field(default_factory=list)
    publisher: list[str] = Field(default_factory=list)
    action: list[str] = Field(default_factory=list)
    reason: list[str] = Field(default_factory=list)

    def accepted(self, column: FilterColumn) -> list[str]:
        return getattr(self, column)

    def is_empty(self) -> bool:
        return not any(self.accepted(column) for column in FILTER_COLUMNS)


def column_value(action: SpendWastageAction, column: FilterColumn) -> str:
    return _COLUMN_GETTERS[column](action)


def matches(action: SpendWastageAction, criteria: FilterCriteria) -> bool:
    for column in FILTER_COLUMNS:
        accepted = criteria.accepted(column)
        if accepted and column_value(action, column) not in accepted:
            return False
    return True


def filter_actions(
    actions: Iterable[SpendWastageAction],
    criteria: FilterCriteria | None = None,
) -> list[SpendWastageAction]:
    rows = list(actions)
    if criteria is None or criteria.is_empty():
        return rows
    return [action for action in rows if matches(action, criteria)]


def distinct_column_values(actions: Iterable[SpendWastageAction]) -> dict[FilterColumn, list[str]]:
    """Unique values per column in first-seen order, as offered by the column menus."""
    rows = list(actions)
    values: dict[FilterColumn, list[str]] = {}
    for column in FILTER_COLUMNS:
        seen = dict.fromkeys(column_value(action, column) for action in rows)
        if column == "reason":
            seen.pop("", None)
        values[column] = list(seen)
    return values


@dataclass(frozen=True, slots=True)
class FilterState:
    """Multi-select state of one client's column menus.

    ``selected`` holds one ``(column, values)`` pair per column in
    ``FILTER_COLUMNS`` order, so states are hashable and cannot be edited.
    """

    selected: tuple[tuple[FilterColumn, tuple[str, ...]], ...] = tuple((column, ()) for column in FILTER_COLUMNS)

    def values(self, column: FilterColumn) -> tuple[str, ...]:
        for name, values in self.selected:
            if name == column:
                return values
        return ()

    def toggle(self, column: FilterColumn, value: str) -> FilterState:
        current = self.values(column)
        if value in current:
            updated = tuple(item for item in current if item != value)
        else:
            updated = (*current, value)
        return replace(
            self,
            selected=tuple((name, updated if name == column else self.values(name)) for name in FILTER_COLUMNS),
        )

    def cleared(self) -> FilterState:
        return FilterState()

    @property
    def has_active_filters(self) -> bool:
        return any(values for _, values in self.selected)

    def criteria(self) -> FilterCriteria:
        return FilterCriteria(**{column: list(self.values(column)) for column in FILTER_COLUMNS})
