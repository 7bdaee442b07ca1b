from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator

ActionType = Literal["PAUSE_JOB_PUBLISHER", "RESUME_JOB_PUBLISHER"]

PAUSE_JOB_PUBLISHER: ActionType = "PAUSE_JOB_PUBLISHER"
RESUME_JOB_PUBLISHER: ActionType = "RESUME_JOB_PUBLISHER"


class Rules(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    application_per_dollar: float | None = None
    application_ratio: float | None = None
    expected_applications: float | None = None
    spend_ratio: float | None = None


class TradingGroupStats(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    tg_mtd_net_spend: float | None = Field(default=None, ge=0)
    tg_mtd_applies: int | None = Field(default=None, ge=0)
    active_days: int | None = Field(default=None, ge=0)
    tg_mtd_clicks: int | None = None
    tgp_applies: float | None = None
    tgp_net_spend: float | None = None
    tgp_Clicks: float | None = None
    tg_moving_avg_applies: float | None = None
    tg_moving_avg_cpa: float | None = None
    tg_moving_avg_spend: float | None = None


class JobGroupStats(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    cpa_goal: float | None = None
    jg_pub_cum_applies: float | None = None
    jg_pub_cum_clicks: float | None = None
    jg_pub_cum_net_spend: float | None = None
    jg_pub_moving_avg_applies: float | None = None
    jg_pub_moving_avg_cpa: float | None = None
    jg_pub_moving_avg_spend: float | None = None


class JobStats(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    job_id: list[str | int] = Field(default_factory=list)
    job_applies: list[float] = Field(default_factory=list)
    job_clicks: list[float] = Field(default_factory=list)
    job_net_spend: list[float] = Field(default_factory=list)


class Stats(BaseModel):
    model_config = ConfigDict(frozen=True)

    TG: TradingGroupStats = Field(default_factory=TradingGroupStats)
    JG: JobGroupStats = Field(default_factory=JobGroupStats)
    JOB: JobStats = Field(default_factory=JobStats)


class Params(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    active_days_threshold: float | None = None
    application_threshold: float | None = None
    cpa_threshold: float | None = None
    spend_threshold: float | None = None


class SpendWastageAction(BaseModel):
    """One publisher-level pause/resume event as delivered by the upstream API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    job_id: str
    placement_id: str
    action: ActionType
    pause_date: datetime

    job_title: str = ""
    job_ref_number: str = ""
    job_group_id: str = ""
    job_group_name: str = ""
    job_category: str = ""
    job_city: str = ""
    job_state: str = ""
    job_country: str = ""
    publisher_name: str = ""
    client_id: str = ""
    client_name: str | None = None
    trading_group_id: str | None = None
    agency_id: str | None = None
    bid_type: str | None = None

    rules: Rules = Field(default_factory=Rules, validation_alias=AliasChoices("rules", "Rules"))
    stats: Stats = Field(default_factory=Stats)
    params: Params | None = None

    @field_validator("job_id", "placement_id", "client_id", "trading_group_id", "job_group_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        # Upstream emits some identifiers as integers.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("pause_date")
    @classmethod
    def _normalize_pause_date(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def is_pause(self) -> bool:
        return self.action == PAUSE_JOB_PUBLISHER

    @property
    def is_resume(self) -> bool:
        return self.action == RESUME_JOB_PUBLISHER

    @property
    def display_key(self) -> str:
        return f"{self.job_id}-{self.placement_id}-{self.action}-{self.pause_date.isoformat()}"


_ACTION_LIST_ADAPTER = TypeAdapter(list[SpendWastageAction])


def parse_actions(payload: Any) -> list[SpendWastageAction]:
    """Validate a raw JSON list into actions; raises ``pydantic.ValidationError``."""
    return _ACTION_LIST_ADAPTER.validate_python(payload)
