from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from spend_wastage.schemas.actions import SpendWastageAction

NO_APPLIES_REASON = "CTA for job is low, No Applies"
CPA_ABOVE_TARGET_REASON = "Trading_Group_Pub_CPA is greater than JG_Pub_CPA"
UNKNOWN_REASON = "Unknown reason"
NO_REASON = ""

ReasonTag = Literal[
    "",
    "CTA for job is low, No Applies",
    "Trading_Group_Pub_CPA is greater than JG_Pub_CPA",
    "Unknown reason",
]

REASON_TAGS: tuple[str, ...] = (NO_REASON, NO_APPLIES_REASON, CPA_ABOVE_TARGET_REASON, UNKNOWN_REASON)


@dataclass(frozen=True, slots=True)
class CpaBreakdown:
    trading_group_cpa: float
    jg_cpa: float | None


@dataclass(slots=True)
class ReasonSummary:
    reason: str
    count: int = 0
    trading_group_cpa: float = 0.0
    jg_cpa: float = 0.0


def classify(action: SpendWastageAction) -> ReasonTag:
    """Attribute a pause to the first rule it trips.

    Resumptions carry no reason. A pause with no month-to-date applies is a
    call-to-action problem; otherwise the realized trading group CPA is
    compared against the target CPA implied by ``application_per_dollar``.
    Anything left over is reported as unknown.
    """
    if not action.is_pause:
        return NO_REASON

    applies = _applies(action)
    if applies == 0:
        return NO_APPLIES_REASON

    target_cpa = _target_cpa(action)
    if target_cpa is not None and (_net_spend(action) / applies) > target_cpa:
        return CPA_ABOVE_TARGET_REASON
    return UNKNOWN_REASON


def cpa_breakdown(action: SpendWastageAction) -> CpaBreakdown:
    applies = _applies(action)
    trading_group_cpa = _net_spend(action) / applies if applies > 0 else 0.0
    return CpaBreakdown(trading_group_cpa=trading_group_cpa, jg_cpa=_target_cpa(action))


def summarize_reasons(actions: Iterable[SpendWastageAction]) -> dict[str, ReasonSummary]:
    summaries: dict[str, ReasonSummary] = {}
    for action in actions:
        reason = classify(action)
        if not reason:
            continue
        summary = summaries.setdefault(reason, ReasonSummary(reason=reason))
        summary.count += 1
        if reason == CPA_ABOVE_TARGET_REASON:
            # Last contributing action wins.
            breakdown = cpa_breakdown(action)
            summary.trading_group_cpa = breakdown.trading_group_cpa
            summary.jg_cpa = breakdown.jg_cpa or 0.0
    return summaries


def _applies(action: SpendWastageAction) -> int:
    return action.stats.TG.tg_mtd_applies or 0


def _net_spend(action: SpendWastageAction) -> float:
    return action.stats.TG.tg_mtd_net_spend or 0.0


def _target_cpa(action: SpendWastageAction) -> float | None:
    application_per_dollar = action.rules.application_per_dollar
    if application_per_dollar is None or application_per_dollar <= 0:
        return None
    return 1 / application_per_dollar
