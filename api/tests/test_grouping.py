from __future__ import annotations

from spend_wastage.schemas.actions import SpendWastageAction
from spend_wastage.services.dedupe import dedupe_client_jobs
from spend_wastage.services.filters import FilterCriteria
from spend_wastage.services.grouping import (
    build_client_views,
    group_by_client,
    sort_actions,
    summarize_client,
)
from spend_wastage.services.reasons import CPA_ABOVE_TARGET_REASON, NO_APPLIES_REASON


def test_group_by_client_preserves_first_seen_client_order() -> None:
    actions = [
        _action(job_id="1", client_name="Zeta"),
        _action(job_id="2", client_name="Alpha"),
        _action(job_id="3", client_name="Zeta"),
        _action(job_id="4", client_name="Mid"),
    ]

    groups = group_by_client(actions)

    assert list(groups) == ["Zeta", "Alpha", "Mid"]
    assert [action.job_id for action in groups["Zeta"]] == ["1", "3"]


def test_group_by_client_uses_unknown_client_for_missing_names() -> None:
    groups = group_by_client([_action(job_id="1", client_name=None), _action(job_id="2", client_name="")])

    assert list(groups) == ["Unknown Client"]
    assert len(groups["Unknown Client"]) == 2
    assert list(group_by_client([_action(job_id="1", client_name=None)], unknown_client="n/a")) == ["n/a"]


def test_group_by_client_keeps_latest_record_per_job_and_action() -> None:
    actions = [
        _action(job_id="1", pause_date="2024-01-01", placement_id="pl-old"),
        _action(job_id="2", pause_date="2024-01-02"),
        _action(job_id="1", pause_date="2024-01-05", placement_id="pl-new"),
    ]

    groups = group_by_client(actions)

    assert [(action.job_id, action.placement_id) for action in groups["Acme"]] == [("1", "pl-new"), ("2", "pl-1")]


def test_sort_puts_resumptions_first_then_most_recent() -> None:
    resume = _action(job_id="r", action="RESUME_JOB_PUBLISHER", pause_date="2024-02-01")
    recent_pause = _action(job_id="p1", pause_date="2024-03-01")
    old_pause = _action(job_id="p2", pause_date="2024-01-01")

    assert sort_actions([recent_pause, old_pause, resume]) == [resume, recent_pause, old_pause]
    assert sort_actions([resume, recent_pause, old_pause]) == [resume, recent_pause, old_pause]


def test_sort_is_stable_for_equal_type_and_date() -> None:
    first = _action(job_id="x", pause_date="2024-01-01")
    second = _action(job_id="y", pause_date="2024-01-01")
    third = _action(job_id="z", pause_date="2024-01-01")

    assert sort_actions([second, first, third]) == [second, first, third]


def test_summarize_client_counts_actions_groups_and_publishers() -> None:
    summary = summarize_client(
        [
            _action(job_id="1", job_group_id="g1", publisher_name="Indeed", applies=0),
            _action(job_id="2", job_group_id="g2", publisher_name="Monster", applies=1, spend=90.0),
            _action(job_id="3", job_group_id="g1", publisher_name="Indeed", action="RESUME_JOB_PUBLISHER"),
        ]
    )

    assert summary.paused_count == 2
    assert summary.resumed_count == 1
    assert summary.job_group_count == 2
    assert summary.publisher_label == "Indeed, Monster"
    assert list(summary.reasons) == [NO_APPLIES_REASON, CPA_ABOVE_TARGET_REASON]


def test_build_client_views_filters_rows_but_summarizes_all_client_actions() -> None:
    actions = [
        _action(job_id="1", publisher_name="Indeed", pause_date="2024-01-01"),
        _action(job_id="2", publisher_name="Monster", pause_date="2024-01-03"),
        _action(job_id="3", publisher_name="Indeed", pause_date="2024-01-02", action="RESUME_JOB_PUBLISHER"),
        _action(job_id="4", client_name="Globex", publisher_name="Monster"),
    ]

    views = build_client_views(actions, FilterCriteria(publisher=["Indeed"]))

    assert [view.client_name for view in views] == ["Acme", "Globex"]
    acme = views[0]
    assert acme.summary.paused_count == 2
    assert [row.action.job_id for row in acme.rows] == ["3", "1"]
    assert acme.rows[0].reason == ""
    assert acme.column_values["publisher"] == ["Indeed", "Monster"]
    assert views[1].rows == []


def test_build_client_views_applies_client_specific_filters() -> None:
    actions = [
        _action(job_id="1", publisher_name="Indeed"),
        _action(job_id="2", client_name="Globex", publisher_name="Indeed"),
        _action(job_id="3", client_name="Globex", publisher_name="Monster"),
    ]

    views = build_client_views(actions, filters_by_client={"Globex": FilterCriteria(publisher=["Monster"])})

    assert [row.action.job_id for row in views[0].rows] == ["1"]
    assert [row.action.job_id for row in views[1].rows] == ["3"]


def test_build_client_views_rows_have_unique_display_keys() -> None:
    actions = [
        _action(job_id="1", pause_date="2024-01-01"),
        _action(job_id="1", action="RESUME_JOB_PUBLISHER", pause_date="2024-01-01"),
        _action(job_id="1", pause_date="2024-01-01", placement_id="pl-dup"),
    ]

    rows = build_client_views(actions)[0].rows

    keys = [row.display_key for row in rows]
    assert len(keys) == len(set(keys)) == 2
    assert keys[0].startswith("1-pl-1-RESUME_JOB_PUBLISHER-2024-01-01")


def test_build_client_views_handles_empty_input() -> None:
    assert build_client_views([]) == []
    assert group_by_client([]) == {}


def _action(
    *,
    job_id: str,
    action: str = "PAUSE_JOB_PUBLISHER",
    pause_date: str = "2024-01-01",
    placement_id: str = "pl-1",
    client_name: str | None = "Acme",
    job_group_id: str = "g1",
    publisher_name: str = "Indeed",
    applies: int = 5,
    spend: float = 10.0,
) -> SpendWastageAction:
    return SpendWastageAction.model_validate(
        {
            "job_id": job_id,
            "placement_id": placement_id,
            "action": action,
            "pause_date": pause_date,
            "client_name": client_name,
            "job_group_id": job_group_id,
            "publisher_name": publisher_name,
            "rules": {"application_per_dollar": 0.05},
            "stats": {"TG": {"tg_mtd_applies": applies, "tg_mtd_net_spend": spend}},
        }
    )


def test_group_by_client_dedupes_with_the_configured_unknown_client_label() -> None:
    unnamed = _action(job_id="1", client_name=None, pause_date="2024-01-01")
    labelled = _action(job_id="1", client_name="No Client", pause_date="2024-01-03")

    groups = group_by_client([unnamed, labelled], unknown_client="No Client")

    assert groups == {"No Client": dedupe_client_jobs([unnamed, labelled], unknown_client="No Client")}
    assert groups["No Client"] == [labelled]
