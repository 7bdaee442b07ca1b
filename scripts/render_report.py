#!/usr/bin/env python3
"""Render spend wastage metrics or the full per-client report from a JSON export."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from spend_wastage.schemas.actions import parse_actions
from spend_wastage.schemas.reports import SpendWastageReportOut
from spend_wastage.services.filters import FilterCriteria
from spend_wastage.services.metrics import MetricRow, compute_job_metrics
from spend_wastage.services.report import build_report


def render_metrics_table(rows: list[MetricRow]) -> str:
    header = ("Action", "Reason", "Jobs", "Applies", "Net Spend")
    body = [
        (
            row.action_type,
            row.reason or "-",
            str(row.job_count),
            "-" if row.display_applies is None else str(row.display_applies),
            "-" if row.display_net_spend is None else f"{row.display_net_spend:.2f}",
        )
        for row in rows
    ]
    widths = [max(len(line[index]) for line in [header, *body]) for index in range(len(header))]
    lines = ["  ".join(cell.ljust(widths[index]) for index, cell in enumerate(line)).rstrip() for line in [header, *body]]
    return "\n".join(lines)


def main() -> None:
    parser = argparse.ArgumentParser(description="Summarize spend wastage actions exported as JSON.")
    parser.add_argument("input", type=Path, help="JSON file holding a list of spend wastage actions")
    parser.add_argument(
        "--format",
        choices=["metrics", "report"],
        default="metrics",
        help="metrics: total job metrics table; report: per-client report as JSON",
    )
    parser.add_argument("--publisher", action="append", default=[], help="Only show rows for this publisher")
    parser.add_argument("--reason", action="append", default=[], help="Only show rows with this reason")
    args = parser.parse_args()

    actions = parse_actions(json.loads(args.input.read_text(encoding="utf-8")))

    if args.format == "metrics":
        print(render_metrics_table(compute_job_metrics(actions)))
        return

    criteria = FilterCriteria(publisher=args.publisher, reason=args.reason)
    report = SpendWastageReportOut.from_report(build_report(actions, criteria))
    print(report.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
