from __future__ import annotations

import json

from cloudherder.assembler import (
    build_dashboard_body,
    dashboard_name,
    ingestion_metrics_section,
    render_dashboard_body,
    render_widgets_body,
)
from cloudherder.widgets import create_log_widget, create_section_header


def test_ingestion_section_sits_at_the_floor() -> None:
    header, metric = ingestion_metrics_section("pu-dev-herd", "us-east-1", 11)
    assert header.to_dict() == {
        "height": 1,
        "width": 24,
        "x": 0,
        "y": 11,
        "type": "text",
        "properties": {"markdown": "# Log Ingestion Metrics"},
    }
    assert (metric.height, metric.width, metric.x, metric.y) == (3, 24, 0, 12)
    assert metric.to_dict()["properties"] == {
        "metrics": [
            ["AWS/Logs", "IncomingLogEvents", "LogGroupName", "pu-dev-herd-log-grp"],
            ["...", "/aws/ecs/containerinsights/pu-dev-herd-ecs-cluster/performance"],
            ["...", "/aws/rds/instance/pu-dev-herd-db/postgresql"],
        ],
        "view": "singleValue",
        "region": "us-east-1",
        "stat": "Sum",
        "period": 3600,
        "title": "Log Group Events per Hour",
        "stacked": False,
    }


def test_body_appends_closing_section_after_stacked_widgets() -> None:
    sections = [
        [create_section_header("ALB"), create_log_widget("grp", "filter 1=1", "Logs", "us-east-1", y=1)],
        [create_section_header("RDS")],
    ]
    body = build_dashboard_body(sections, resource_prefix="pu-dev-herd", region="us-east-1")
    widgets = body["widgets"]
    assert list(body) == ["widgets"]
    assert [(w["type"], w["y"]) for w in widgets] == [
        ("text", 0),
        ("log", 1),
        ("text", 7),
        ("text", 8),
        ("metric", 9),
    ]
    assert widgets[3]["properties"]["markdown"] == "# Log Ingestion Metrics"


def test_body_without_sections_still_has_closing_section() -> None:
    widgets = build_dashboard_body([], resource_prefix="p", region="r")["widgets"]
    assert [(w["type"], w["y"]) for w in widgets] == [("text", 0), ("metric", 1)]


def test_rendered_body_is_compact_json() -> None:
    text = render_dashboard_body([[create_section_header("A")]], resource_prefix="p", region="r")
    assert ": " not in text and ", " not in text
    assert json.loads(text) == build_dashboard_body(
        [[create_section_header("A")]], resource_prefix="p", region="r"
    )


def test_widgets_body_keeps_authored_positions() -> None:
    text = render_widgets_body([create_section_header("SES", 10)])
    assert json.loads(text) == {
        "widgets": [
            {
                "height": 1,
                "width": 24,
                "x": 0,
                "y": 10,
                "type": "text",
                "properties": {"markdown": "# SES"},
            }
        ]
    }


def test_dashboard_name() -> None:
    assert dashboard_name("pu-dev-herd") == "pu-dev-herd-dashboard"
    assert dashboard_name("pu-dev-herd", "alb") == "pu-dev-herd-alb-dashboard"
