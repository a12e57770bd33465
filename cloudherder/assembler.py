from __future__ import annotations

import json
from typing import Any, Iterable, Sequence

from .stacking import stack_widget_sections
from .widgets import MetricProperties, Panel, create_section_header

INGESTION_SECTION_TITLE = "Log Ingestion Metrics"


def ingestion_log_group_names(resource_prefix: str) -> list[str]:
    return [
        f"{resource_prefix}-log-grp",
        f"/aws/ecs/containerinsights/{resource_prefix}-ecs-cluster/performance",
        f"/aws/rds/instance/{resource_prefix}-db/postgresql",
    ]


def ingestion_metrics_section(resource_prefix: str, region: str, floor: int) -> list[Panel]:
    """Closing section: incoming log events for the app, ECS and RDS log groups."""
    app_group, ecs_group, rds_group = ingestion_log_group_names(resource_prefix)
    return [
        create_section_header(INGESTION_SECTION_TITLE, floor),
        Panel(
            height=3,
            width=24,
            x=0,
            y=floor + 1,
            properties=MetricProperties(
                metrics=[
                    ["AWS/Logs", "IncomingLogEvents", "LogGroupName", app_group],
                    ["...", ecs_group],
                    ["...", rds_group],
                ],
                view="singleValue",
                stacked=False,
                region=region,
                stat="Sum",
                period=3600,
                title="Log Group Events per Hour",
            ),
        ),
    ]


def _widgets_document(panels: Iterable[Panel]) -> dict[str, Any]:
    return {"widgets": [panel.to_dict() for panel in panels]}


def build_dashboard_body(
    sections: Sequence[Sequence[Panel]],
    *,
    resource_prefix: str,
    region: str,
) -> dict[str, Any]:
    stack = stack_widget_sections(sections)
    closing = ingestion_metrics_section(resource_prefix, region, stack.floor)
    return _widgets_document([*stack.panels, *closing])


def dump_document(document: dict[str, Any]) -> str:
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)


def render_dashboard_body(
    sections: Sequence[Sequence[Panel]],
    *,
    resource_prefix: str,
    region: str,
) -> str:
    return dump_document(build_dashboard_body(sections, resource_prefix=resource_prefix, region=region))


def render_widgets_body(panels: Iterable[Panel]) -> str:
    """Body for a single component's own dashboard, panels placed as authored."""
    return dump_document(_widgets_document(panels))


def dashboard_name(resource_prefix: str, suffix: str | None = None) -> str:
    if suffix:
        return f"{resource_prefix}-{suffix}-dashboard"
    return f"{resource_prefix}-dashboard"
