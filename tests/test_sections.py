from __future__ import annotations

from cloudherder.assembler import build_dashboard_body
from cloudherder.sections import alb_section, bounce_queue_section, rds_section, ses_section
from cloudherder.stacking import stack_widget_sections
from cloudherder.widgets import LogQuery

REGION = "us-east-2"
PREFIX = "pu-dev-herd"


def test_alb_section_layout() -> None:
    panels = alb_section(PREFIX, "targetgroup/app/abc", "app/herd-alb/def", REGION)
    assert [(p.type, p.y, p.height, p.width) for p in panels] == [
        ("text", 0, 1, 24),
        ("metric", 1, 3, 24),
        ("metric", 7, 6, 24),
    ]
    assert panels[0].properties.markdown == f"# {PREFIX} ALB Metrics"
    health = panels[1].to_dict()["properties"]
    assert health["title"] == f"{PREFIX} Target Group Health"
    assert health["metrics"][0][3] == "targetgroup/app/abc"
    assert health["metrics"][-1][-1] == {"stat": "Average"}
    assert panels[2].properties.stat == "Minimum"


def test_alb_section_names_the_service() -> None:
    panels = alb_section(PREFIX, "tg", "lb", REGION, service_id="worker")
    assert panels[0].properties.markdown == f"# {PREFIX} Worker ALB Metrics"
    assert panels[1].to_dict()["properties"]["title"] == f"{PREFIX} worker Target Group Health"
    assert [(p.type, p.y) for p in panels] == [("text", 0), ("metric", 1), ("metric", 7)]


def test_rds_section_places_log_tables_below_metrics() -> None:
    queries = [
        LogQuery(name="Errors", log_group_name="/aws/rds/instance/x/postgresql", query="filter 1=1"),
        LogQuery(name="Locks", log_group_name="/aws/rds/instance/x/postgresql", query="filter 2=2"),
    ]
    panels = rds_section(PREFIX, "herd-db", REGION, queries)
    assert [(p.x, p.y, p.width) for p in panels[1:5]] == [(0, 1, 6), (6, 1, 6), (12, 1, 6), (18, 1, 6)]
    assert [p.properties.metrics[0][1] for p in panels[1:5]] == [
        "DatabaseConnections",
        "CPUUtilization",
        "WriteThroughput",
        "ReadThroughput",
    ]
    assert panels[1].properties.metrics[1] == ["...", "herd-db-replica"]
    assert panels[5].properties.title == "Network Traffic"
    assert [(p.type, p.y) for p in panels[6:]] == [("log", 13), ("log", 19)]
    assert panels[6].properties.title == "Errors Log Query Results"


def test_rds_section_without_queries_ends_with_network_panel() -> None:
    panels = rds_section(PREFIX, "herd-db", REGION)
    assert panels[-1].bottom == 13


def test_ses_section_embeds_bounce_queue_panels() -> None:
    bounce = bounce_queue_section(PREFIX, "herd-bounces", "herd-bounce-queue", REGION)
    panels = ses_section(PREFIX, "herd-config-set", REGION, bounce)
    assert panels[0].properties.markdown == f"# {PREFIX} SES Metrics"
    graph = panels[2].to_dict()["properties"]
    assert graph["legend"] == {"position": "right"}
    assert graph["liveData"] is False
    assert graph["yAxis"] == {"left": {"showUnits": True, "min": 0}}
    assert panels[3:] == bounce
    assert bounce[0].y == 10
    assert bounce[0].properties.markdown == f"# {PREFIX} Bounce Queue Metrics"
    assert [(p.x, p.y, p.width) for p in bounce[1:]] == [(0, 11, 12), (0, 14, 12), (12, 11, 12), (12, 14, 12)]
    expression = bounce[1].properties.metrics[0][0]
    assert expression["expression"] == "IF(m1, 100*(m2/m1))"
    assert expression["region"] == REGION


def test_component_sections_stack_without_overlap() -> None:
    sections = [
        alb_section(PREFIX, "tg", "lb", REGION),
        rds_section(PREFIX, "herd-db", REGION),
        ses_section(PREFIX, "cs", REGION, bounce_queue_section(PREFIX, "t", "q", REGION)),
    ]
    stacked = stack_widget_sections(sections)
    assert stacked.floor == 13 + 13 + 20
    starts = [0, 13, 26]
    headers = [p for p in stacked.panels if p.type == "text"]
    assert [h.y for h in headers][:3] == starts
    body = build_dashboard_body(sections, resource_prefix=PREFIX, region=REGION)
    assert body["widgets"][-1]["y"] == stacked.floor + 1
