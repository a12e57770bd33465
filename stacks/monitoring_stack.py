import os
from typing import Mapping, Sequence

from aws_cdk import (
    CfnOutput,
    Stack,
    aws_cloudwatch as cloudwatch,
    aws_logs as logs,
)
from constructs import Construct

from cloudherder.assembler import dashboard_name, render_dashboard_body, render_widgets_body
from cloudherder.config import DeploymentConfig, capitalize_word
from cloudherder.queries import QUERY_FOOTER, create_saved_query_string
from cloudherder.sections import alb_section, bounce_queue_section, rds_section, ses_section
from cloudherder.widgets import LogQuery, Panel

PSQL_ERROR_QUERY = (
    "filter @message not like /:LOG:/\n"
    "    | parse @message '* * *:*(*):*@*:[*]:*: *' as "
    "date,time,timezone,sourceIp,sourcePort,username,database,pid,level,message\n"
    "    | filter level not in ['LOG']\n"
    "    | display @logStream,@timestamp,sourceIp,username,database,pid,level,message\n"
    f"    {QUERY_FOOTER}"
)

COMPONENT_DASHBOARDS_ENV = "CLOUDHERDER_COMPONENT_DASHBOARDS"


def default_rds_log_queries(resource_prefix: str) -> list[LogQuery]:
    """Postgres error lines from the instance log group, LOG-level noise dropped."""
    return [
        LogQuery(
            name="psql-error-query",
            log_group_name=f"/aws/rds/instance/{resource_prefix}-db/postgresql",
            query=PSQL_ERROR_QUERY,
        )
    ]


def _env(environ: Mapping[str, str], name: str) -> str:
    return (environ.get(name) or "").strip()


def _truthy(raw: str | None) -> bool:
    return str(raw or "").strip().lower() in {"1", "true", "yes", "on"}


def component_dashboards_enabled(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return _truthy(env.get(COMPONENT_DASHBOARDS_ENV))


def build_component_sections(
    config: DeploymentConfig,
    environ: Mapping[str, str] | None = None,
) -> tuple[dict[str, list[Panel]], list[LogQuery]]:
    """Dashboard sections keyed by component ("alb", "rds", "ses").

    ALB: CLOUDHERDER_ALB_TARGET_GROUP and CLOUDHERDER_ALB_LOADBALANCER, with
    CLOUDHERDER_ALB_SERVICE_ID naming the service behind the target group.
    RDS: CLOUDHERDER_RDS_INSTANCE. SES: CLOUDHERDER_SES_CONFIG_SET, with
    CLOUDHERDER_BOUNCE_SNS_TOPIC and CLOUDHERDER_BOUNCE_SQS_QUEUE adding the
    bounce queue panels. Keys are in dashboard order.
    """
    env = os.environ if environ is None else environ
    prefix = config.resource_prefix()
    components: dict[str, list[Panel]] = {}
    log_queries: list[LogQuery] = []

    target_group = _env(env, "CLOUDHERDER_ALB_TARGET_GROUP")
    loadbalancer = _env(env, "CLOUDHERDER_ALB_LOADBALANCER")
    if bool(target_group) != bool(loadbalancer):
        raise ValueError(
            "CLOUDHERDER_ALB_TARGET_GROUP and CLOUDHERDER_ALB_LOADBALANCER must be set together"
        )
    if target_group:
        components["alb"] = alb_section(
            prefix,
            target_group,
            loadbalancer,
            config.region,
            service_id=_env(env, "CLOUDHERDER_ALB_SERVICE_ID") or None,
        )

    rds_instance = _env(env, "CLOUDHERDER_RDS_INSTANCE")
    if rds_instance:
        rds_queries = default_rds_log_queries(prefix)
        components["rds"] = rds_section(prefix, rds_instance, config.region, rds_queries)
        log_queries.extend(rds_queries)

    config_set = _env(env, "CLOUDHERDER_SES_CONFIG_SET")
    sns_topic = _env(env, "CLOUDHERDER_BOUNCE_SNS_TOPIC")
    sqs_queue = _env(env, "CLOUDHERDER_BOUNCE_SQS_QUEUE")
    if bool(sns_topic) != bool(sqs_queue):
        raise ValueError(
            "CLOUDHERDER_BOUNCE_SNS_TOPIC and CLOUDHERDER_BOUNCE_SQS_QUEUE must be set together"
        )
    if (sns_topic or sqs_queue) and not config_set:
        raise ValueError("bounce queue panels require CLOUDHERDER_SES_CONFIG_SET")
    if config_set:
        bounce_panels = (
            bounce_queue_section(prefix, sns_topic, sqs_queue, config.region)
            if sns_topic
            else []
        )
        components["ses"] = ses_section(prefix, config_set, config.region, bounce_panels)

    return components, log_queries


def build_sections(
    config: DeploymentConfig,
    environ: Mapping[str, str] | None = None,
) -> tuple[list[list[Panel]], list[LogQuery]]:
    """Enabled component sections in dashboard order, plus their saved queries."""
    components, log_queries = build_component_sections(config, environ)
    return list(components.values()), log_queries


class MonitoringDashboardStack(Stack):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        config: DeploymentConfig,
        sections: Sequence[Sequence[Panel]],
        log_queries: Sequence[LogQuery] = (),
        component_dashboards: Mapping[str, Sequence[Panel]] | None = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        resource_prefix = config.resource_prefix()

        for i, query in enumerate(log_queries):
            logs.CfnQueryDefinition(
                self,
                f"LogQuery{i}",
                name=query.name,
                log_group_names=[query.log_group_name],
                query_string=create_saved_query_string(query.query),
            )

        dashboard = cloudwatch.CfnDashboard(
            self,
            "CwStackDashboard",
            dashboard_name=dashboard_name(resource_prefix),
            dashboard_body=render_dashboard_body(
                sections,
                resource_prefix=resource_prefix,
                region=config.region,
            ),
        )

        CfnOutput(
            self,
            "DashboardName",
            value=dashboard.ref,
            description="CloudWatch dashboard combining every enabled component section.",
        )

        # Section-local coordinates are already valid for a dashboard of one section.
        for component, panels in (component_dashboards or {}).items():
            component_dashboard = cloudwatch.CfnDashboard(
                self,
                f"{capitalize_word(component)}CwDashboard",
                dashboard_name=dashboard_name(resource_prefix, component),
                dashboard_body=render_widgets_body(panels),
            )
            CfnOutput(
                self,
                f"{capitalize_word(component)}DashboardName",
                value=component_dashboard.ref,
                description=f"CloudWatch dashboard for the {component} component alone.",
            )
