#!/usr/bin/env python3
import os

import aws_cdk as cdk

from cloudherder.config import DeploymentConfig
from stacks.monitoring_stack import (
    MonitoringDashboardStack,
    build_component_sections,
    component_dashboards_enabled,
)

app = cdk.App()

config = DeploymentConfig.from_env()
components, log_queries = build_component_sections(config)

stack_name = os.getenv("CDK_STACK_NAME", "CloudherderMonitoringStack")

MonitoringDashboardStack(
    app,
    stack_name,
    config=config,
    sections=list(components.values()),
    log_queries=log_queries,
    component_dashboards=components if component_dashboards_enabled() else None,
    env=cdk.Environment(
        account=os.getenv("CDK_DEFAULT_ACCOUNT"),
        region=config.region,
    ),
)

app.synth()
