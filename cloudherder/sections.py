"""Dashboard sections for the resources cloudherder provisions.

Each builder returns panels authored at section-local coordinates (header at
y=0) so the result can be handed straight to ``stack_widget_sections``.
"""

from __future__ import annotations

from typing import Sequence

from .config import capitalize_word
from .widgets import LogQuery, Panel, create_log_widgets, create_section_header, metric_widget

_Y_AXIS_FROM_ZERO = {"left": {"showUnits": True, "min": 0}}


def alb_section(
    resource_prefix: str,
    target_group_id: str,
    loadbalancer_id: str,
    region: str,
    service_id: str | None = None,
) -> list[Panel]:
    header = f"{resource_prefix} ALB Metrics"
    health_title = f"{resource_prefix} Target Group Health"
    if service_id:
        header = f"{resource_prefix} {capitalize_word(service_id)} ALB Metrics"
        health_title = f"{resource_prefix} {service_id} Target Group Health"
    return [
        create_section_header(header),
        metric_widget(
            [
                [
                    "AWS/ApplicationELB",
                    "RequestCount",
                    "TargetGroup",
                    target_group_id,
                    "LoadBalancer",
                    loadbalancer_id,
                ],
                [".", "HTTPCode_Target_2XX_Count", ".", ".", ".", "."],
                [".", "HTTPCode_Target_3XX_Count", ".", ".", ".", "."],
                [".", "HTTPCode_Target_4XX_Count", ".", ".", ".", "."],
                [".", "TargetResponseTime", ".", ".", ".", ".", {"stat": "Average"}],
            ],
            x=0,
            y=1,
            width=24,
            height=3,
            view="singleValue",
            region=region,
            stat="Sum",
            period=900,
            title=health_title,
        ),
        metric_widget(
            [
                [
                    "AWS/ApplicationELB",
                    "HealthyHostCount",
                    "TargetGroup",
                    target_group_id,
                    "LoadBalancer",
                    loadbalancer_id,
                ]
            ],
            x=0,
            y=7,
            width=24,
            height=6,
            view="timeSeries",
            stacked=False,
            region=region,
            stat="Minimum",
            period=300,
        ),
    ]


def _rds_instance_metric(metric_name: str, instance_name: str) -> list[list[object]]:
    return [
        ["AWS/RDS", metric_name, "DBInstanceIdentifier", instance_name],
        ["...", f"{instance_name}-replica"],
    ]


def rds_section(
    resource_prefix: str,
    instance_name: str,
    region: str,
    log_queries: Sequence[LogQuery] = (),
) -> list[Panel]:
    """Primary and replica instance metrics, then one log table per query."""
    throughput = [
        (6, "CPUUtilization"),
        (12, "WriteThroughput"),
        (18, "ReadThroughput"),
    ]
    return [
        create_section_header(f"{resource_prefix} RDS Metrics"),
        metric_widget(
            _rds_instance_metric("DatabaseConnections", instance_name),
            x=0,
            y=1,
            width=6,
            height=6,
            view="timeSeries",
            region=region,
            title="Database Connections",
            stat="Sum",
            period=900,
            stacked=False,
        ),
        *[
            metric_widget(
                _rds_instance_metric(metric_name, instance_name),
                x=x,
                y=1,
                width=6,
                height=6,
                view="timeSeries",
                stacked=False,
                region=region,
                stat="Average",
                period=300,
            )
            for x, metric_name in throughput
        ],
        metric_widget(
            [
                ["AWS/RDS", "NetworkReceiveThroughput", "DBInstanceIdentifier", instance_name],
                ["...", f"{instance_name}-replica", {"color": "#2ca02c"}],
                [".", "NetworkTransmitThroughput", ".", instance_name, {"color": "#ff7f0e"}],
                ["...", f"{instance_name}-replica"],
            ],
            x=0,
            y=7,
            width=24,
            height=6,
            view="timeSeries",
            region=region,
            title="Network Traffic",
            stat="Sum",
            period=3600,
            stacked=False,
        ),
        *create_log_widgets(log_queries, 13, region),
    ]


def _ses_send_metrics(config_set_name: str) -> list[list[object]]:
    return [
        ["AWS/SES", "Send", "X-SES-CONFIGURATION-SET", config_set_name, {"label": "Sent"}],
        [".", "Delivery", ".", ".", {"label": "Delivered"}],
        [".", "Bounce", ".", ".", {"label": "Bounced"}],
        [".", "Reject", ".", ".", {"label": "Rejected"}],
        [".", "Complaint", ".", ".", {"label": "Complaint"}],
    ]


def ses_section(
    resource_prefix: str,
    config_set_name: str,
    region: str,
    bounce_queue_panels: Sequence[Panel] = (),
) -> list[Panel]:
    return [
        create_section_header(f"{resource_prefix} SES Metrics"),
        metric_widget(
            _ses_send_metrics(config_set_name),
            x=0,
            y=1,
            width=24,
            height=3,
            view="singleValue",
            region=region,
            stat="Sum",
            period=3600,
            title=f"{config_set_name} SES Config Set Send Statistics",
        ),
        metric_widget(
            _ses_send_metrics(config_set_name),
            x=0,
            y=4,
            width=24,
            height=6,
            view="timeSeries",
            region=region,
            stat="Sum",
            period=300,
            title=f"{config_set_name} SES Config Set Send Statistics",
            stacked=False,
            y_axis=_Y_AXIS_FROM_ZERO,
            legend={"position": "right"},
            live_data=False,
        ),
        *bounce_queue_panels,
    ]


def bounce_queue_section(
    resource_prefix: str,
    sns_topic_name: str,
    sqs_queue_name: str,
    region: str,
) -> list[Panel]:
    """SNS notification and SQS queue panels for the SES bounce queue.

    Authored to sit under the SES send panels (header at y=10), so it is
    normally passed to ``ses_section`` rather than stacked on its own.
    """
    return [
        create_section_header(f"{resource_prefix} Bounce Queue Metrics", 10),
        metric_widget(
            [
                [
                    {
                        "expression": "IF(m1, 100*(m2/m1))",
                        "label": "NotificationFailureRate",
                        "id": "e1",
                        "region": region,
                    }
                ],
                ["AWS/SNS", "NumberOfNotificationsPublished", "TopicName", sns_topic_name, {"id": "m1"}],
                [".", "NumberOfMessagesFailed", ".", ".", {"id": "m2"}],
            ],
            x=0,
            y=11,
            width=12,
            height=3,
            view="singleValue",
            region=region,
            stat="Sum",
            period=900,
            title="SNS Publish Metrics",
        ),
        metric_widget(
            [
                ["AWS/SNS", "NumberOfMessagesPublished", "TopicName", sns_topic_name, {"id": "m1"}],
                [".", "NumberOfNotificationsFailed", ".", ".", {"id": "m2"}],
            ],
            x=0,
            y=14,
            width=12,
            height=6,
            view="timeSeries",
            stacked=False,
            region=region,
            stat="Sum",
            period=900,
            title="SNS Publish Metrics Graph",
            y_axis=_Y_AXIS_FROM_ZERO,
        ),
        metric_widget(
            [
                ["AWS/SQS", "NumberOfMessagesSent", "QueueName", sqs_queue_name],
                [".", "NumberOfMessagesReceived", ".", "."],
                [".", "NumberOfMessagesDeleted", ".", "."],
                [".", "ApproximateAgeOfOldestMessage", ".", ".", {"stat": "Average"}],
            ],
            x=12,
            y=11,
            width=12,
            height=3,
            view="singleValue",
            region=region,
            stat="Sum",
            period=900,
            title="SQS Message Metrics",
        ),
        metric_widget(
            [
                ["AWS/SQS", "NumberOfMessagesSent", "QueueName", sqs_queue_name],
                [".", "NumberOfMessagesReceived", ".", "."],
                [".", "NumberOfMessagesDeleted", ".", "."],
            ],
            x=12,
            y=14,
            width=12,
            height=6,
            view="timeSeries",
            stacked=False,
            region=region,
            stat="Sum",
            period=900,
            title="SQS Message Metrics Graph",
            y_axis=_Y_AXIS_FROM_ZERO,
        ),
    ]
