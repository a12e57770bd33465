"""CloudWatch dashboard composition for cloudherder stacks.

Panels are immutable value objects; sections of panels authored at local
coordinates are stacked into one layout and serialized into the dashboard
body document consumed by CloudWatch.
"""

from .assembler import (
    build_dashboard_body,
    dashboard_name,
    ingestion_metrics_section,
    render_dashboard_body,
    render_widgets_body,
)
from .errors import (
    ConfigError,
    DashboardError,
    InvalidPanelError,
    InvalidQueryError,
    InvalidSectionError,
)
from .queries import (
    QUERY_FOOTER,
    create_dashboard_query_string,
    create_saved_query_string,
    sanitize_query_string,
)
from .stacking import WidgetStack, stack_widget_sections
from .widgets import (
    LogProperties,
    LogQuery,
    MetricProperties,
    Panel,
    TextProperties,
    create_log_widget,
    create_log_widgets,
    create_section_header,
    metric_widget,
)

__all__ = [
    "ConfigError",
    "DashboardError",
    "InvalidPanelError",
    "InvalidQueryError",
    "InvalidSectionError",
    "LogProperties",
    "LogQuery",
    "MetricProperties",
    "Panel",
    "QUERY_FOOTER",
    "TextProperties",
    "WidgetStack",
    "__version__",
    "build_dashboard_body",
    "create_dashboard_query_string",
    "create_log_widget",
    "create_log_widgets",
    "create_saved_query_string",
    "create_section_header",
    "dashboard_name",
    "ingestion_metrics_section",
    "metric_widget",
    "render_dashboard_body",
    "render_widgets_body",
    "sanitize_query_string",
    "stack_widget_sections",
]

__version__ = "0.1.0"
