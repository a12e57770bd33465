from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, ClassVar, Mapping, Sequence, Union

from .errors import InvalidPanelError
from .queries import create_dashboard_query_string

PANEL_WIDTHS = frozenset({6, 12, 24})
METRIC_VIEWS = frozenset({"singleValue", "timeSeries"})
LOG_WIDGET_HEIGHT = 6


def _require_int(value: Any, *, name: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPanelError(f"{name} must be an integer; got {value!r}")
    if value < minimum:
        raise InvalidPanelError(f"{name} must be >= {minimum}; got {value}")
    return value


def _require_str(raw: Mapping[str, Any], key: str, *, label: str) -> str:
    if key not in raw:
        raise InvalidPanelError(f"{label} is missing required field {key!r}")
    value = raw[key]
    if not isinstance(value, str):
        raise InvalidPanelError(f"{label}.{key} must be a string; got {value!r}")
    return value


def _optional_bool(raw: Mapping[str, Any], key: str, *, label: str) -> bool | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise InvalidPanelError(f"{label}.{key} must be a boolean; got {value!r}")
    return value


def _optional_mapping(raw: Mapping[str, Any], key: str, *, label: str) -> dict[str, Any] | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise InvalidPanelError(f"{label}.{key} must be an object; got {value!r}")
    return dict(value)


@dataclass(frozen=True)
class TextProperties:
    TYPE: ClassVar[str] = "text"

    markdown: str

    def to_dict(self) -> dict[str, Any]:
        return {"markdown": self.markdown}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "TextProperties":
        return cls(markdown=_require_str(raw, "markdown", label="text properties"))


@dataclass(frozen=True)
class LogProperties:
    TYPE: ClassVar[str] = "log"

    query: str
    region: str
    title: str
    stacked: bool = False
    view: str = "table"

    def __post_init__(self) -> None:
        if self.view != "table":
            raise InvalidPanelError(f"log panels only support the 'table' view; got {self.view!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "region": self.region,
            "stacked": self.stacked,
            "title": self.title,
            "view": self.view,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "LogProperties":
        label = "log properties"
        stacked = _optional_bool(raw, "stacked", label=label)
        return cls(
            query=_require_str(raw, "query", label=label),
            region=_require_str(raw, "region", label=label),
            title=_require_str(raw, "title", label=label),
            stacked=bool(stacked),
            view=str(raw.get("view") or "table"),
        )


@dataclass(frozen=True)
class MetricProperties:
    """Payload of a metric panel.

    ``metrics`` rows are CloudWatch metric-dimension arrays (``'.'``/``'...'``
    shorthand, trailing option objects, expression rows) and are passed
    through as given. Unset optional fields are left out of the document.
    """

    TYPE: ClassVar[str] = "metric"

    metrics: Sequence[Sequence[Any]]
    view: str
    region: str
    stat: str
    period: int
    title: str | None = None
    stacked: bool | None = None
    y_axis: Mapping[str, Any] | None = None
    legend: Mapping[str, Any] | None = None
    live_data: bool | None = None

    def __post_init__(self) -> None:
        if self.view not in METRIC_VIEWS:
            raise InvalidPanelError(
                f"metric view must be one of {sorted(METRIC_VIEWS)}; got {self.view!r}"
            )
        _require_int(self.period, name="metric period", minimum=1)
        if isinstance(self.metrics, (str, bytes)) or not isinstance(self.metrics, Sequence):
            raise InvalidPanelError("metric panels need a list of metric rows")

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "metrics": [list(row) for row in self.metrics],
            "view": self.view,
            "region": self.region,
            "stat": self.stat,
            "period": self.period,
        }
        if self.title is not None:
            out["title"] = self.title
        if self.stacked is not None:
            out["stacked"] = self.stacked
        if self.y_axis is not None:
            out["yAxis"] = dict(self.y_axis)
        if self.legend is not None:
            out["legend"] = dict(self.legend)
        if self.live_data is not None:
            out["liveData"] = self.live_data
        return out

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "MetricProperties":
        label = "metric properties"
        if "metrics" not in raw:
            raise InvalidPanelError(f"{label} is missing required field 'metrics'")
        metrics = raw["metrics"]
        if not isinstance(metrics, list) or not all(isinstance(row, list) for row in metrics):
            raise InvalidPanelError(f"{label}.metrics must be a list of lists")
        if "period" not in raw:
            raise InvalidPanelError(f"{label} is missing required field 'period'")
        title = raw.get("title")
        if title is not None and not isinstance(title, str):
            raise InvalidPanelError(f"{label}.title must be a string; got {title!r}")
        return cls(
            metrics=metrics,
            view=_require_str(raw, "view", label=label),
            region=_require_str(raw, "region", label=label),
            stat=_require_str(raw, "stat", label=label),
            period=raw["period"],
            title=title,
            stacked=_optional_bool(raw, "stacked", label=label),
            y_axis=_optional_mapping(raw, "yAxis", label=label),
            legend=_optional_mapping(raw, "legend", label=label),
            live_data=_optional_bool(raw, "liveData", label=label),
        )


PanelProperties = Union[MetricProperties, LogProperties, TextProperties]

_PROPERTY_TYPES: dict[str, type] = {
    MetricProperties.TYPE: MetricProperties,
    LogProperties.TYPE: LogProperties,
    TextProperties.TYPE: TextProperties,
}


@dataclass(frozen=True)
class Panel:
    """One widget on a CloudWatch dashboard grid (24 columns wide)."""

    height: int
    width: int
    x: int
    y: int
    properties: PanelProperties

    def __post_init__(self) -> None:
        _require_int(self.height, name="height", minimum=1)
        _require_int(self.x, name="x", minimum=0)
        _require_int(self.y, name="y", minimum=0)
        if (
            isinstance(self.width, bool)
            or not isinstance(self.width, int)
            or self.width not in PANEL_WIDTHS
        ):
            raise InvalidPanelError(
                f"width must be one of {sorted(PANEL_WIDTHS)}; got {self.width!r}"
            )
        if not isinstance(self.properties, tuple(_PROPERTY_TYPES.values())):
            raise InvalidPanelError(
                f"unsupported panel properties: {type(self.properties).__name__}"
            )

    @property
    def type(self) -> str:
        return self.properties.TYPE

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def with_y(self, y: int) -> "Panel":
        return replace(self, y=y)

    def to_dict(self) -> dict[str, Any]:
        return {
            "height": self.height,
            "width": self.width,
            "x": self.x,
            "y": self.y,
            "type": self.type,
            "properties": self.properties.to_dict(),
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "Panel":
        if not isinstance(raw, Mapping):
            raise InvalidPanelError(f"panel must be a JSON object; got {type(raw).__name__}")
        for key in ("height", "width", "x", "y", "type", "properties"):
            if key not in raw:
                raise InvalidPanelError(f"panel is missing required field {key!r}")
        kind = raw["type"]
        props_cls = _PROPERTY_TYPES.get(kind) if isinstance(kind, str) else None
        if props_cls is None:
            raise InvalidPanelError(
                f"panel type must be one of {sorted(_PROPERTY_TYPES)}; got {kind!r}"
            )
        props = raw["properties"]
        if not isinstance(props, Mapping):
            raise InvalidPanelError("panel properties must be a JSON object")
        return cls(
            height=raw["height"],
            width=raw["width"],
            x=raw["x"],
            y=raw["y"],
            properties=props_cls.from_dict(props),
        )


@dataclass(frozen=True)
class LogQuery:
    name: str
    log_group_name: str
    query: str


def create_section_header(title: str, y: int | None = None) -> Panel:
    return Panel(
        height=1,
        width=24,
        x=0,
        y=y or 0,
        properties=TextProperties(markdown=f"# {title}"),
    )


def create_log_widget(
    log_group_name: str,
    base_query: str,
    title: str,
    region: str,
    *,
    x: int = 0,
    y: int = 0,
) -> Panel:
    return Panel(
        height=LOG_WIDGET_HEIGHT,
        width=24,
        x=x,
        y=y,
        properties=LogProperties(
            query=create_dashboard_query_string(log_group_name, base_query),
            region=region,
            stacked=False,
            title=title,
            view="table",
        ),
    )


def create_log_widgets(queries: Sequence[LogQuery], y_start: int, region: str) -> list[Panel]:
    """One full-width log table per query, stacked downwards from ``y_start``."""
    widgets: list[Panel] = []
    y = y_start
    for query in queries:
        widgets.append(
            create_log_widget(
                query.log_group_name,
                query.query,
                f"{query.name} Log Query Results",
                region,
                x=0,
                y=y,
            )
        )
        y += LOG_WIDGET_HEIGHT
    return widgets


def metric_widget(
    metrics: Sequence[Sequence[Any]],
    *,
    x: int,
    y: int,
    width: int,
    height: int,
    view: str,
    region: str,
    stat: str,
    period: int,
    **options: Any,
) -> Panel:
    return Panel(
        height=height,
        width=width,
        x=x,
        y=y,
        properties=MetricProperties(
            metrics=metrics,
            view=view,
            region=region,
            stat=stat,
            period=period,
            **options,
        ),
    )
