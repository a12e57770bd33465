from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from .errors import InvalidSectionError
from .widgets import Panel


@dataclass(frozen=True)
class WidgetStack:
    floor: int
    panels: tuple[Panel, ...]


def _checked_sections(sections: Any) -> list[tuple[Panel, ...]]:
    if sections is None:
        raise InvalidSectionError("sections must be a list of panel lists; got None")
    if isinstance(sections, (str, bytes)) or not isinstance(sections, Sequence):
        raise InvalidSectionError(
            f"sections must be a list of panel lists; got {type(sections).__name__}"
        )
    checked: list[tuple[Panel, ...]] = []
    for i, section in enumerate(sections):
        if isinstance(section, (str, bytes)) or not isinstance(section, Sequence):
            raise InvalidSectionError(
                f"section {i} must be a list of panels; got {type(section).__name__}"
            )
        for j, panel in enumerate(section):
            if not isinstance(panel, Panel):
                raise InvalidSectionError(
                    f"section {i} item {j} is not a Panel; got {type(panel).__name__}"
                )
        checked.append(tuple(section))
    return checked


def _next_start(panel: Panel) -> int:
    return panel.height + panel.y


def stack_widget_sections(sections: Sequence[Sequence[Panel]]) -> WidgetStack:
    """Place sections authored at local y-coordinates one below another.

    Each section is shifted by the bottom edge of the last panel placed so
    far. The first section is never shifted, and an empty section leaves the
    offset where it was. Input panels are not modified; shifted panels are
    new values.
    """
    stacked: list[Panel] = []
    offset = 0
    for section in _checked_sections(sections):
        for panel in section:
            stacked.append(panel if offset == 0 else panel.with_y(panel.y + offset))
        if stacked:
            offset = _next_start(stacked[-1])
    return WidgetStack(floor=offset, panels=tuple(stacked))
