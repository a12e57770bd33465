from __future__ import annotations

import pytest

from cloudherder.errors import DashboardError, InvalidSectionError
from cloudherder.stacking import WidgetStack, stack_widget_sections
from cloudherder.widgets import Panel, TextProperties


def _panel(y: int, height: int, label: str = "p") -> Panel:
    return Panel(height=height, width=24, x=0, y=y, properties=TextProperties(f"# {label}"))


def test_single_section_is_unchanged() -> None:
    only = _panel(0, 3)
    result = stack_widget_sections([[only]])
    assert result == WidgetStack(floor=3, panels=(only,))
    assert result.panels[0] is only


def test_second_section_is_shifted_below_the_first() -> None:
    result = stack_widget_sections([[_panel(0, 3)], [_panel(0, 1), _panel(2, 6)]])
    assert [p.y for p in result.panels] == [0, 3, 5]
    assert result.floor == 11


def test_offset_accumulates_across_sections() -> None:
    result = stack_widget_sections(
        [
            [_panel(0, 1), _panel(1, 3)],
            [_panel(0, 1), _panel(1, 6)],
            [_panel(0, 2)],
        ]
    )
    assert [p.y for p in result.panels] == [0, 1, 4, 5, 11]
    assert result.floor == 13


def test_empty_section_list() -> None:
    assert stack_widget_sections([]) == WidgetStack(floor=0, panels=())


def test_empty_section_is_a_noop() -> None:
    first = [_panel(0, 3)]
    assert stack_widget_sections([first, []]) == stack_widget_sections([first])
    assert stack_widget_sections([first, [], [_panel(0, 2)]]).floor == 5


def test_leading_empty_section_does_not_shift_the_next() -> None:
    result = stack_widget_sections([[], [_panel(2, 4)]])
    assert [p.y for p in result.panels] == [2]
    assert result.floor == 6


def test_offset_follows_the_last_panel_not_the_tallest() -> None:
    # Side-by-side panels: the offset is taken from whichever panel came last.
    result = stack_widget_sections(
        [
            [_panel(0, 6), _panel(0, 2)],
            [_panel(0, 1)],
        ]
    )
    assert [p.y for p in result.panels] == [0, 0, 2]
    assert result.floor == 3


def test_order_within_and_across_sections_is_preserved() -> None:
    result = stack_widget_sections(
        [
            [_panel(0, 1, "a"), _panel(1, 1, "b")],
            [_panel(0, 1, "c"), _panel(1, 1, "d")],
        ]
    )
    assert [p.properties.markdown for p in result.panels] == ["# a", "# b", "# c", "# d"]


def test_inputs_are_not_mutated_and_can_be_reused() -> None:
    first = [_panel(0, 3)]
    second = [_panel(0, 1), _panel(2, 6)]
    once = stack_widget_sections([first, second])
    twice = stack_widget_sections([first, second])
    assert once == twice
    assert [p.y for p in second] == [0, 2]


def test_restacking_a_stacked_layout_is_idempotent() -> None:
    stacked = stack_widget_sections([[_panel(0, 3)], [_panel(0, 1), _panel(2, 6)]])
    again = stack_widget_sections([list(stacked.panels)])
    assert again == stacked


def test_tuples_are_accepted_as_sections() -> None:
    result = stack_widget_sections(((_panel(0, 2),), (_panel(0, 2),)))
    assert [p.y for p in result.panels] == [0, 2]


@pytest.mark.parametrize(
    "sections,match",
    [
        (None, "got None"),
        ("widgets", "got str"),
        ([_panel(0, 1)], "section 0 must be a list"),
        ([[_panel(0, 1)], [{"y": 0, "height": 1}]], "section 1 item 0 is not a Panel"),
    ],
)
def test_malformed_sections_raise(sections, match) -> None:
    with pytest.raises(InvalidSectionError, match=match):
        stack_widget_sections(sections)
    assert issubclass(InvalidSectionError, DashboardError)
