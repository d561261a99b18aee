"""
Click selection on the parallel coordinates chart.

Clicking an axis tick selects that value on the axis; clicking the same tick
again clears it. Lines survive when they match every active selection:
numeric axes keep values strictly below the clicked tick, categorical axes
need an exact match.
"""

from dataclasses import dataclass, field
from typing import Any

NUMERIC_DIMENSIONS = frozenset({"odometer", "price"})


@dataclass(frozen=True)
class SelectionState:
    """Active tick selections, one value per dimension."""

    filters: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.filters

    def toggle(self, dimension: str, value: Any) -> "SelectionState":
        """Return the state after a click on ``value`` of ``dimension``."""
        filters = dict(self.filters)
        if filters.get(dimension) == value:
            del filters[dimension]
        else:
            filters[dimension] = value
        return SelectionState(filters=filters)

    def clear(self) -> "SelectionState":
        return SelectionState()


def _get(record: Any, dimension: str) -> Any:
    if isinstance(record, dict):
        return record.get(dimension)
    return getattr(record, dimension, None)


def matches(record: Any, selection: SelectionState) -> bool:
    """Check one line against every active selection."""
    for dimension, selected in selection.filters.items():
        value = _get(record, dimension)
        if dimension in NUMERIC_DIMENSIONS:
            if value is None or not value < selected:
                return False
        elif value != selected:
            return False
    return True


def apply_selection(records: list[Any], selection: SelectionState) -> list[Any]:
    """Lines that survive the selection; all lines when nothing is selected."""
    if selection.is_empty:
        return list(records)
    return [r for r in records if matches(r, selection)]


def highlighted_values(
    records: list[Any],
    dimensions: tuple[str, ...] = ("year", "make", "body", "odometer", "price"),
) -> dict[str, set[Any]]:
    """Per-dimension set of tick values still used by the given lines."""
    return {dimension: {_get(r, dimension) for r in records} for dimension in dimensions}
