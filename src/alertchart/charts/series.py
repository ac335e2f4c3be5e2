"""Chart-ready series and their display styling."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "ALERTS_COLOR",
    "EVENTS_COLOR",
    "DataPoint",
    "Series",
    "alerts_series",
    "events_series",
]

ALERTS_COLOR = "#e76e59"  # flame pea
EVENTS_COLOR = "#3984ff"  # dodger blue


@dataclass(frozen=True)
class DataPoint:
    """One chart point: ``t`` in epoch milliseconds, ``y`` the value."""

    t: int
    y: float

    def to_dict(self) -> dict[str, Any]:
        # NaN has no JSON literal; charts read null as a gap.
        y = None if isinstance(self.y, float) and math.isnan(self.y) else self.y
        return {"t": self.t, "y": y}


@dataclass
class Series:
    """Ordered points plus the styling the chart widget reads.

    Attributes
    ----------
    label : str
        Legend label
    data : list[DataPoint]
        Points ordered by ``t``
    style : dict
        Chart dataset options (camelCase keys)
    """

    label: str
    data: list[DataPoint] = field(default_factory=list)
    style: dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.data)

    def values(self) -> list[float]:
        return [point.y for point in self.data]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a chart dataset dictionary."""
        return {
            "label": self.label,
            **self.style,
            "data": [point.to_dict() for point in self.data],
        }


def alerts_series(points: list[DataPoint] | None = None) -> Series:
    return Series(
        label="Alerts",
        data=list(points or []),
        style={
            "fill": False,
            "lineTension": 0.2,
            "pointHitRadius": 10,
            "pointRadius": 0.1,
            "borderWidth": 2,
            "backgroundColor": ALERTS_COLOR,
            "borderColor": ALERTS_COLOR,
            "hoverBackgroundColor": ALERTS_COLOR,
            "hoverBorderColor": "black",
        },
    )


def events_series(points: list[DataPoint] | None = None) -> Series:
    return Series(
        label="Events",
        data=list(points or []),
        style={
            "fill": False,
            "backgroundColor": EVENTS_COLOR,
            "borderColor": EVENTS_COLOR,
            "borderWidth": 1,
            "hoverBackgroundColor": EVENTS_COLOR,
            "hoverBorderColor": "black",
        },
    )
