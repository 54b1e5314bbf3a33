from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

Point = Tuple[float, float]


class VisualChannel(str, Enum):
    WANDER_CIRCLE = "wander_circle"
    PREDICTION_LINE = "prediction_line"
    PATH_LINES = "path_lines"


@dataclass(slots=True)
class VisualFrame:
    trail: List[Point] = field(default_factory=list)
    wander_circle: List[Point] = field(default_factory=list)
    wander_target_line: List[Point] = field(default_factory=list)
    prediction_line: List[Point] = field(default_factory=list)
    path_polyline: List[Point] = field(default_factory=list)
    waypoint_markers: List[Point] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "trail": [list(point) for point in self.trail],
            "wander_circle": [list(point) for point in self.wander_circle],
            "wander_target_line": [list(point) for point in self.wander_target_line],
            "prediction_line": [list(point) for point in self.prediction_line],
            "path_polyline": [list(point) for point in self.path_polyline],
            "waypoint_markers": [list(point) for point in self.waypoint_markers],
        }
