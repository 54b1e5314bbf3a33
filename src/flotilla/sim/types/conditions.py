from __future__ import annotations

from enum import Enum


class Condition(str, Enum):
    MISSING_DEPENDENCY = "MissingDependency"
    DEGENERATE_VECTOR = "DegenerateVector"
    BOUNDARY_CORRECTION = "BoundaryCorrection"
