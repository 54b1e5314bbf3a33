from __future__ import annotations

from typing import Dict, FrozenSet

from ..core.agent import Behavior
from ..types.visuals import VisualChannel
from .paths import PathPolicy

_NO_CHANNELS: FrozenSet[VisualChannel] = frozenset()

VISUAL_CHANNELS: Dict[Behavior, FrozenSet[VisualChannel]] = {
    Behavior.SEEK_BASIC: _NO_CHANNELS,
    Behavior.SEEK_STEERING: _NO_CHANNELS,
    Behavior.FLEE: _NO_CHANNELS,
    Behavior.ARRIVE: _NO_CHANNELS,
    Behavior.WANDER: frozenset({VisualChannel.WANDER_CIRCLE}),
    Behavior.WANDER_STATE_BASED: _NO_CHANNELS,
    Behavior.PURSUIT_BASIC: frozenset({VisualChannel.PREDICTION_LINE}),
    Behavior.PURSUIT_IMPROVED: frozenset({VisualChannel.PREDICTION_LINE}),
    Behavior.EVADE: frozenset({VisualChannel.PREDICTION_LINE}),
    Behavior.PATH_PRECISE: frozenset({VisualChannel.PATH_LINES}),
    Behavior.PATH_SMOOTH: frozenset({VisualChannel.PATH_LINES}),
    Behavior.PATH_PATROL: frozenset({VisualChannel.PATH_LINES}),
    Behavior.IDLE: _NO_CHANNELS,
}

# what the second ship does while the first one runs a given behavior
COMPLEMENTARY_BEHAVIOR: Dict[Behavior, Behavior] = {
    Behavior.SEEK_BASIC: Behavior.WANDER,
    Behavior.SEEK_STEERING: Behavior.WANDER,
    Behavior.FLEE: Behavior.WANDER,
    Behavior.ARRIVE: Behavior.WANDER,
    Behavior.WANDER: Behavior.WANDER,
    Behavior.WANDER_STATE_BASED: Behavior.WANDER_STATE_BASED,
    Behavior.PURSUIT_BASIC: Behavior.WANDER,
    Behavior.PURSUIT_IMPROVED: Behavior.FLEE,
    Behavior.EVADE: Behavior.PURSUIT_IMPROVED,
    Behavior.PATH_PRECISE: Behavior.WANDER,
    Behavior.PATH_SMOOTH: Behavior.WANDER,
    Behavior.PATH_PATROL: Behavior.WANDER,
    Behavior.IDLE: Behavior.IDLE,
}

PATH_POLICIES: Dict[Behavior, PathPolicy] = {
    Behavior.PATH_PRECISE: PathPolicy.PRECISE,
    Behavior.PATH_SMOOTH: PathPolicy.SMOOTH,
    Behavior.PATH_PATROL: PathPolicy.PATROL,
}


def visual_channels(behavior: Behavior) -> FrozenSet[VisualChannel]:
    return VISUAL_CHANNELS.get(behavior, _NO_CHANNELS)


def complementary_behavior(primary: Behavior) -> Behavior:
    return COMPLEMENTARY_BEHAVIOR.get(primary, Behavior.IDLE)
