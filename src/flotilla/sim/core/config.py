from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml


@dataclass
class ShipConfig:
    move_speed: float = 5.0
    rotation_speed: float = 180.0
    max_force: float = 5.0
    mass: float = 1.0
    start_position: tuple[float, float] = (0.0, 0.0)
    start_heading: float = 0.0


@dataclass
class ArriveConfig:
    slowing_radius: float = 3.0


@dataclass
class TrailConfig:
    trail_duration: float = 2.0
    min_point_distance: float = 0.1


@dataclass
class WanderConfig:
    circle_distance: float = 2.0
    circle_radius: float = 1.0
    jitter: float = 2.0
    circle_segments: int = 32
    arrival_threshold: float = 0.5
    # min_x, min_y, max_x, max_y of the area state-based wander samples from
    map_bounds: tuple[float, float, float, float] = (-8.0, -4.0, 8.0, 4.0)


@dataclass
class PathConfig:
    waypoint_radius: float = 0.2
    smooth_waypoint_radius: float = 1.0
    path_generation_margin: float = 1.5
    path_generation_radius: float = 4.0
    path_sides: int = 4


@dataclass
class WorldConfig:
    width: float = 20.0
    height: float = 10.0


@dataclass
class SimulationConfig:
    time_step: float = 1.0 / 50.0
    seed: int = 42
    config_version: str = "v1"
    two_agents: bool = True
    world: WorldConfig = field(default_factory=WorldConfig)
    ship: ShipConfig = field(default_factory=ShipConfig)
    secondary_ship: ShipConfig = field(
        default_factory=lambda: ShipConfig(move_speed=4.0, start_position=(4.0, 2.0), start_heading=180.0)
    )
    arrive: ArriveConfig = field(default_factory=ArriveConfig)
    trail: TrailConfig = field(default_factory=TrailConfig)
    wander: WanderConfig = field(default_factory=WanderConfig)
    path: PathConfig = field(default_factory=PathConfig)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


_SECTIONS = {
    "world": WorldConfig,
    "ship": ShipConfig,
    "secondary_ship": ShipConfig,
    "arrive": ArriveConfig,
    "trail": TrailConfig,
    "wander": WanderConfig,
    "path": PathConfig,
}

_TUPLE_FIELDS = {"start_position", "map_bounds"}


def _build_section(section_type: type, raw: dict | None, name: str):
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    known = {f.name for f in fields(section_type)}
    unknown = set(raw) - known
    if unknown:
        raise ValueError(f"Unknown keys in '{name}': {sorted(unknown)}")
    values = {k: tuple(float(item) for item in v) if k in _TUPLE_FIELDS else v for k, v in raw.items()}
    return section_type(**values)


def load_config(raw: dict) -> SimulationConfig:
    defaults = SimulationConfig()
    sections = {}
    for name, section_type in _SECTIONS.items():
        if name in raw:
            sections[name] = _build_section(section_type, raw.get(name), name)
        else:
            sections[name] = getattr(defaults, name)
    sim_values = {k: v for k, v in raw.items() if k not in _SECTIONS}
    known = {f.name for f in fields(SimulationConfig)}
    unknown = set(sim_values) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {sorted(unknown)}")
    config = SimulationConfig(**sections, **sim_values)
    validate_config(config)
    return config


def validate_config(config: SimulationConfig) -> None:
    if config.time_step <= 0.0:
        raise ValueError("time_step must be positive")
    if config.world.width <= 0.0 or config.world.height <= 0.0:
        raise ValueError("world extents must be positive")
    for name in ("ship", "secondary_ship"):
        ship = getattr(config, name)
        if ship.mass <= 0.0:
            raise ValueError(f"{name}.mass must be positive")
        if ship.move_speed < 0.0 or ship.max_force < 0.0 or ship.rotation_speed < 0.0:
            raise ValueError(f"{name} speed, force and rotation limits must not be negative")
    if len(config.wander.map_bounds) != 4:
        raise ValueError("wander.map_bounds needs min_x, min_y, max_x, max_y")
    if config.path.path_sides < 2:
        raise ValueError("path.path_sides must be at least 2")
