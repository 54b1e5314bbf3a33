from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from pygame.math import Vector2

from ..sim.core.agent import Behavior
from ..sim.core.config import SimulationConfig
from ..sim.core.scene import Scene

logger = logging.getLogger(__name__)

_HEADER = [
    "tick",
    "agent",
    "behavior",
    "x",
    "y",
    "vx",
    "vy",
    "speed",
    "heading",
    "wrapped",
    "conditions",
]


def _format_row(tick: int, name: str, result) -> list[object]:
    agent = result.agent
    return [
        tick,
        name,
        result.behavior.value,
        f"{agent.position.x:.4f}",
        f"{agent.position.y:.4f}",
        f"{agent.velocity.x:.4f}",
        f"{agent.velocity.y:.4f}",
        f"{agent.speed:.4f}",
        f"{agent.heading_degrees:.3f}",
        int(result.wrapped),
        ";".join(condition.value for condition in result.conditions),
    ]


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    behavior: Behavior | str = Behavior.WANDER,
    target: Optional[Sequence[float]] = None,
    config_path: Optional[Path] = None,
    summary_path: Optional[Path] = None,
) -> Scene:
    config = SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
    if seed is not None:
        config.seed = seed
    scene = Scene(config)
    selected = Behavior.parse(behavior)
    click = Vector2(target[0], target[1]) if target is not None else None
    logger.info("running %d ticks of %s (seed=%d)", steps, selected.value, config.seed)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    distance = {engine.name: 0.0 for engine in scene.engines}
    wraps = {engine.name: 0 for engine in scene.engines}
    conditions: dict[str, int] = {}
    try:
        for tick in range(steps):
            before = {engine.name: Vector2(engine.agent.position) for engine in scene.engines}
            results = scene.step(selected, target=click if tick == 0 else None)
            for engine, result in zip(scene.engines, results):
                if result.wrapped:
                    wraps[engine.name] += 1
                else:
                    distance[engine.name] += before[engine.name].distance_to(engine.agent.position)
                for condition in result.conditions:
                    conditions[condition.value] = conditions.get(condition.value, 0) + 1
                if writer:
                    writer.writerow(_format_row(tick, engine.name, result))
    finally:
        if csv_file:
            csv_file.close()

    if summary_path:
        summary = {
            "steps": steps,
            "seed": config.seed,
            "behavior": selected.value,
            "distance": distance,
            "wraps": wraps,
            "conditions": conditions,
            "final": scene.snapshot().agents,
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
    return scene


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless steering simulation")
    parser.add_argument("--steps", type=int, default=3000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--behavior",
        choices=[behavior.value for behavior in Behavior],
        default=Behavior.WANDER.value,
        help="Behavior selected for the primary ship (the second ship reacts to it).",
    )
    parser.add_argument("--target", type=float, nargs=2, metavar=("X", "Y"), default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML file overriding the defaults")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write per-tick agent state")
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON summary of the run.")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_headless(
        args.steps,
        args.seed,
        args.log,
        behavior=args.behavior,
        target=args.target,
        config_path=args.config,
        summary_path=args.summary,
    )


if __name__ == "__main__":
    main()
