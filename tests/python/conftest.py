import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

ROOT = Path(__file__).resolve().parents[2]
src_root = ROOT / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from pygame.math import Vector2  # noqa: E402

from flotilla.sim.core.agent import AgentState  # noqa: E402
from flotilla.sim.core.world import WorldBounds  # noqa: E402


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-config-tests",
        action="store_true",
        default=False,
        help="run tests that check the shipped YAML against the dataclass defaults",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "config_change: marks tests that should only run when configuration files change",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-config-tests"):
        return

    skip_marker = pytest.mark.skip(
        reason="Run only when configuration is modified (use --run-config-tests)",
    )

    for item in items:
        if "config_change" in item.keywords:
            item.add_marker(skip_marker)


@pytest.fixture
def bounds() -> WorldBounds:
    return WorldBounds.from_extents(20.0, 10.0)


@pytest.fixture
def open_water() -> WorldBounds:
    return WorldBounds.from_extents(1000.0, 1000.0)


def make_agent(x: float = 0.0, y: float = 0.0, **kwargs) -> AgentState:
    values = dict(max_speed=5.0, max_force=5.0, mass=1.0, turn_rate_deg_per_sec=180.0)
    values.update(kwargs)
    return AgentState(position=Vector2(x, y), **values)
