import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    """Ensure `src/` is on sys.path so tests can import `forest_fire.*`.

    This repo uses the common `src/` layout but is not necessarily installed as a package
    in the active environment.
    """

    project_root = Path(__file__).resolve().parents[1]
    src_dir = project_root / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def make_config():
    """Factory for a quiet config: no prefill, lightning, regrowth or wind.

    Keyword arguments replace whole config sections, e.g.
    ``make_config(fire_config={"spread_chance_percent": 0})``.
    """
    from forest_fire.config import SimulationConfig

    def build(**sections):
        data = {
            "tree_config": {"allow_regrow_forest": False},
            "fire_config": {"enable_lightning_strikes": False},
            "prefill_config": {"should_prefill_map": False},
            "environment_config": {"wind_config": {"strength": 0.0}},
        }
        data.update(sections)
        return SimulationConfig.from_dict(data)

    return build


@pytest.fixture
def make_model(make_config):
    """Factory for a seeded 10x10 model built from make_config."""
    from forest_fire.model import ForestFireModel

    def build(cols=10, rows=10, seed=42, **sections):
        return ForestFireModel(make_config(**sections), cols, rows, seed=seed)

    return build
