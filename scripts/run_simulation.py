#!/usr/bin/env python3
"""Run the forest fire simulation in the console."""

import argparse
import logging
import sys
from pathlib import Path

# Add the src directory to the Python path
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

from forest_fire.cell import Cell, CellState
from forest_fire.clock import SimulationSpeed
from forest_fire.config import SimulationConfig, load_config
from forest_fire.events import Notification
from forest_fire.history import format_runtime
from forest_fire.model import ForestFireModel

SYMBOLS = {
    CellState.Empty: "🟫",
    CellState.Tree: "🌲",
    CellState.Burning: "🔥",
    CellState.Burned: "⬛",
}


def print_grid(model: ForestFireModel) -> None:
    """
    Print a simple representation of the grid to console.

    Args:
        model: The ForestFireModel instance to visualize
    """
    grid_str = ""
    for y in range(model.grid.rows):
        for x in range(model.grid.cols):
            grid_str += SYMBOLS[model.state_of(Cell(x, y))]
        grid_str += "\n"
    print(grid_str)


def parse_args():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", type=Path, help="JSON simulation config")
    parser.add_argument("--cols", type=int, default=30)
    parser.add_argument("--rows", type=int, default=15)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--speed", choices=[s.name for s in SimulationSpeed], default="Fast")
    parser.add_argument("--seconds", type=int, default=60, help="Simulated seconds to run")
    return parser.parse_args()


def main():
    """Run the forest fire simulation."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    args = parse_args()
    config = load_config(args.config) if args.config else SimulationConfig()

    print("--- CREATING MODEL ---")
    model = ForestFireModel(
        config, args.cols, args.rows, seed=args.seed, speed=SimulationSpeed[args.speed]
    )
    model.notifications.subscribe(Notification.DENSITY_TEXT, lambda text: print(f"Density: {text}"))
    model.notifications.subscribe(Notification.WIND_TEXT, lambda text: print(f"Wind: {text}"))
    model.notifications.subscribe(
        Notification.LIGHTNING_STRIKE, lambda strike: print(f"Lightning at {tuple(strike.cell)}")
    )

    model.prefill()
    # Start a fire in the middle so there is something to watch
    model.ignite_manually(Cell(args.cols // 2, args.rows // 2))

    print("--- INITIAL STATE ---")
    print_grid(model)

    model.start_or_resume()
    for _ in range(args.seconds):
        model.advance(1000)
        print(f"\n--- {format_runtime(model.elapsed)} ---")
        print_grid(model)

        if model.evaluation is not None:
            print("\nSimulation finished.")
            break

    evaluation = model.evaluation or model.evaluate()
    print(f"Grown: {evaluation.total_grown_trees}, burned: {evaluation.total_burned_trees}, "
          f"runtime: {format_runtime(evaluation.runtime)}")


if __name__ == "__main__":
    main()
