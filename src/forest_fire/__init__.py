"""
Forest Fire Simulation using Cellular Automata.

A probabilistic model of tree growth, lightning and fire spread on a
grid, driven by a tick scheduler and shaped by wind, humidity,
temperature and optional terrain.
"""

from .cell import Cell, CellState
from .clock import SimulationClock, SimulationSpeed, TriggerKind
from .config import ConfigurationError, SimulationConfig, load_config
from .events import Notification
from .history import Evaluation
from .model import ForestFireModel

__version__ = "0.1.0"

__all__ = [
    "Cell",
    "CellState",
    "SimulationClock",
    "SimulationSpeed",
    "TriggerKind",
    "ConfigurationError",
    "SimulationConfig",
    "load_config",
    "Notification",
    "Evaluation",
    "ForestFireModel",
]
