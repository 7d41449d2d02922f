"""
PyTiling - An educational visualizer for tiled matrix multiplication.

A single step value drives everything: which tiles of M and N sit in shared
memory, which output element is being accumulated and which kernel line is
executing.
"""

from pytiling.config import VisualizerConfig
from pytiling.core.model import Phase, OutputTile, ThreadIndex, SimulationState, compute_state
from pytiling.core.annotator import highlighted_line
from pytiling.core.controller import StepController
from pytiling.core.source import SourceListing, load_source

__version__ = "0.1.0"
__all__ = [
    "VisualizerConfig",
    "Phase",
    "OutputTile",
    "ThreadIndex",
    "SimulationState",
    "compute_state",
    "highlighted_line",
    "StepController",
    "SourceListing",
    "load_source",
]
