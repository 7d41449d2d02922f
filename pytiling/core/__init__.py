"""Core components of the tiling visualizer."""

from pytiling.core.model import (
    Phase,
    OutputTile,
    ThreadIndex,
    SharedTile,
    SimulationState,
    compute_state,
)
from pytiling.core.annotator import AnnotatedLine, annotate, highlighted_line
from pytiling.core.controller import StepController
from pytiling.core.source import FALLBACK_SOURCE, SourceListing, load_source

__all__ = [
    "Phase",
    "OutputTile",
    "ThreadIndex",
    "SharedTile",
    "SimulationState",
    "compute_state",
    "AnnotatedLine",
    "annotate",
    "highlighted_line",
    "StepController",
    "FALLBACK_SOURCE",
    "SourceListing",
    "load_source",
]
