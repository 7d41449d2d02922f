"""Console examples for the PyTiling visualizer.

Available examples:
- walkthrough: Renders the full view at the key steps of the timeline
- phase_timeline: Table of the derived state for every step
"""

from pytiling.examples.walkthrough import run_walkthrough, render_step
from pytiling.examples.phase_timeline import run_phase_timeline

__all__ = [
    'run_walkthrough',
    'render_step',
    'run_phase_timeline',
]
