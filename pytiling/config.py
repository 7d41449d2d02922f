"""
Visualizer configuration.

The tiled kernel being illustrated is fixed: a 4x4 result matrix computed
from 2x2 shared-memory tiles. The step-to-state mapping is defined in terms
of the constants below; `VisualizerConfig` carries the few settings that
the CLI and dashboard may change.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# =========================================================================
# Kernel geometry
# =========================================================================
MATRIX_SIZE = 4
"""Rows and columns of M, N and the result matrix P."""

TILE_SIZE = 2
"""Rows and columns of each shared-memory tile."""

# =========================================================================
# Step timeline
# =========================================================================
TOTAL_STEPS = 100
"""Number of steps in the reference timeline (the slider runs 0..100)."""

STEPS_PER_TILE = 25
"""Steps spent on one diagonal output tile before the sweep moves on."""

STEPS_PER_REDUCTION = 6
"""Steps per inner-product index within a tile block."""

PROGRESS_PER_STEP = 4
"""Percent of fill the active output cell gains per step."""

THREAD_COLUMNS = 10
"""Width of the cosmetic thread label grid."""

# =========================================================================
# Source annotation
# =========================================================================
FIRST_HIGHLIGHT_LINE = 10
LAST_HIGHLIGHT_LINE = 40
STEPS_PER_LINE = 3

SCROLL_CONTEXT_LINES = 5
"""
Scroll offset of the listing: the highlighted line is the
SCROLL_CONTEXT_LINES-th visible row, with SCROLL_CONTEXT_LINES - 1 lines above it.
"""

DEFAULT_SOURCE_PATH = Path(__file__).parent / "kernels" / "matMulTiling.cu"


@dataclass
class VisualizerConfig:
    """
    Runtime settings for the dashboard and console renderers.

    Example:
        >>> config = VisualizerConfig(play_interval=0.05)
        >>> config.total_steps  # 100
    """

    total_steps: int = TOTAL_STEPS
    """Upper bound of the step slider."""

    source_path: Optional[Path] = None
    """Kernel listing to annotate. None selects the bundled kernel."""

    play_interval: float = 0.15
    """Seconds between automatic steps while playing."""

    source_height: int = 24
    """Number of listing lines shown in the source panel."""

    def __post_init__(self):
        if self.total_steps < 0:
            raise ValueError(f"total_steps must be non-negative, got {self.total_steps}")
        if self.play_interval <= 0:
            raise ValueError(f"play_interval must be positive, got {self.play_interval}")
        if self.source_height < 1:
            raise ValueError(f"source_height must be at least 1, got {self.source_height}")
        if self.source_path is not None:
            self.source_path = Path(self.source_path)

    @property
    def resolved_source_path(self) -> Path:
        """The listing path, falling back to the bundled kernel."""
        return self.source_path if self.source_path is not None else DEFAULT_SOURCE_PATH
