"""
Simulation Model - maps a step index onto the state of a tiled matmul kernel.

The kernel computes P = M x N for 4x4 matrices using 2x2 shared-memory tiles.
The timeline is split into blocks of 25 steps; block k sweeps the diagonal
output element P[k, k]. Inside a block the reduction index advances every 6
steps, and the active output cell fills 4% per step.

The LOAD/COMPUTE phase is cut once, at the middle of the timeline, and not
per block. Phase and tile therefore advance on independent clocks: step 50
is already COMPUTE while block 2 has only just started.

Everything here is pure arithmetic over the step value. There is no hidden
state, so the same (step, total_steps) always yields an equal state.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Tuple

import numpy as np

from pytiling.config import (
    MATRIX_SIZE,
    PROGRESS_PER_STEP,
    STEPS_PER_REDUCTION,
    STEPS_PER_TILE,
    THREAD_COLUMNS,
    TILE_SIZE,
    TOTAL_STEPS,
)


class Phase(Enum):
    """Coarse execution stage of the kernel."""
    LOAD = 0       # Cooperative load of tiles into shared memory
    COMPUTE = 1    # Accumulation of partial products

    @property
    def label(self) -> str:
        return self.name.capitalize()


class OutputTile(NamedTuple):
    """Coordinates of the result element currently being accumulated."""
    row: int
    col: int


class ThreadIndex(NamedTuple):
    """Cosmetic (row, col) label of the thread active at a step."""
    row: int
    col: int


Coord = Tuple[int, int]


# ---------------------------------------------------------------------------
# Scalar derivations
# ---------------------------------------------------------------------------

def tile_count(total_steps: int = TOTAL_STEPS) -> int:
    """Number of diagonal tiles the timeline visits, bounded by the matrix size."""
    return max(1, min(math.ceil(total_steps / STEPS_PER_TILE), MATRIX_SIZE))


def phase_at(step: int, total_steps: int = TOTAL_STEPS) -> Phase:
    """LOAD for the first half of the timeline, COMPUTE afterwards."""
    return Phase.LOAD if step < total_steps // 2 else Phase.COMPUTE


def sweep_block(step: int) -> int:
    """Index of the 25-step block containing `step`. Not clamped."""
    return step // STEPS_PER_TILE


def output_tile_at(step: int, total_steps: int = TOTAL_STEPS) -> OutputTile:
    """Diagonal output element for `step`, clamped into the matrix."""
    index = min(sweep_block(step), tile_count(total_steps) - 1)
    return OutputTile(index, index)


def reduction_index_at(step: int) -> int:
    """Position in the inner product loop; cycles every 25 steps."""
    return (step % STEPS_PER_TILE) // STEPS_PER_REDUCTION


def thread_index_at(step: int) -> ThreadIndex:
    return ThreadIndex(step // THREAD_COLUMNS, step % THREAD_COLUMNS)


def active_fill(step: int) -> int:
    """Fill percentage of the cell under accumulation."""
    return min(100, (step % STEPS_PER_TILE) * PROGRESS_PER_STEP)


def progress_block(step: int, total_steps: int = TOTAL_STEPS) -> int:
    """
    Diagonal position the progress sweep has reached at `step`.

    Equal to the sweep block while the timeline is still on a tile it
    visits. At the end of the timeline, or past the last tile it visits,
    the sweep is finished and the position is MATRIX_SIZE, which puts
    every cell before it.
    """
    block = sweep_block(step)
    if step >= total_steps or block >= tile_count(total_steps):
        return MATRIX_SIZE
    return block


def cell_progress_at(row: int, col: int, step: int, total_steps: int = TOTAL_STEPS) -> int:
    """
    Fill percentage of result cell (row, col) at `step`.

    Cells strictly before the sweep position in row-major order are
    complete, the cell at the sweep position fills linearly with the step
    offset inside its block, and every other cell is untouched. Once the
    sweep is finished every cell counts as before it.
    """
    block = progress_block(step, total_steps)
    if row < block or (row == block and col < block):
        return 100
    if row == block and col == block:
        return active_fill(step)
    return 0


def _progress_grid(step: int, total_steps: int) -> np.ndarray:
    block = progress_block(step, total_steps)
    rows, cols = np.indices((MATRIX_SIZE, MATRIX_SIZE))
    before = (rows < block) | ((rows == block) & (cols < block))
    active = (rows == block) & (cols == block)
    return np.where(before, 100, np.where(active, active_fill(step), 0))


def _freeze(grid: np.ndarray) -> tuple:
    return tuple(tuple(v.item() for v in row) for row in grid)


# ---------------------------------------------------------------------------
# Shared memory view
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SharedTile:
    """
    A 2x2 shared-memory tile.

    `elements[r][c]` is the coordinate of the global matrix element shown in
    that slot; `filled[r][c]` says whether the slot has been loaded yet.
    Coordinates are display labels only and may lie outside the matrix.
    """

    matrix: str
    elements: Tuple[Tuple[Coord, ...], ...]
    filled: Tuple[Tuple[bool, ...], ...]

    def element(self, row: int, col: int) -> Coord:
        return self.elements[row][col]

    def is_filled(self, row: int, col: int) -> bool:
        return self.filled[row][col]

    @property
    def filled_count(self) -> int:
        return sum(sum(row) for row in self.filled)


def shared_tiles_at(step: int) -> Tuple[SharedTile, SharedTile]:
    """
    Contents of the M and N shared-memory tiles at `step`.

    Tile M holds rows starting at 2 * block and columns starting at the
    reduction index; its columns fill left to right. Tile N is the
    transpose arrangement and fills top to bottom.
    """
    block = sweep_block(step)
    k = reduction_index_at(step)
    start = block * TILE_SIZE
    rows, cols = np.indices((TILE_SIZE, TILE_SIZE))

    tile_m = SharedTile(
        matrix="M",
        elements=tuple(
            tuple((start + r, k + c) for c in range(TILE_SIZE)) for r in range(TILE_SIZE)
        ),
        filled=_freeze(cols <= k),
    )
    tile_n = SharedTile(
        matrix="N",
        elements=tuple(
            tuple((k + r, start + c) for c in range(TILE_SIZE)) for r in range(TILE_SIZE)
        ),
        filled=_freeze(rows <= k),
    )
    return tile_m, tile_n


# ---------------------------------------------------------------------------
# Aggregate state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SimulationState:
    """Everything the views need to draw one step of the kernel."""

    step: int
    total_steps: int
    phase: Phase
    output_tile: OutputTile
    block: int
    reduction_index: int
    thread_index: ThreadIndex
    cell_progress: Tuple[Tuple[int, ...], ...]
    tile_m: SharedTile
    tile_n: SharedTile

    @property
    def is_loading(self) -> bool:
        return self.phase is Phase.LOAD

    @property
    def focus_m(self) -> Coord:
        """Element of M read by the active thread."""
        return (self.block, self.reduction_index)

    @property
    def focus_n(self) -> Coord:
        """Element of N read by the active thread."""
        return (self.reduction_index, self.block)

    @property
    def loading_column(self) -> Optional[int]:
        """Column of M being copied to shared memory, if loading."""
        return self.reduction_index if self.is_loading else None

    @property
    def loading_row(self) -> Optional[int]:
        """Row of N being copied to shared memory, if loading."""
        return self.reduction_index if self.is_loading else None

    def progress(self, row: int, col: int) -> int:
        return self.cell_progress[row][col]

    def progress_grid(self) -> np.ndarray:
        """Cell progress as a MATRIX_SIZE x MATRIX_SIZE integer array."""
        return np.array(self.cell_progress, dtype=np.int64)

    @property
    def completed_cells(self) -> int:
        return sum(value == 100 for row in self.cell_progress for value in row)

    def description(self) -> str:
        """Human-readable summary of what the active thread is doing."""
        t_row, t_col = self.thread_index
        if self.is_loading:
            return (
                "Loading tiles from global memory to shared memory: "
                f"Thread({t_row},{t_col}) loads elements"
            )
        b, k = self.block, self.reduction_index
        return (
            f"Performing computation: Thread({t_row},{t_col}) "
            f"computing P[{b},{b}] += M[{b},{k}] * N[{k},{b}]"
        )


def compute_state(step: int, total_steps: int = TOTAL_STEPS) -> SimulationState:
    """
    Derive the full kernel state for `step`.

    Args:
        step: Position on the timeline, expected in [0, total_steps].
            Clamping is the caller's job (see StepController).
        total_steps: Length of the timeline; the phase flips at its midpoint.
    """
    tile_m, tile_n = shared_tiles_at(step)
    return SimulationState(
        step=step,
        total_steps=total_steps,
        phase=phase_at(step, total_steps),
        output_tile=output_tile_at(step, total_steps),
        block=sweep_block(step),
        reduction_index=reduction_index_at(step),
        thread_index=thread_index_at(step),
        cell_progress=_freeze(_progress_grid(step, total_steps)),
        tile_m=tile_m,
        tile_n=tile_n,
    )
