"""
Phase Timeline Example

Prints one row per step with the derived kernel state. Reading the table
top to bottom shows the independent clocks at work: the diagonal tile
changes every 25 steps, the reduction index every 6, and the phase flips
only once, at step 50, while block 2 is already under way.
"""

from typing import Optional

from rich.console import Console
from rich.table import Table

from pytiling import compute_state, highlighted_line
from pytiling.config import MATRIX_SIZE, TOTAL_STEPS
from pytiling.core.model import Phase
from pytiling.ui.render import progress_bar_text

console = Console()


def build_timeline_table(
    total_steps: int = TOTAL_STEPS,
    start: int = 0,
    stop: Optional[int] = None,
) -> Table:
    """Build a table describing every step in [start, stop]."""
    stop = total_steps if stop is None else min(stop, total_steps)

    table = Table(title="Tiled MatMul Timeline")
    table.add_column("Step", justify="right", style="cyan")
    table.add_column("Phase")
    table.add_column("Tile", justify="center")
    table.add_column("k", justify="right")
    table.add_column("Thread", justify="center")
    table.add_column("Line", justify="right")
    table.add_column("Active cell", justify="left")
    table.add_column("Done", justify="right")

    for step in range(max(0, start), stop + 1):
        state = compute_state(step, total_steps)
        phase_style = "yellow" if state.phase is Phase.LOAD else "magenta"
        active = ""
        if state.block < MATRIX_SIZE:
            active = progress_bar_text(state.progress(state.block, state.block))
        table.add_row(
            str(step),
            f"[{phase_style}]{state.phase.name}[/{phase_style}]",
            f"({state.output_tile.row},{state.output_tile.col})",
            str(state.reduction_index),
            f"({state.thread_index.row},{state.thread_index.col})",
            str(highlighted_line(step)),
            active,
            f"{state.completed_cells}/{MATRIX_SIZE * MATRIX_SIZE}",
        )
    return table


def run_phase_timeline(total_steps: int = TOTAL_STEPS):
    """Print the timeline table for every step."""
    console.print(build_timeline_table(total_steps))


if __name__ == "__main__":
    run_phase_timeline()
