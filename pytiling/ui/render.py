"""
Rich renderables for the tiled matmul visualizer.

Each function takes a SimulationState (and, for the code panel, a
SourceListing) and returns something a rich Console or a textual widget can
draw. Nothing here mutates state, so the console examples and the dashboard
share the same drawing code.
"""

from typing import Optional

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from pytiling.config import MATRIX_SIZE, TILE_SIZE
from pytiling.core.annotator import highlighted_line, visible_window
from pytiling.core.model import Phase, SharedTile, SimulationState
from pytiling.core.source import SourceListing

# Blue marks data in flight, red the element a thread is reading,
# green accumulated results.
LOADING_STYLE = "black on bright_blue"
FOCUS_STYLE = "bold white on red"
FILLED_STYLE = "black on blue"
EMPTY_STYLE = "dim"
PROGRESS_STYLE = "green"

BAR_WIDTH = 6
FULL_CHAR = "█"
EMPTY_CHAR = "░"


def progress_bar_text(progress: int, width: int = BAR_WIDTH) -> Text:
    """A fixed-width bar filled left to right in proportion to `progress`."""
    filled = (max(0, min(100, progress)) * width) // 100
    text = Text()
    text.append(FULL_CHAR * filled, style=PROGRESS_STYLE)
    text.append(EMPTY_CHAR * (width - filled), style=EMPTY_STYLE)
    return text


def _matrix_table() -> Table:
    return Table(show_header=False, box=box.SQUARE, padding=(0, 1), show_lines=True)


def render_input_matrix(state: SimulationState, name: str) -> Panel:
    """
    Draw input matrix M or N.

    While loading, the column of M (row of N) being copied into shared
    memory is shaded. The element read by the active thread is outlined in
    red in either phase.
    """
    name = name.upper()
    if name == "M":
        focus = state.focus_m
    elif name == "N":
        focus = state.focus_n
    else:
        raise ValueError(f"Unknown input matrix: {name!r} (expected 'M' or 'N')")

    table = _matrix_table()
    for _ in range(MATRIX_SIZE):
        table.add_column(justify="center")

    for row in range(MATRIX_SIZE):
        cells = []
        for col in range(MATRIX_SIZE):
            style = ""
            if name == "M" and state.loading_column == col:
                style = LOADING_STYLE
            elif name == "N" and state.loading_row == row:
                style = LOADING_STYLE
            if (row, col) == focus:
                style = FOCUS_STYLE
            cells.append(Text(f"{name}{row},{col}", style=style))
        table.add_row(*cells)

    return Panel(table, title=f"Matrix {name}", border_style="cyan", expand=False)


def render_result_matrix(state: SimulationState) -> Panel:
    """Draw the result matrix P with per-cell accumulation progress."""
    table = _matrix_table()
    for _ in range(MATRIX_SIZE):
        table.add_column(justify="center")

    for row in range(MATRIX_SIZE):
        cells = []
        for col in range(MATRIX_SIZE):
            progress = state.progress(row, col)
            is_active = (row, col) == state.output_tile
            cell = Text(f"P{row},{col}", style="bold" if is_active else "")
            cell.append("\n")
            cell.append_text(progress_bar_text(progress))
            cell.append(f"\n{progress:3d}%", style="dim")
            cells.append(cell)
        table.add_row(*cells)

    return Panel(table, title="Result Matrix P", border_style="green", expand=False)


def render_shared_tile(tile: SharedTile) -> Table:
    """Draw one 2x2 shared-memory tile with its loaded slots shaded."""
    table = Table(
        title=f"Tile {tile.matrix}",
        show_header=False,
        box=box.SQUARE,
        padding=(0, 1),
        show_lines=True,
    )
    for _ in range(TILE_SIZE):
        table.add_column(justify="center")
    for row in range(TILE_SIZE):
        cells = []
        for col in range(TILE_SIZE):
            r, c = tile.element(row, col)
            style = FILLED_STYLE if tile.is_filled(row, col) else ""
            cells.append(Text(f"{tile.matrix}{r},{c}", style=style))
        table.add_row(*cells)
    return table


def render_status(state: SimulationState) -> Text:
    """Phase header plus the description of the active thread."""
    color = "yellow" if state.phase is Phase.LOAD else "magenta"
    text = Text()
    text.append(f"Execution Phase {state.phase.value} ", style="bold")
    text.append(f"({state.phase.label})\n", style=color)
    text.append(state.description())
    return text


def render_shared_memory(state: SimulationState) -> Panel:
    """Shared-memory tiles side by side, followed by the status line."""
    tiles = Table.grid(padding=(0, 4))
    tiles.add_column()
    tiles.add_column()
    tiles.add_row(render_shared_tile(state.tile_m), render_shared_tile(state.tile_n))
    body = Group(tiles, Text(""), Panel(render_status(state), box=box.ROUNDED))
    return Panel(body, title="Shared Memory", border_style="blue", expand=False)


def render_source(
    listing: SourceListing,
    line: int,
    height: int = 24,
    theme: str = "monokai",
) -> Panel:
    """
    Kernel listing scrolled to keep `line` in view, with `line` highlighted.

    A highlighted line past the end of the listing shows the tail of the
    listing with nothing highlighted.
    """
    title = f"CUDA Code [dim](line {line})[/dim]"
    if listing.path is not None:
        title = f"{listing.path.name} [dim](line {line})[/dim]"

    if listing.line_count == 0:
        return Panel(Text("(empty listing)", style="dim"), title=title)

    first, last = visible_window(line, listing.line_count, height)
    syntax = Syntax(
        listing.text,
        "cuda",
        theme=theme,
        line_numbers=True,
        line_range=(first, last),
        highlight_lines={line},
    )
    border = "red" if listing.is_fallback else "yellow"
    return Panel(syntax, title=title, border_style=border)


def render_step_bar(step: int, total_steps: int) -> Table:
    """Timeline bar with a 'Step n of total' caption."""
    grid = Table.grid(expand=True, padding=(0, 2))
    grid.add_column(ratio=1)
    grid.add_column(no_wrap=True)
    grid.add_row(
        ProgressBar(total=max(total_steps, 1), completed=step),
        Text(f"Step {step} of {total_steps}", style="bold"),
    )
    return grid


def render_frame(
    state: SimulationState,
    listing: Optional[SourceListing] = None,
    line: Optional[int] = None,
    source_height: int = 24,
) -> RenderableType:
    """
    The full visualization for one step: matrices and shared memory on the
    left, the annotated kernel on the right, the timeline below.
    """
    inputs = Table.grid(padding=(0, 2))
    inputs.add_column()
    inputs.add_column()
    inputs.add_row(render_input_matrix(state, "M"), render_input_matrix(state, "N"))

    graphics = Group(inputs, render_result_matrix(state), render_shared_memory(state))

    layout = Table.grid(expand=True, padding=(0, 2))
    layout.add_column()
    if listing is not None:
        if line is None:
            line = highlighted_line(state.step)
        layout.add_column(ratio=1)
        layout.add_row(graphics, render_source(listing, line, source_height))
    else:
        layout.add_row(graphics)

    return Group(layout, render_step_bar(state.step, state.total_steps))
