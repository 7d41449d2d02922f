"""
Tiled Matrix Multiplication Walkthrough

Renders the visualizer at a handful of interesting steps:
- step 0: the very first load into shared memory
- step 24: the end of the first diagonal block
- step 25: the sweep moves to P[1,1]
- step 50: the phase flips to COMPUTE halfway through the timeline
- step 75: the last diagonal block
- step 100: every output cell is complete
"""

from typing import Iterable, Optional

from rich.console import Console
from rich.rule import Rule

from pytiling import VisualizerConfig, compute_state, highlighted_line, load_source
from pytiling.core.source import SourceListing
from pytiling.ui.render import render_frame

console = Console()

KEY_STEPS = (0, 24, 25, 50, 75, 100)


def render_step(
    step: int,
    listing: Optional[SourceListing] = None,
    config: Optional[VisualizerConfig] = None,
):
    """Render one step of the kernel to the console."""
    config = config or VisualizerConfig()
    state = compute_state(step, config.total_steps)
    console.print(
        render_frame(state, listing, highlighted_line(step), config.source_height)
    )


def run_walkthrough(
    steps: Iterable[int] = KEY_STEPS,
    config: Optional[VisualizerConfig] = None,
):
    """Run the walkthrough over `steps`."""
    config = config or VisualizerConfig()
    listing = load_source(config.resolved_source_path)

    console.print("[bold cyan]Tiled Matrix Multiplication Walkthrough[/bold cyan]")
    console.print("=" * 60)
    console.print(f"Kernel source: [yellow]{listing.path}[/yellow]")
    if listing.is_fallback:
        console.print("[red]Kernel source unavailable, showing placeholder[/red]")
    console.print()

    for step in steps:
        state = compute_state(step, config.total_steps)
        console.print(Rule(f"Step {step}: {state.phase.label}", style="magenta"))
        render_step(step, listing, config)
        console.print()


if __name__ == "__main__":
    run_walkthrough()
