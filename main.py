#!/usr/bin/env python3
"""
PyTiling - An educational visualizer for tiled matrix multiplication.

This main script provides an entry point to run the console examples or
launch the interactive visualization dashboard.

Usage:
    python main.py                      # Run the walkthrough
    python main.py walkthrough          # Render the key steps of the timeline
    python main.py step 42              # Render a single step
    python main.py step 42 kernel.cu    # Render a step against another listing
    python main.py trace                # Print the state of every step
    python main.py dashboard            # Launch interactive dashboard
    python main.py dashboard kernel.cu  # Dashboard for another listing
"""

import logging
import sys
from typing import List

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from pytiling.config import VisualizerConfig

console = Console()


def configure_logging(level: int = logging.WARNING):
    """Route log records through the shared rich console."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def print_banner():
    """Print the PyTiling banner."""
    banner_text = Text()
    banner_text.append("┌────┬────┐  ┌────┬────┐     ┌────┬────┐\n", style="bold cyan")
    banner_text.append("│ M  │ M  │ ×│ N  │ N  │  =  │ P  │ P  │\n", style="bold cyan")
    banner_text.append("├────┼────┤  ├────┼────┤     ├────┼────┤\n", style="bold cyan")
    banner_text.append("│ M  │ M  │  │ N  │ N  │     │ P  │ P  │\n", style="bold cyan")
    banner_text.append("└────┴────┘  └────┴────┘     └────┴────┘\n\n", style="bold cyan")
    banner_text.append("Tiled Matrix Multiplication Visualizer\n", style="bold white")
    banner_text.append("Shared Memory Tiles | Diagonal Sweep | Annotated Kernel", style="dim")

    console.print(Panel(banner_text, border_style="cyan"))


def _config_from(args: List[str]) -> VisualizerConfig:
    """Build the config from an optional trailing source path."""
    if args:
        return VisualizerConfig(source_path=args[0])
    return VisualizerConfig()


def run_walkthrough_example(args: List[str]):
    """Render the key steps of the timeline."""
    from pytiling.examples.walkthrough import run_walkthrough
    run_walkthrough(config=_config_from(args))


def run_step_example(args: List[str]):
    """Render a single step."""
    from pytiling.examples.walkthrough import render_step
    from pytiling.core.source import load_source

    if not args:
        console.print("[red]Usage: python main.py step N \\[source][/red]")
        sys.exit(1)
    try:
        requested = int(args[0])
    except ValueError:
        console.print(f"[red]Step must be an integer, got {args[0]!r}[/red]")
        sys.exit(1)

    config = _config_from(args[1:])
    step = max(0, min(config.total_steps, requested))
    if step != requested:
        console.print(f"[yellow]Step {requested} clamped to {step}[/yellow]")

    render_step(step, load_source(config.resolved_source_path), config)


def run_trace_example(args: List[str]):
    """Print the state of every step."""
    from pytiling.examples.phase_timeline import run_phase_timeline
    run_phase_timeline()


def run_dashboard(args: List[str]):
    """Launch the interactive visualization dashboard."""
    from pytiling.ui.dashboard import run_dashboard as run_app

    print("Launching tiled matmul dashboard...")
    print("Use Left/Right to step, Space to play/pause, R to reset, Q to quit")
    print()

    run_app(_config_from(args))


def print_help(args: List[str] = ()):
    """Print usage information."""
    console.print(__doc__)
    console.print("\n[bold]Available commands:[/bold]")
    console.print("  [cyan]all[/cyan]          - Run the walkthrough (default)")
    console.print("  [cyan]walkthrough[/cyan]  - Render the key steps of the timeline")
    console.print("  [cyan]step N[/cyan]       - Render step N (clamped to the timeline)")
    console.print("  [cyan]trace[/cyan]        - Table of the derived state for every step")
    console.print("  [cyan]dashboard[/cyan]    - Interactive visualization (requires Textual)")
    console.print("  [cyan]help[/cyan]         - Show this help message")


def main():
    """Main entry point."""
    configure_logging()
    print_banner()

    if len(sys.argv) < 2:
        # No arguments - run the walkthrough
        run_walkthrough_example([])
        return

    command = sys.argv[1].lower()
    args = sys.argv[2:]

    commands = {
        "all": run_walkthrough_example,
        "walkthrough": run_walkthrough_example,
        "walk": run_walkthrough_example,
        "step": run_step_example,
        "trace": run_trace_example,
        "timeline": run_trace_example,
        "dashboard": run_dashboard,
        "ui": run_dashboard,
        "help": print_help,
        "-h": print_help,
        "--help": print_help,
    }

    if command in commands:
        commands[command](args)
    else:
        console.print(f"[red]Unknown command: {command}[/red]")
        print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
