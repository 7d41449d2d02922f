"""
Tiling Dashboard - a Textual terminal UI for stepping through the kernel.

Shows:
- Input matrices M and N with the elements being loaded and read
- Result matrix P with per-cell accumulation progress
- Shared memory tiles and the current execution phase
- The kernel listing scrolled to the executing line
"""

from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, ScrollableContainer, Vertical
from textual.reactive import reactive
from textual.timer import Timer
from textual.widgets import Button, Footer, Header, Label, ProgressBar, Static
from rich.console import RenderableType
from rich.text import Text

from pytiling.config import VisualizerConfig
from pytiling.core.annotator import highlighted_line
from pytiling.core.controller import StepController
from pytiling.core.model import SimulationState
from pytiling.core.source import SourceListing, load_source_async
from pytiling.ui.render import (
    render_input_matrix,
    render_result_matrix,
    render_shared_memory,
    render_source,
)


class MatrixWidget(Static):
    """Widget drawing one of the matrices M, N or P."""

    def __init__(self, matrix: str, **kwargs):
        super().__init__(**kwargs)
        self.matrix = matrix.upper()
        self._state: Optional[SimulationState] = None

    def update_state(self, state: SimulationState):
        """Update the simulation state to draw."""
        self._state = state
        self.refresh(layout=True)

    def render(self) -> RenderableType:
        if self._state is None:
            return Text(f"Matrix {self.matrix}")
        if self.matrix == "P":
            return render_result_matrix(self._state)
        return render_input_matrix(self._state, self.matrix)


class SharedMemoryWidget(Static):
    """Widget drawing the shared memory tiles and the phase status."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._state: Optional[SimulationState] = None

    def update_state(self, state: SimulationState):
        self._state = state
        self.refresh(layout=True)

    def render(self) -> RenderableType:
        if self._state is None:
            return Text("Shared Memory")
        return render_shared_memory(self._state)


class SourceWidget(Static):
    """Widget drawing the kernel listing around the highlighted line."""

    def __init__(self, height: int = 24, **kwargs):
        super().__init__(**kwargs)
        self._listing: Optional[SourceListing] = None
        self._line = highlighted_line(0)
        self._height = height

    @property
    def listing(self) -> Optional[SourceListing]:
        return self._listing

    @property
    def line(self) -> int:
        return self._line

    def update_listing(self, listing: SourceListing):
        """Replace the listing. The latest load wins."""
        self._listing = listing
        self.refresh(layout=True)

    def update_line(self, line: int):
        self._line = line
        self.refresh()

    def render(self) -> RenderableType:
        if self._listing is None:
            return Text("Loading kernel source...", style="dim")
        return render_source(self._listing, self._line, self._height)


class TilingDashboard(App):
    """
    The tiled matrix multiplication dashboard.

    The StepController is the only thing that changes the step; every
    widget is redrawn from a freshly computed state whenever it does.
    """

    TITLE = "Tiled Matrix Multiplication"

    CSS = """
    #main {
        height: 1fr;
    }

    #graphics {
        width: 1fr;
        border: solid green;
        padding: 0 1;
    }

    #inputs {
        height: auto;
    }

    #source-container {
        width: 1fr;
        border: solid yellow;
        padding: 0 1;
    }

    #controls {
        dock: bottom;
        height: 3;
        background: $surface;
        padding: 0 1;
    }

    #step-bar {
        width: 1fr;
        padding: 1 1;
    }

    #step-label {
        padding: 1 1;
    }

    Button {
        margin-right: 1;
    }
    """

    BINDINGS = [
        Binding("left", "retreat", "Prev", priority=True),
        Binding("right", "advance", "Next", priority=True),
        Binding("home", "first", "First", priority=True),
        Binding("end", "last", "Last", priority=True),
        Binding("space", "toggle_play", "Play/Pause", priority=True),
        ("r", "reset", "Reset"),
        ("q", "quit", "Quit"),
    ]

    running = reactive(False)

    def __init__(
        self,
        config: Optional[VisualizerConfig] = None,
        controller: Optional[StepController] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.config = config or VisualizerConfig()
        self.controller = controller or StepController(self.config.total_steps)
        self._timer: Optional[Timer] = None

    @property
    def listing(self) -> Optional[SourceListing]:
        return self.query_one("#source", SourceWidget).listing

    def compose(self) -> ComposeResult:
        """Create the dashboard layout."""
        yield Header()

        with Horizontal(id="main"):
            with ScrollableContainer(id="graphics"):
                with Horizontal(id="inputs"):
                    yield MatrixWidget("M", id="matrix-m")
                    yield MatrixWidget("N", id="matrix-n")
                yield MatrixWidget("P", id="matrix-p")
                yield SharedMemoryWidget(id="shared-memory")

            with Vertical(id="source-container"):
                yield SourceWidget(height=self.config.source_height, id="source")

        with Horizontal(id="controls"):
            yield Button("Prev", id="prev-btn", variant="primary")
            yield Button("Play", id="play-btn", variant="success")
            yield Button("Pause", id="pause-btn", variant="warning")
            yield Button("Next", id="next-btn", variant="primary")
            yield ProgressBar(
                total=max(self.controller.total_steps, 1),
                show_eta=False,
                id="step-bar",
            )
            yield Label("", id="step-label")

        yield Footer()

    def on_mount(self):
        """Draw the first step and start loading the kernel listing."""
        self.controller.subscribe(self._on_step_changed)
        self._update_display()
        self.run_worker(self._load_source(), exclusive=True, group="source")

    async def _load_source(self):
        listing = await load_source_async(self.config.resolved_source_path)
        self.query_one("#source", SourceWidget).update_listing(listing)
        if listing.is_fallback:
            self.notify(
                f"Could not load {listing.path}; showing placeholder source",
                severity="warning",
            )

    def on_unmount(self):
        self.controller.unsubscribe(self._on_step_changed)

    def _on_step_changed(self, step: int):
        # The controller can outlive the app; only redraw while widgets exist.
        if not self.is_running or not self.screen_stack:
            return
        self._update_display()

    def _update_display(self):
        """Redraw every widget from the controller's current step."""
        state = self.controller.state()

        for widget in self.query(MatrixWidget):
            widget.update_state(state)
        self.query_one("#shared-memory", SharedMemoryWidget).update_state(state)
        self.query_one("#source", SourceWidget).update_line(highlighted_line(state.step))

        self.query_one("#step-bar", ProgressBar).update(progress=state.step)
        self.query_one("#step-label", Label).update(
            f"Step {state.step} of {state.total_steps}"
        )

    def action_advance(self):
        self.controller.advance()

    def action_retreat(self):
        self.controller.retreat()

    def action_first(self):
        self.controller.set_step(0)

    def action_last(self):
        self.controller.set_step(self.controller.total_steps)

    def action_reset(self):
        """Stop playback and return to step 0."""
        self.action_pause()
        self.controller.reset()

    def action_run(self):
        """Start advancing automatically."""
        if self.running:
            return
        if self.controller.at_end:
            self.controller.reset()

        self.running = True
        self._timer = self.set_interval(self.config.play_interval, self._auto_step)

    def action_pause(self):
        self.running = False
        if self._timer:
            self._timer.stop()
            self._timer = None

    def action_toggle_play(self):
        if self.running:
            self.action_pause()
        else:
            self.action_run()

    def _auto_step(self):
        """Auto-step callback for continuous playback."""
        if self.controller.at_end:
            self.action_pause()
            return
        self.controller.advance()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        button_id = event.button.id

        if button_id == "prev-btn":
            self.action_retreat()
        elif button_id == "next-btn":
            self.action_advance()
        elif button_id == "play-btn":
            self.action_run()
        elif button_id == "pause-btn":
            self.action_pause()


def run_dashboard(config: Optional[VisualizerConfig] = None):
    """
    Run the dashboard.

    Usage:
        run_dashboard(VisualizerConfig(source_path="kernels/matMulTiling.cu"))
    """
    app = TilingDashboard(config)
    app.run()
