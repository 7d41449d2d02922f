"""
Step Controller - the single owner of the current simulation step.

Every other component reads the step (or the state derived from it) and
never writes it. All mutations are clamped into [0, total_steps], so the
simulation model never sees an out-of-range value.
"""

import logging
from typing import Callable, List

from pytiling.config import TOTAL_STEPS
from pytiling.core.model import SimulationState, compute_state

logger = logging.getLogger(__name__)

StepListener = Callable[[int], None]


class StepController:
    """
    Holds one clamped integer and notifies listeners when it changes.

    Usage:
        controller = StepController()
        controller.subscribe(lambda step: print(step))
        controller.advance()   # prints 1
        controller.set_step(500)  # prints 100
    """

    def __init__(self, total_steps: int = TOTAL_STEPS):
        if total_steps < 0:
            raise ValueError(f"total_steps must be non-negative, got {total_steps}")
        self.total_steps = total_steps
        self._step = 0
        self._listeners: List[StepListener] = []

    @property
    def step(self) -> int:
        return self._step

    @property
    def at_start(self) -> bool:
        return self._step == 0

    @property
    def at_end(self) -> bool:
        return self._step == self.total_steps

    def subscribe(self, listener: StepListener):
        """Register a callback invoked with the new step after each change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: StepListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set_step(self, step: int) -> int:
        """Move to `step`, clamped into range. Returns the resulting step."""
        clamped = max(0, min(self.total_steps, int(step)))
        if clamped != step:
            logger.debug("Clamped step %s to %d", step, clamped)
        if clamped != self._step:
            self._step = clamped
            for listener in list(self._listeners):
                listener(clamped)
        return self._step

    def advance(self) -> int:
        """Step forward once; no-op at the end."""
        return self.set_step(self._step + 1)

    def retreat(self) -> int:
        """Step back once; no-op at the start."""
        return self.set_step(self._step - 1)

    def reset(self) -> int:
        return self.set_step(0)

    def state(self) -> SimulationState:
        """Simulation state for the current step."""
        return compute_state(self._step, self.total_steps)

    def __repr__(self) -> str:
        return f"StepController(step={self._step}, total_steps={self.total_steps})"
