"""
Source Annotator - picks the kernel line to highlight for a step.

The mapping is a clamped affine function of the step and knows nothing
about the listing itself. Listings shorter than the highlighted line (the
fallback text, for instance) are handled by simply marking nothing.
"""

from dataclasses import dataclass
from typing import List, Tuple

from pytiling.config import (
    FIRST_HIGHLIGHT_LINE,
    LAST_HIGHLIGHT_LINE,
    SCROLL_CONTEXT_LINES,
    STEPS_PER_LINE,
)


@dataclass(frozen=True)
class AnnotatedLine:
    """One numbered line of the listing."""
    number: int          # 1-based
    text: str
    highlighted: bool = False


def highlighted_line(step: int) -> int:
    """Line number (1-based) executing at `step`, always in [10, 40]."""
    line = FIRST_HIGHLIGHT_LINE + step // STEPS_PER_LINE
    return max(FIRST_HIGHLIGHT_LINE, min(LAST_HIGHLIGHT_LINE, line))


def split_lines(text: str) -> List[str]:
    """Split a listing verbatim on newlines. Empty text has no lines."""
    if not text:
        return []
    return text.split("\n")


def visible_window(line: int, line_count: int, height: int) -> Tuple[int, int]:
    """
    Inclusive 1-based range of lines to show so that `line` is in view.

    The highlighted line is the fifth row of the window, which is shifted
    back inside the listing when it would run past either end. A highlighted
    line beyond the listing just shows its tail.
    """
    if line_count <= 0:
        return (1, 0)
    height = max(1, height)
    first = max(1, line - SCROLL_CONTEXT_LINES + 1)
    last = first + height - 1
    if last > line_count:
        last = line_count
        first = max(1, last - height + 1)
    return (first, last)


def annotate(text: str, step: int) -> List[AnnotatedLine]:
    """Number every line of `text` and flag the one executing at `step`."""
    target = highlighted_line(step)
    return [
        AnnotatedLine(number, content, number == target)
        for number, content in enumerate(split_lines(text), start=1)
    ]
