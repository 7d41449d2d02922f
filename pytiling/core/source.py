"""
Kernel source loading.

The listing is read once at startup. A missing or unreadable file never
breaks the view: the failure is logged and a fixed placeholder is shown
instead. There is no retry.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from pytiling.config import DEFAULT_SOURCE_PATH
from pytiling.core.annotator import split_lines

logger = logging.getLogger(__name__)

FALLBACK_SOURCE = "#include <stdio.h>\n#include <cuda_runtime.h>\n// Error loading code file"

PathLike = Union[str, Path]


@dataclass(frozen=True)
class SourceListing:
    """Text of the kernel listing and where it came from."""

    text: str
    path: Optional[Path] = None
    is_fallback: bool = False
    lines: List[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "lines", split_lines(self.text))

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @classmethod
    def fallback(cls, path: Optional[PathLike] = None) -> "SourceListing":
        return cls(FALLBACK_SOURCE, Path(path) if path is not None else None, True)


def load_source(path: Optional[PathLike] = None) -> SourceListing:
    """
    Read the kernel listing at `path` (default: the bundled kernel).

    Relative paths resolve against the current working directory. Any I/O
    or decoding error yields the fallback listing.
    """
    source_path = Path(path) if path is not None else DEFAULT_SOURCE_PATH
    try:
        text = source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        logger.error("Error reading kernel source %s: %s", source_path, error)
        return SourceListing.fallback(source_path)

    logger.debug("Loaded %d bytes of kernel source from %s", len(text), source_path)
    return SourceListing(text, source_path)


async def load_source_async(path: Optional[PathLike] = None) -> SourceListing:
    """Same as `load_source`, with the read done in a worker thread."""
    return await asyncio.to_thread(load_source, path)
