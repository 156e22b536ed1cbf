"""Console utilities for tasktimer."""

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=4)
def get_console(highlight: bool = True, color: bool = True) -> Console:
    """Get a Rich Console instance for consistent output formatting.

    With ``color=False`` styles such as bold and reverse are kept but no
    colors are emitted.
    """
    return Console(highlight=highlight, no_color=not color)
