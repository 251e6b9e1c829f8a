"""
Scroll Controller Module - Stick-to-bottom auto-follow

Sample the viewport before a batch of rows is added, restore the bottom
position afterwards only if the viewer was already there.
"""
from typing import Protocol


class Viewport(Protocol):
    """The parts of a scrollable widget the controller needs"""

    @property
    def scroll_y(self) -> float: ...

    @property
    def max_scroll_y(self) -> float: ...

    def scroll_end(self, *, animate: bool = True, **kwargs) -> None: ...


class ScrollController:
    """Decides whether a content update should keep the view pinned to the bottom"""

    def __init__(self, tolerance: float = 1.0):
        self.tolerance = tolerance
        self.follow = True

    def sample(self, viewport: Viewport) -> bool:
        """Record whether the viewport is at its bottom edge; call before updating"""
        self.follow = viewport.max_scroll_y - viewport.scroll_y <= self.tolerance
        return self.follow

    def restore(self, viewport: Viewport) -> None:
        """Re-pin to the bottom after updating, if the last sample said so"""
        if self.follow:
            viewport.scroll_end(animate=False)
