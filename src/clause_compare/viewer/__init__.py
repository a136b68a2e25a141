"""Comparison viewer for the Clause Compare Relay."""

from .comparison_viewer import ComparisonViewer, ViewerOutcome
from .view_renderer import ViewRenderer

__all__ = [
    "ComparisonViewer",
    "ViewerOutcome",
    "ViewRenderer",
]
