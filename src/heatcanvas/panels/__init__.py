"""Panels drawn around and on top of the matrix."""

from .adjacent import AdjacentPanel, AttachedPanel, BoxStats
from .grid import GridOverlay
from .labels import LabelRenderer, LabelSpec
from .matrix_panel import CellAnnotation, MatrixPanel

__all__ = [
    "AdjacentPanel",
    "AttachedPanel",
    "BoxStats",
    "GridOverlay",
    "LabelRenderer",
    "LabelSpec",
    "CellAnnotation",
    "MatrixPanel",
]
