"""heatcanvas: heatmap composition with aligned side plots, labels and grids."""

from ._version import __version__
from .api import Heatmap, render
from .canvas import Canvas, Panel
from .config import (
    AggregateOrder,
    GridConfig,
    HeatmapConfig,
    LabelConfig,
    PaletteSpec,
    PlotKind,
    PointStyle,
    SidePanelConfig,
    TextConfig,
)
from .core.order import AxisOrder
from .core.palette import PaletteMapper
from .errors import ConfigurationError, DataError, HeatcanvasError

__all__ = [
    "__version__",
    "Heatmap",
    "render",
    "Canvas",
    "Panel",
    "AggregateOrder",
    "GridConfig",
    "HeatmapConfig",
    "LabelConfig",
    "PaletteSpec",
    "PlotKind",
    "PointStyle",
    "SidePanelConfig",
    "TextConfig",
    "AxisOrder",
    "PaletteMapper",
    "ConfigurationError",
    "DataError",
    "HeatcanvasError",
]
