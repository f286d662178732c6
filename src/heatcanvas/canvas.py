"""Canvas description: renderer-agnostic drawing instructions.

A Canvas is the only output of a render. It lists named panels, each
with a bounding rectangle and a flat list of drawing ops in canvas units
(origin top-left, y grows downward). Turning ops into pixels or vectors is
left to whichever backend consumes them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Union

from .layout.geometry import Rect


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class _Op:
    op = ""

    def to_dict(self) -> dict:
        d = {"op": self.op}
        for key, value in asdict(self).items():
            d[_camel(key)] = list(value) if isinstance(value, tuple) else value
        return d


@dataclass(frozen=True)
class RectOp(_Op):
    """A filled rectangle, optionally outlined."""

    op = "rect"
    x: float
    y: float
    width: float
    height: float
    fill: str
    stroke: str | None = None
    stroke_width: float = 0.0


@dataclass(frozen=True)
class LineOp(_Op):
    op = "line"
    x0: float
    y0: float
    x1: float
    y1: float
    color: str
    width: float


@dataclass(frozen=True)
class PolylineOp(_Op):
    op = "polyline"
    points: tuple[tuple[float, float], ...]
    color: str
    width: float


@dataclass(frozen=True)
class PointOp(_Op):
    op = "point"
    x: float
    y: float
    size: float
    color: str


@dataclass(frozen=True)
class TextOp(_Op):
    """Text anchored at (x, y). ``anchor`` is 'start', 'middle' or 'end'."""

    op = "text"
    x: float
    y: float
    text: str
    size: float
    color: str
    angle: float = 0.0
    anchor: str = "middle"


DrawingOp = Union[RectOp, LineOp, PolylineOp, PointOp, TextOp]


@dataclass
class Panel:
    """A named region of the canvas and the ops drawn in it.

    ``data`` carries the panel's values in display order so callers can
    inspect what was drawn without decoding the ops.
    """

    name: str
    rect: Rect
    ops: list[DrawingOp] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)

    def ops_of(self, kind: type) -> list:
        return [op for op in self.ops if isinstance(op, kind)]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "rect": self.rect.to_dict(),
            "ops": [op.to_dict() for op in self.ops],
            "data": self.data,
        }


@dataclass
class Canvas:
    """The composed heatmap: extents, panels and the shared coordinate map."""

    width: float
    height: float
    panels: dict[str, Panel]
    coordinates: Any
    row_order: Any
    col_order: Any
    palette_domain: tuple[float, float]
    title: str | None = None

    def panel(self, name: str) -> Panel:
        try:
            return self.panels[name]
        except KeyError:
            raise KeyError(
                f"No panel named '{name}'. Available: {list(self.panels)}"
            ) from None

    def __contains__(self, name: str) -> bool:
        return name in self.panels

    @property
    def cell_colors(self) -> list[list[str]]:
        """Cell colors of the matrix panel in display order."""
        return self.panels["matrix"].data["cellColors"]

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "title": self.title,
            "paletteDomain": list(self.palette_domain),
            "coordinates": self.coordinates.to_dict(),
            "rowOrder": self.row_order.to_dict(),
            "colOrder": self.col_order.to_dict(),
            "panels": {name: panel.to_dict() for name, panel in self.panels.items()},
        }
