"""AdjacentPanel: bar, line, scatter and box plots aligned to a matrix axis.

Left/right panels align to rows, top/bottom panels to columns. Input data
is always given in original order; the panel reads it through the axis's
AxisOrder, so the value drawn at display position ``i`` is
``series[order.permutation[i]]``.

Plot kinds form a closed set, so dispatch is a table from PlotKind to a
renderer function rather than a class hierarchy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import numpy as np
import pandas as pd
from matplotlib.ticker import MaxNLocator

from ..canvas import LineOp, Panel, PointOp, PolylineOp, RectOp, TextOp
from ..config import SIDES, PlotKind, PointStyle, SidePanelConfig, side_axis
from ..core.matrix import MatrixData
from ..core.order import AxisOrder
from ..core.validation import (
    validate_choice,
    validate_color,
    validate_length,
    validate_positive,
)
from ..errors import ConfigurationError
from ..layout.cell_layout import CellLayout, CoordinateMap
from ..layout.geometry import Rect


BOX_WIDTH_FRACTION = 0.6
TICK_LENGTH = 3.0
TICK_TEXT_SIZE = 8.0
AXIS_INK = "#333333"


@dataclass(frozen=True)
class BoxStats:
    """Five-number summary of one category."""

    minimum: float
    q1: float
    median: float
    q3: float
    maximum: float

    @classmethod
    def of(cls, values: np.ndarray) -> BoxStats | None:
        if len(values) == 0:
            return None
        return cls(
            minimum=float(np.min(values)),
            q1=float(np.percentile(values, 25)),
            median=float(np.median(values)),
            q3=float(np.percentile(values, 75)),
            maximum=float(np.max(values)),
        )

    def to_dict(self) -> dict:
        return {
            "min": self.minimum,
            "q1": self.q1,
            "median": self.median,
            "q3": self.q3,
            "max": self.maximum,
        }


@dataclass(frozen=True, eq=False)
class AttachedPanel:
    """A validated adjacent panel, data still in original order.

    Scalar kinds carry ``values``; the box kind carries ``distributions``
    (missing values already dropped).
    """

    side: str
    kind: PlotKind
    size: float
    style: PointStyle
    values: np.ndarray | None = None
    distributions: tuple[np.ndarray, ...] | None = None
    point_colors: tuple | None = None
    axis_name: str | None = None
    axis_name_size: float = 10.0
    num_ticks: int = 3
    limits: tuple[float, float] | None = None

    @property
    def axis(self) -> str:
        return side_axis(self.side)

    @property
    def length(self) -> int:
        if self.values is not None:
            return len(self.values)
        return len(self.distributions)


class AdjacentPanel:
    """Validates and renders side plots sharing the matrix coordinate map."""

    @staticmethod
    def attach(
        side: str,
        data: Any,
        plot_kind: PlotKind | str,
        size_fraction: float,
        styling: PointStyle | None = None,
        *,
        matrix: MatrixData,
        axis_name: str | None = None,
        axis_name_size: float = 10.0,
        num_ticks: int = 3,
        limits: tuple[float, float] | None = None,
    ) -> AttachedPanel:
        """Validate a side plot against the matrix axis it aligns to.

        Parameters
        ----------
        side : 'top', 'bottom', 'left' or 'right'
        data : series (bar/line/scatter) or list of collections (box), in
            original order. A pandas Series or DataFrame indexed by the
            axis names is aligned by name.
        plot_kind : PlotKind or its name
        size_fraction : panel thickness as a fraction of the matrix panel's
            thickness along the perpendicular axis.
        """
        validate_choice(side, SIDES, "side")
        kind = PlotKind.parse(plot_kind)
        size = validate_positive(size_fraction, f"{side} plot size")
        style = styling if styling is not None else PointStyle()
        axis = side_axis(side)
        n = matrix.axis_length(axis)
        names = matrix.axis_names(axis)

        values = distributions = None
        if kind.takes_distribution:
            distributions = _coerce_distribution(data, names, n, side, axis)
        else:
            values = _coerce_series(data, names, n, side, axis)

        point_colors = None
        if style.point_colors is not None:
            point_colors = tuple(style.point_colors)
            validate_length(point_colors, n, f"{side} point colors", axis)
            for i, color in enumerate(point_colors):
                validate_color(color, f"{side} point color {i}")

        if limits is not None:
            lo, hi = (float(v) for v in limits)
            if not lo < hi:
                raise ConfigurationError(f"{side} plot limits must satisfy low < high.")
            limits = (lo, hi)

        return AttachedPanel(
            side=side,
            kind=kind,
            size=size,
            style=style,
            values=values,
            distributions=distributions,
            point_colors=point_colors,
            axis_name=axis_name,
            axis_name_size=axis_name_size,
            num_ticks=int(num_ticks),
            limits=limits,
        )

    @staticmethod
    def from_config(config: SidePanelConfig, matrix: MatrixData) -> AttachedPanel:
        return AdjacentPanel.attach(
            config.side,
            config.data,
            config.plot_type,
            config.size,
            config.style,
            matrix=matrix,
            axis_name=config.axis_name,
            axis_name_size=config.axis_name_size,
            num_ticks=config.num_ticks,
            limits=config.limits,
        )

    @staticmethod
    def display_values(panel: AttachedPanel, order: AxisOrder) -> np.ndarray:
        """Scalar values in display order."""
        if panel.values is None:
            raise ConfigurationError(f"The {panel.kind.value} panel has no scalar series.")
        return order.apply(panel.values)

    @staticmethod
    def display_distributions(panel: AttachedPanel, order: AxisOrder) -> list[np.ndarray]:
        if panel.distributions is None:
            raise ConfigurationError(f"The {panel.kind.value} panel has no distributions.")
        return order.apply_list(panel.distributions)

    @staticmethod
    def display_colors(panel: AttachedPanel, order: AxisOrder) -> list:
        if panel.point_colors is None:
            return [panel.style.color] * order.size
        return order.apply_list(panel.point_colors)

    @staticmethod
    def value_range(panel: AttachedPanel) -> tuple[float, float]:
        """Value-axis limits: explicit, or the data range (bars always include 0)."""
        if panel.limits is not None:
            return panel.limits
        if panel.values is not None:
            data = panel.values
        else:
            data = np.concatenate([*panel.distributions, np.empty(0)])
        finite = data[np.isfinite(data)]
        if len(finite) == 0:
            return (0.0, 1.0)
        lo, hi = float(finite.min()), float(finite.max())
        if panel.kind is PlotKind.BAR:
            lo, hi = min(lo, 0.0), max(hi, 0.0)
        if lo == hi:
            lo, hi = lo - 0.5, hi + 0.5
        return (lo, hi)

    @staticmethod
    def render(
        panel: AttachedPanel,
        order: AxisOrder,
        coords: CoordinateMap,
        rect: Rect,
    ) -> Panel:
        if order.size != panel.length:
            raise ConfigurationError(
                f"The {panel.side} panel has {panel.length} entries but its axis order has {order.size}."
            )
        lo, hi = AdjacentPanel.value_range(panel)
        scale = _ValueScale(side=panel.side, rect=rect, lo=lo, hi=hi)
        layout = coords.for_axis(panel.axis)
        ops, data = _RENDERERS[panel.kind](panel, order, layout, scale)
        ticks = _ticks(lo, hi, panel.num_ticks)
        ops.extend(_axis_ops(panel, scale, ticks))
        data.update({
            "side": panel.side,
            "kind": panel.kind.value,
            "limits": [lo, hi],
            "ticks": ticks,
            "axisName": panel.axis_name,
        })
        return Panel(name=panel.side, rect=rect, ops=ops, data=data)


@dataclass(frozen=True)
class _ValueScale:
    """Maps panel values onto the panel's thickness, growing away from the matrix."""

    side: str
    rect: Rect
    lo: float
    hi: float

    def coord(self, value: float) -> float:
        frac = (value - self.lo) / (self.hi - self.lo)
        frac = max(0.0, min(1.0, frac))
        if self.side == "right":
            return self.rect.x + frac * self.rect.width
        if self.side == "left":
            return self.rect.right - frac * self.rect.width
        if self.side == "top":
            return self.rect.bottom - frac * self.rect.height
        return self.rect.y + frac * self.rect.height

    def point(self, category: float, value: float) -> tuple[float, float]:
        v = self.coord(value)
        return (v, category) if self.side in ("left", "right") else (category, v)

    def span(self, c0: float, c1: float, v0: float, v1: float) -> Rect:
        a, b = sorted((self.coord(v0), self.coord(v1)))
        if self.side in ("left", "right"):
            return Rect(a, c0, b - a, c1 - c0)
        return Rect(c0, a, c1 - c0, b - a)


def _nullable(values: np.ndarray) -> list[float | None]:
    return [None if np.isnan(v) else float(v) for v in values]


def _render_bar(panel: AttachedPanel, order: AxisOrder, layout: CellLayout, scale: _ValueScale):
    values = AdjacentPanel.display_values(panel, order)
    colors = AdjacentPanel.display_colors(panel, order)
    outline = panel.style.bar_outline_color
    baseline = min(max(0.0, scale.lo), scale.hi)
    ops: list = []
    for i, value in enumerate(values):
        if np.isnan(value):
            continue
        r = scale.span(layout.edge(i), layout.edge(i + 1), baseline, value)
        ops.append(RectOp(
            r.x, r.y, r.width, r.height,
            fill=colors[i],
            stroke=outline,
            stroke_width=0.5 if outline is not None else 0.0,
        ))
    return ops, {"values": _nullable(values)}


def _render_line(panel: AttachedPanel, order: AxisOrder, layout: CellLayout, scale: _ValueScale):
    values = AdjacentPanel.display_values(panel, order)
    ops: list = []
    segment: list[tuple[float, float]] = []
    # Missing values break the line into separate segments.
    for i, value in enumerate([*values, np.nan]):
        if not np.isnan(value):
            segment.append(scale.point(layout.center(i), value))
            continue
        if len(segment) == 1:
            x, y = segment[0]
            ops.append(PointOp(x, y, size=panel.style.line_size, color=panel.style.color))
        elif segment:
            ops.append(PolylineOp(tuple(segment), color=panel.style.color, width=panel.style.line_size))
        segment = []
    return ops, {"values": _nullable(values)}


def _render_scatter(panel: AttachedPanel, order: AxisOrder, layout: CellLayout, scale: _ValueScale):
    values = AdjacentPanel.display_values(panel, order)
    colors = AdjacentPanel.display_colors(panel, order)
    ops: list = []
    for i, value in enumerate(values):
        if np.isnan(value):
            continue
        x, y = scale.point(layout.center(i), value)
        ops.append(PointOp(x, y, size=panel.style.point_size, color=colors[i]))
    return ops, {"values": _nullable(values)}


def _render_box(panel: AttachedPanel, order: AxisOrder, layout: CellLayout, scale: _ValueScale):
    distributions = AdjacentPanel.display_distributions(panel, order)
    colors = AdjacentPanel.display_colors(panel, order)
    ink = panel.style.bar_outline_color or AXIS_INK
    half = layout.cell_size * BOX_WIDTH_FRACTION / 2
    ops: list = []
    stats_list: list[dict | None] = []
    for i, values in enumerate(distributions):
        stats = BoxStats.of(values)
        stats_list.append(stats.to_dict() if stats is not None else None)
        if stats is None:
            continue
        c = layout.center(i)
        (x0, y0), (x1, y1) = scale.point(c, stats.minimum), scale.point(c, stats.maximum)
        ops.append(LineOp(x0, y0, x1, y1, color=ink, width=panel.style.line_size))
        box = scale.span(c - half, c + half, stats.q1, stats.q3)
        ops.append(RectOp(
            box.x, box.y, box.width, box.height,
            fill=colors[i], stroke=ink, stroke_width=panel.style.line_size,
        ))
        (x0, y0), (x1, y1) = scale.point(c - half, stats.median), scale.point(c + half, stats.median)
        ops.append(LineOp(x0, y0, x1, y1, color=ink, width=panel.style.line_size))
    return ops, {"stats": stats_list}


_RENDERERS: dict[PlotKind, Callable] = {
    PlotKind.BAR: _render_bar,
    PlotKind.LINE: _render_line,
    PlotKind.SCATTER: _render_scatter,
    PlotKind.BOX: _render_box,
}


def _ticks(lo: float, hi: float, num_ticks: int) -> list[float]:
    eps = (hi - lo) * 1e-9
    ticks = MaxNLocator(nbins=num_ticks).tick_values(lo, hi)
    return [float(t) for t in ticks if lo - eps <= t <= hi + eps]


def _axis_ops(panel: AttachedPanel, scale: _ValueScale, ticks: list[float]) -> list:
    """Tick marks and labels on the panel's outer edge across the value axis."""
    rect = scale.rect
    ops: list = []
    if panel.axis == "row":
        y = rect.bottom
        for t in ticks:
            x = scale.coord(t)
            ops.append(LineOp(x, y, x, y + TICK_LENGTH, color=AXIS_INK, width=0.5))
            ops.append(TextOp(x, y + TICK_LENGTH + TICK_TEXT_SIZE, f"{t:g}", TICK_TEXT_SIZE, AXIS_INK))
        if panel.axis_name:
            ops.append(TextOp(
                rect.center_x,
                y + TICK_LENGTH + 2 * TICK_TEXT_SIZE + panel.axis_name_size,
                panel.axis_name, panel.axis_name_size, AXIS_INK,
            ))
    else:
        x = rect.x
        for t in ticks:
            y = scale.coord(t)
            ops.append(LineOp(x - TICK_LENGTH, y, x, y, color=AXIS_INK, width=0.5))
            ops.append(TextOp(x - TICK_LENGTH - 2, y, f"{t:g}", TICK_TEXT_SIZE, AXIS_INK, anchor="end"))
        if panel.axis_name:
            ops.append(TextOp(
                x - TICK_LENGTH - 4 * TICK_TEXT_SIZE - panel.axis_name_size / 2,
                rect.center_y,
                panel.axis_name, panel.axis_name_size, AXIS_INK, angle=-90.0,
            ))
    return ops


def _align_by_name(data: Any, names: np.ndarray, n: int) -> Any:
    if len(data) == n and set(data.index) == set(names.tolist()):
        return data.loc[list(names)]
    return data


def _coerce_series(data: Any, names: np.ndarray, n: int, side: str, axis: str) -> np.ndarray:
    if isinstance(data, pd.Series):
        data = _align_by_name(data, names, n).to_numpy()
    if data is None or isinstance(data, (str, bytes)) or np.ndim(data) != 1:
        raise ConfigurationError(
            f"The {side} series must be a flat sequence of numbers "
            f"(use plot type 'box' for one collection per category)."
        )
    validate_length(data, n, f"{side} series", axis)
    try:
        values = np.array(data, dtype=np.float64)
    except (TypeError, ValueError):
        raise ConfigurationError(f"The {side} series must be numeric.") from None
    values.flags.writeable = False
    return values


def _coerce_distribution(
    data: Any, names: np.ndarray, n: int, side: str, axis: str
) -> tuple[np.ndarray, ...]:
    if isinstance(data, pd.DataFrame):
        collections = list(_align_by_name(data, names, n).to_numpy())
    elif isinstance(data, pd.Series):
        collections = list(_align_by_name(data, names, n))
    elif data is None or isinstance(data, (str, bytes)) or not hasattr(data, "__len__"):
        raise ConfigurationError(
            f"The {side} box plot needs a list with one collection of values per category."
        )
    else:
        collections = list(data)
    validate_length(collections, n, f"{side} distribution list", axis)
    out = []
    for i, collection in enumerate(collections):
        if isinstance(collection, (str, bytes)) or np.ndim(collection) != 1:
            raise ConfigurationError(
                f"Category {i} of the {side} box plot must be a flat collection of values."
            )
        try:
            values = np.array(collection, dtype=np.float64)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Category {i} of the {side} box plot must be numeric."
            ) from None
        values = values[~np.isnan(values)]
        values.flags.writeable = False
        out.append(values)
    return tuple(out)
