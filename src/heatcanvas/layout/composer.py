"""LayoutComposer: validates a configuration and assembles the final canvas."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..canvas import Canvas, Panel, RectOp, TextOp
from ..config import DEFAULT_STYLE, ROW_SIDES, HeatmapConfig
from ..core.matrix import MatrixData
from ..core.palette import PaletteMapper
from ..errors import ConfigurationError
from ..panels.adjacent import AdjacentPanel, AttachedPanel
from ..panels.grid import GridOverlay
from ..panels.labels import LabelRenderer
from ..panels.matrix_panel import CellAnnotation, MatrixPanel
from ..transform.reorder import AxisOrderResolver
from ..transform.scaler import scale_matrix
from .cell_layout import CellLayout, CoordinateMap
from .geometry import Rect

logger = logging.getLogger(__name__)


MIN_CELL_SIZE = 1.0
TITLE_BAND_FACTOR = 2.0     # title band height as a multiple of the title size
LEGEND_HEIGHT = 36.0
LEGEND_BAR_HEIGHT = 12.0
LEGEND_STEPS = 32
LEGEND_TICKS = 5
LEGEND_TEXT_SIZE = 8.0


@dataclass
class LayoutSpec:
    """Where everything goes: the matrix, every band around it, total extents."""

    matrix_rect: Rect
    coords: CoordinateMap
    total_width: float
    total_height: float
    panel_rects: dict[str, Rect] = field(default_factory=dict)
    title_rect: Rect | None = None
    legend_rect: Rect | None = None

    def to_dict(self) -> dict:
        d = {
            "matrix": self.matrix_rect.to_dict(),
            **self.coords.to_dict(),
            "totalWidth": self.total_width,
            "totalHeight": self.total_height,
            "panels": {name: rect.to_dict() for name, rect in self.panel_rects.items()},
        }
        if self.title_rect is not None:
            d["title"] = self.title_rect.to_dict()
        if self.legend_rect is not None:
            d["legendPanel"] = self.legend_rect.to_dict()
        return d


def _stack(
    start: float,
    matrix_size: float,
    before: list[tuple[str, float]],
    after: list[tuple[str, float]],
    padding: float,
) -> tuple[float, dict[str, tuple[float, float]], float]:
    """Lay out bands along one dimension around the matrix.

    ``before`` runs outermost to innermost, ``after`` innermost to
    outermost. Returns the matrix start, ``{name: (start, thickness)}`` and
    the end coordinate.
    """
    spans: dict[str, tuple[float, float]] = {}
    pos = start
    for name, thickness in before:
        spans[name] = (pos, thickness)
        pos += thickness + padding
    matrix_start = pos
    pos += matrix_size
    for name, thickness in after:
        pos += padding
        spans[name] = (pos, thickness)
        pos += thickness
    return matrix_start, spans, pos


class LayoutComposer:
    """Computes the full layout for a heatmap and composes the canvas.

    Bands are stacked outward from the matrix: label bands first, then the
    adjacent panels, then (vertically) the title above and the legend below.
    Adjacent panels and label bands are sized as a fraction of the matrix
    along the perpendicular dimension.
    """

    def __init__(self, config: HeatmapConfig) -> None:
        self._config = config

    def _bands(
        self,
        dimension: str,
        fractions: dict[str, float],
    ) -> tuple[list[tuple[str, float]], list[tuple[str, float]]]:
        """Bands on both sides of the matrix, thickness as a fraction of the matrix."""
        config = self._config
        if dimension == "x":
            labels, sides, label_name = config.row_labels, ("left", "right"), "row_labels"
        else:
            labels, sides, label_name = config.col_labels, ("top", "bottom"), "col_labels"
        before: list[tuple[str, float]] = []
        after: list[tuple[str, float]] = []
        if sides[0] in fractions:
            before.append((sides[0], fractions[sides[0]]))
        if labels.visible and labels.side == sides[0]:
            before.append((label_name, labels.size))
        if labels.visible and labels.side == sides[1]:
            after.append((label_name, labels.size))
        if sides[1] in fractions:
            after.append((sides[1], fractions[sides[1]]))
        return before, after

    def _fixed_bands(self) -> tuple[list[tuple[str, float]], list[tuple[str, float]]]:
        """Vertical bands with an absolute size: title above, legend below."""
        config = self._config
        top = [("title", config.title_size * TITLE_BAND_FACTOR)] if config.title else []
        bottom = [("legend", LEGEND_HEIGHT)] if config.legend else []
        return top, bottom

    def _matrix_extent(
        self,
        n_cells: int,
        canvas_size: float | None,
        fractional: list[tuple[str, float]],
        fixed: list[tuple[str, float]],
        what: str,
    ) -> float:
        """Matrix size along one dimension: cell-based, or what a fixed canvas leaves."""
        config = self._config
        if canvas_size is None:
            return n_cells * config.cell_size
        n_bands = len(fractional) + len(fixed)
        reserved = 2 * config.margin + n_bands * config.panel_padding + sum(t for _, t in fixed)
        available = (canvas_size - reserved) / (1.0 + sum(f for _, f in fractional))
        if available < n_cells * MIN_CELL_SIZE:
            raise ConfigurationError(
                f"The declared panel sizes and margins exceed the canvas {what} "
                f"of {canvas_size}: {n_cells} cells would get "
                f"{max(available, 0.0) / n_cells:.2f} units each "
                f"(minimum {MIN_CELL_SIZE})."
            )
        return available

    def compute(self, n_rows: int, n_cols: int, fractions: dict[str, float]) -> LayoutSpec:
        """Compute positions for an ``n_rows`` x ``n_cols`` matrix.

        ``fractions`` maps each attached side to its size fraction.
        """
        config = self._config
        x_before, x_after = self._bands("x", fractions)
        y_before, y_after = self._bands("y", fractions)
        title_band, legend_band = self._fixed_bands()

        width = self._matrix_extent(
            n_cols, config.canvas_width, x_before + x_after, [], "width"
        )
        height = self._matrix_extent(
            n_rows, config.canvas_height, y_before + y_after, title_band + legend_band, "height"
        )

        matrix_x, x_spans, x_end = _stack(
            config.margin,
            width,
            [(name, f * width) for name, f in x_before],
            [(name, f * width) for name, f in x_after],
            config.panel_padding,
        )
        matrix_y, y_spans, y_end = _stack(
            config.margin,
            height,
            title_band + [(name, f * height) for name, f in y_before],
            [(name, f * height) for name, f in y_after] + legend_band,
            config.panel_padding,
        )
        total_width = x_end + config.margin
        total_height = y_end + config.margin

        coords = CoordinateMap(
            rows=CellLayout(n_rows, height / n_rows, offset=matrix_y),
            cols=CellLayout(n_cols, width / n_cols, offset=matrix_x),
        )
        panel_rects = {
            name: Rect(start, matrix_y, thickness, height)
            for name, (start, thickness) in x_spans.items()
        }
        title_rect = legend_rect = None
        for name, (start, thickness) in y_spans.items():
            if name == "title":
                title_rect = Rect(config.margin, start, total_width - 2 * config.margin, thickness)
            elif name == "legend":
                legend_rect = Rect(matrix_x, start, width, thickness)
            else:
                panel_rects[name] = Rect(matrix_x, start, width, thickness)

        return LayoutSpec(
            matrix_rect=coords.matrix_rect,
            coords=coords,
            total_width=total_width,
            total_height=total_height,
            panel_rects=panel_rects,
            title_rect=title_rect,
            legend_rect=legend_rect,
        )

    @staticmethod
    def compose(matrix: Any, config: HeatmapConfig | None = None) -> Canvas:
        """Validate ``config`` against ``matrix`` and build the canvas.

        Every check runs before the first drawing op is created, so a
        failure never leaves a partial canvas behind.
        """
        config = config if config is not None else DEFAULT_STYLE
        config.validate()
        data = scale_matrix(MatrixData.coerce(matrix), config.scale, config.scale_axis)

        annotation = CellAnnotation.from_config(config.text, data.shape)
        attached: dict[str, AttachedPanel] = {
            panel.side: AdjacentPanel.from_config(panel, data) for panel in config.panels
        }
        rows = AxisOrderResolver.resolve(
            config.order_rows, data, "row", membership=config.membership_rows
        )
        cols = AxisOrderResolver.resolve(
            config.order_cols, data, "col", membership=config.membership_cols
        )
        palette = PaletteMapper.from_spec(config.palette, data)
        layout = LayoutComposer(config).compute(
            data.n_rows, data.n_cols, {side: p.size for side, p in attached.items()}
        )
        coords = layout.coords

        panels: dict[str, Panel] = {}
        if layout.title_rect is not None:
            rect = layout.title_rect
            panels["title"] = Panel(
                name="title",
                rect=rect,
                ops=[TextOp(rect.center_x, rect.center_y, config.title, config.title_size, "#000000")],
                data={"text": config.title},
            )
        panels["matrix"] = MatrixPanel.render(data, rows, cols, palette, coords, annotation)
        panels["grid"] = GridOverlay.render(rows, cols, coords, config.grid)
        for axis, labels, order in (
            ("row", config.row_labels, rows),
            ("col", config.col_labels, cols),
        ):
            name = f"{axis}_labels"
            if name in layout.panel_rects:
                panels[name] = LabelRenderer.render(
                    axis, data.axis_names(axis), order, coords, layout.panel_rects[name], labels
                )
        for side, panel in attached.items():
            order = rows if side in ROW_SIDES else cols
            panels[side] = AdjacentPanel.render(panel, order, coords, layout.panel_rects[side])
        if layout.legend_rect is not None:
            panels["legend"] = _legend_panel(palette, layout.legend_rect)

        logger.debug(
            "Composed %dx%d heatmap on a %.1fx%.1f canvas with panels %s",
            data.n_rows, data.n_cols, layout.total_width, layout.total_height, list(panels),
        )
        return Canvas(
            width=layout.total_width,
            height=layout.total_height,
            panels=panels,
            coordinates=coords,
            row_order=rows,
            col_order=cols,
            palette_domain=palette.domain,
            title=config.title,
        )


def _legend_panel(palette: PaletteMapper, rect: Rect) -> Panel:
    """Horizontal color bar with value ticks and a missing-value swatch at its right."""
    swatch = LEGEND_BAR_HEIGHT
    bar_width = max(rect.width - 3 * swatch, swatch)
    lo, hi = palette.domain
    stops = palette.legend_stops(LEGEND_STEPS)
    step = bar_width / len(stops)

    ops: list = [
        RectOp(rect.x + k * step, rect.y, step, LEGEND_BAR_HEIGHT, fill=stop["color"])
        for k, stop in enumerate(stops)
    ]
    ticks = palette.legend_ticks(LEGEND_TICKS)
    for t in ticks:
        frac = 0.5 if hi == lo else (t - lo) / (hi - lo)
        ops.append(TextOp(
            rect.x + frac * bar_width,
            rect.y + LEGEND_BAR_HEIGHT + LEGEND_TEXT_SIZE + 2,
            f"{t:g}", LEGEND_TEXT_SIZE, "#000000",
        ))
    swatch_x = rect.x + bar_width + 2 * swatch
    ops.append(RectOp(swatch_x, rect.y, swatch, LEGEND_BAR_HEIGHT, fill=palette.missing_color))
    ops.append(TextOp(
        swatch_x + swatch / 2,
        rect.y + LEGEND_BAR_HEIGHT + LEGEND_TEXT_SIZE + 2,
        "NA", LEGEND_TEXT_SIZE, "#000000",
    ))
    return Panel(
        name="legend",
        rect=rect,
        ops=ops,
        data={
            "stops": stops,
            "ticks": ticks,
            "tickLabels": [f"{t:g}" for t in ticks],
            "missingColor": palette.missing_color,
        },
    )
