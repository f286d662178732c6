"""GridOverlay: separator lines between cells or between groups."""

from __future__ import annotations

from ..canvas import LineOp, Panel
from ..config import GridConfig
from ..core.order import AxisOrder
from ..layout.cell_layout import CoordinateMap


class GridOverlay:
    """Horizontal lines separate rows, vertical lines separate columns.

    By default a line sits at every interior cell boundary. With
    ``force_grid_hline`` (or ``force_grid_vline``) only the group
    boundaries of the row (or column) AxisOrder get a line.
    """

    @staticmethod
    def boundaries(order: AxisOrder, major_only: bool) -> list[int]:
        """Display positions ``k`` with a line between display ``k - 1`` and ``k``."""
        if major_only:
            return sorted(b for b in order.boundaries if 0 < b < order.size)
        return list(range(1, order.size))

    @staticmethod
    def render(
        rows: AxisOrder,
        cols: AxisOrder,
        coords: CoordinateMap,
        grid: GridConfig,
    ) -> Panel:
        rect = coords.matrix_rect
        hlines = GridOverlay.boundaries(rows, grid.force_grid_hline) if grid.hline else []
        vlines = GridOverlay.boundaries(cols, grid.force_grid_vline) if grid.vline else []

        ops: list = []
        if grid.hline_size > 0:
            for k in hlines:
                y = coords.rows.edge(k)
                ops.append(LineOp(rect.x, y, rect.right, y, color=grid.hline_color, width=grid.hline_size))
        if grid.vline_size > 0:
            for k in vlines:
                x = coords.cols.edge(k)
                ops.append(LineOp(x, rect.y, x, rect.bottom, color=grid.vline_color, width=grid.vline_size))

        return Panel(
            name="grid",
            rect=rect,
            ops=ops,
            data={"hlines": hlines, "vlines": vlines},
        )
