"""Cell positions along one axis and the coordinate map shared by all panels."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .geometry import Rect


class CellLayout:
    """Maps display positions along one axis to canvas coordinates.

    Cells are uniform. Display position ``i`` spans
    ``[offset + i * cell_size, offset + (i + 1) * cell_size)``; the unit
    grid coordinate ``u`` maps to ``offset + u * cell_size``.
    """

    def __init__(self, n_cells: int, cell_size: float, offset: float = 0.0) -> None:
        self._n_cells = n_cells
        self._cell_size = float(cell_size)
        self._offset = float(offset)
        self._positions = self._offset + np.arange(n_cells, dtype=np.float64) * self._cell_size
        self._positions.flags.writeable = False

    @property
    def n_cells(self) -> int:
        return self._n_cells

    @property
    def positions(self) -> np.ndarray:
        """Start coordinate of each cell (read-only)."""
        return self._positions

    @property
    def cell_size(self) -> float:
        return self._cell_size

    @property
    def start(self) -> float:
        return self._offset

    @property
    def end(self) -> float:
        return self._offset + self.total_size

    @property
    def total_size(self) -> float:
        return self._n_cells * self._cell_size

    def to_canvas(self, u: float) -> float:
        """Unit-grid coordinate to canvas coordinate."""
        return self._offset + u * self._cell_size

    def center(self, i: int) -> float:
        return self.to_canvas(i + 0.5)

    def centers(self) -> np.ndarray:
        return self._positions + self._cell_size / 2

    def edge(self, k: int) -> float:
        """Coordinate of the boundary before display position ``k`` (``0 <= k <= n``)."""
        return self.to_canvas(k)

    def to_list(self) -> list[float]:
        return self._positions.tolist()


@dataclass(frozen=True)
class CoordinateMap:
    """The single row/column to canvas mapping passed to every panel.

    ``cols`` drives x for the matrix, top/bottom panels, column labels and
    vertical grid lines; ``rows`` drives y for the matrix, left/right
    panels, row labels and horizontal grid lines.
    """

    rows: CellLayout
    cols: CellLayout

    def for_axis(self, axis: str) -> CellLayout:
        return self.rows if axis == "row" else self.cols

    @property
    def matrix_rect(self) -> Rect:
        return Rect(
            x=self.cols.start,
            y=self.rows.start,
            width=self.cols.total_size,
            height=self.rows.total_size,
        )

    def cell_rect(self, i: int, j: int) -> Rect:
        """Rectangle of the cell at display row ``i``, display column ``j``."""
        return Rect(
            x=self.cols.edge(j),
            y=self.rows.edge(i),
            width=self.cols.cell_size,
            height=self.rows.cell_size,
        )

    def to_dict(self) -> dict:
        return {
            "rowPositions": self.rows.to_list(),
            "colPositions": self.cols.to_list(),
            "rowCellSize": self.rows.cell_size,
            "colCellSize": self.cols.cell_size,
        }
