"""MatrixPanel: the colored cell grid and its optional text overlay."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from ..canvas import Panel, RectOp, TextOp
from ..config import TextConfig
from ..core.matrix import MatrixData
from ..core.order import AxisOrder
from ..core.palette import PaletteMapper
from ..core.validation import validate_color, validate_shape
from ..layout.cell_layout import CoordinateMap


@dataclass(frozen=True)
class CellAnnotation:
    """Validated per-cell text and text colors, in original order.

    ``colors`` is None, or an object array shaped like the matrix.
    """

    text: np.ndarray
    colors: np.ndarray | None
    size: float
    default_color: str

    @classmethod
    def from_config(cls, config: TextConfig, shape: tuple[int, int]) -> CellAnnotation | None:
        """Validate a TextConfig against the matrix shape. None when there is no text."""
        colors = None
        if config.color is not None:
            if isinstance(config.color, str) or _is_rgb_tuple(config.color):
                validate_color(config.color, "X.text.col")
                colors = np.empty(shape, dtype=object)
                for index in np.ndindex(shape):
                    colors[index] = config.color
            else:
                colors = validate_shape(config.color, shape, "X.text.col")
                for index, color in np.ndenumerate(colors):
                    if color is not None:
                        validate_color(color, f"X.text.col at {index}")
        if config.text is None:
            return None
        text = validate_shape(config.text, shape, "X.text")
        return cls(
            text=text,
            colors=colors,
            size=config.size,
            default_color=config.default_color,
        )

    def text_at(self, row: int, col: int) -> str | None:
        value = self.text[row, col]
        if PaletteMapper.is_missing(value):
            return None
        return str(value)

    def color_at(self, row: int, col: int) -> Any:
        if self.colors is None or self.colors[row, col] is None:
            return self.default_color
        return self.colors[row, col]


def _is_rgb_tuple(value: Any) -> bool:
    return (
        isinstance(value, tuple)
        and len(value) in (3, 4)
        and all(isinstance(v, (int, float)) for v in value)
    )


class MatrixPanel:
    """Renders R x C cells on the unit grid ``[0, C] x [0, R]``.

    The cell at display ``(i, j)`` shows original cell
    ``(rows.permutation[i], cols.permutation[j])``; text overlay and text
    colors go through the same indirection. No contrast rule is applied:
    text without an explicit color uses the configured default.
    """

    @staticmethod
    def display_values(matrix: MatrixData, rows: AxisOrder, cols: AxisOrder) -> np.ndarray:
        return matrix.take(rows.permutation, cols.permutation)

    @staticmethod
    def render(
        matrix: MatrixData,
        rows: AxisOrder,
        cols: AxisOrder,
        palette: PaletteMapper,
        coords: CoordinateMap,
        annotation: CellAnnotation | None = None,
    ) -> Panel:
        shown = MatrixPanel.display_values(matrix, rows, cols)
        colors = palette.map_array(shown)
        ops: list = []
        for (i, j), color in np.ndenumerate(colors):
            cell = coords.cell_rect(i, j)
            ops.append(RectOp(cell.x, cell.y, cell.width, cell.height, fill=color))

        texts: list[list[str | None]] | None = None
        if annotation is not None:
            texts = []
            for i, r in enumerate(rows.permutation.tolist()):
                row_texts: list[str | None] = []
                for j, c in enumerate(cols.permutation.tolist()):
                    label = annotation.text_at(r, c)
                    row_texts.append(label)
                    if label is None:
                        continue
                    ops.append(TextOp(
                        x=coords.cols.center(j),
                        y=coords.rows.center(i),
                        text=label,
                        size=annotation.size,
                        color=annotation.color_at(r, c),
                    ))
                texts.append(row_texts)

        data: dict[str, Any] = {
            "cellColors": colors.tolist(),
            "values": [[None if np.isnan(v) else float(v) for v in row] for row in shown],
        }
        if texts is not None:
            data["cellText"] = texts
        return Panel(name="matrix", rect=coords.matrix_rect, ops=ops, data=data)
