"""Row and column label bands."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..canvas import Panel, RectOp, TextOp
from ..config import LabelConfig
from ..core.order import AxisOrder
from ..core.validation import validate_axis
from ..layout.cell_layout import CellLayout, CoordinateMap
from ..layout.geometry import Rect


LABEL_INSET = 2.0

_ANCHORS = {"left": "start", "center": "middle", "right": "end"}


@dataclass(frozen=True)
class LabelSpec:
    """A single label to render."""

    text: str
    position: float   # canvas coordinate of the cell center along the axis
    display_index: int


class LabelRenderer:
    """Places an axis's display names at cell centers in display order."""

    @staticmethod
    def compute(
        names: np.ndarray,
        order: AxisOrder,
        cell_layout: CellLayout,
    ) -> list[LabelSpec]:
        """Compute label specs for an axis.

        Parameters
        ----------
        names : axis names in original order
        order : the axis's AxisOrder
        cell_layout : the axis's CellLayout from the shared CoordinateMap
        """
        shown = order.apply_list(list(names))
        return [
            LabelSpec(text=str(name), position=cell_layout.center(i), display_index=i)
            for i, name in enumerate(shown)
        ]

    @staticmethod
    def render(
        axis: str,
        names: np.ndarray,
        order: AxisOrder,
        coords: CoordinateMap,
        rect: Rect,
        config: LabelConfig,
    ) -> Panel:
        """Build the label band for one axis.

        Row labels are aligned horizontally inside their band; column labels
        sit at the band's center line with the alignment picking the text
        anchor, so rotated labels hang from that line.
        """
        axis = validate_axis(axis)
        name = "row_labels" if axis == "row" else "col_labels"
        specs = LabelRenderer.compute(names, order, coords.for_axis(axis))
        anchor = _ANCHORS[config.alignment]

        ops: list = []
        if config.background is not None:
            ops.append(RectOp(rect.x, rect.y, rect.width, rect.height, fill=config.background))

        for spec in specs:
            if axis == "row":
                x = {
                    "left": rect.x + LABEL_INSET,
                    "center": rect.center_x,
                    "right": rect.right - LABEL_INSET,
                }[config.alignment]
                y = spec.position
            else:
                x, y = spec.position, rect.center_y
            ops.append(TextOp(
                x=x,
                y=y,
                text=spec.text,
                size=config.text_size,
                color=config.text_color,
                angle=config.angle,
                anchor=anchor,
            ))

        return Panel(
            name=name,
            rect=rect,
            ops=ops,
            data={
                "side": config.side,
                "labels": [spec.text for spec in specs],
                "positions": [float(spec.position) for spec in specs],
            },
        )
