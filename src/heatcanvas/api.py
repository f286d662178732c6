"""Heatmap: the main user-facing API (builder pattern)."""

from __future__ import annotations

import dataclasses
from typing import Any, Mapping, Sequence

import pandas as pd

from .canvas import Canvas
from .config import (
    DEFAULT_STYLE,
    AggregateOrder,
    HeatmapConfig,
    PaletteSpec,
    PlotKind,
    PointStyle,
    SidePanelConfig,
    merge_panel,
)
from .core.matrix import MatrixData
from .errors import ConfigurationError
from .layout.composer import LayoutComposer


class Heatmap:
    """Heatmap builder.

    Usage::

        import heatcanvas as hc

        canvas = (
            hc.Heatmap(matrix_df)
            .order_rows("mean")
            .attach("right", row_totals, "bar", size=0.3)
            .set_text(labels, color="white")
            .render()
        )
        canvas.to_dict()

    Every setter returns the builder. The settings themselves live in an
    immutable HeatmapConfig that each setter replaces, so ``config`` can be
    captured at any point and reused with ``render(matrix, config)``.
    """

    def __init__(self, data: Any, config: HeatmapConfig | None = None) -> None:
        self._matrix = MatrixData.coerce(data)
        self._config = config if config is not None else DEFAULT_STYLE

    @property
    def matrix(self) -> MatrixData:
        return self._matrix

    @property
    def config(self) -> HeatmapConfig:
        return self._config

    def _update(self, **changes: Any) -> Heatmap:
        self._config = dataclasses.replace(self._config, **changes)
        return self

    # --- Order ---

    def order_rows(
        self,
        order: Sequence[int] | str | AggregateOrder | None,
        ignore_missing: bool = True,
        direction: str = "ascending",
    ) -> Heatmap:
        """Set the row display order.

        Parameters
        ----------
        order : sequence of int, statistic name or AggregateOrder
            Either an explicit permutation (``order[display] == original``)
            or one of 'mean', 'sum', 'median' to sort rows by that statistic.
        ignore_missing, direction :
            Used only when ``order`` is a statistic name.
        """
        return self._update(order_rows=_order_spec(order, ignore_missing, direction))

    def order_cols(
        self,
        order: Sequence[int] | str | AggregateOrder | None,
        ignore_missing: bool = True,
        direction: str = "ascending",
    ) -> Heatmap:
        """Set the column display order. See ``order_rows``."""
        return self._update(order_cols=_order_spec(order, ignore_missing, direction))

    # --- Groups ---

    def group_rows(self, membership: Sequence | pd.Series | None) -> Heatmap:
        """Keep rows sharing a membership label together, in first-seen label order."""
        return self._update(membership_rows=membership)

    def group_cols(self, membership: Sequence | pd.Series | None) -> Heatmap:
        """Keep columns sharing a membership label together."""
        return self._update(membership_cols=membership)

    # --- Color ---

    def set_palette(
        self,
        stops: str | Sequence = "viridis",
        domain: tuple[float, float] | None = None,
        positions: Sequence[float] | None = None,
        missing_color: str | None = None,
        extreme_values_missing: bool = False,
    ) -> Heatmap:
        """Set the color stops (colormap name or colors) and value range.

        Parameters
        ----------
        stops : str or sequence of colors
            Matplotlib colormap name, or the colors to interpolate between.
        domain : (low, high), optional
            Value range. Defaults to the min/max of the non-missing values.
        positions : sequence of float, optional
            Where each color stop sits in [0, 1].
        missing_color : color, optional
            Color for missing cells.
        extreme_values_missing : bool
            Render values outside ``domain`` with the missing color
            instead of clamping them.
        """
        palette = PaletteSpec(
            stops=stops if isinstance(stops, str) else tuple(stops),
            domain=tuple(domain) if domain is not None else None,
            positions=tuple(positions) if positions is not None else None,
            missing_color=(
                missing_color if missing_color is not None else PaletteSpec.missing_color
            ),
            extreme_values_missing=extreme_values_missing,
        )
        return self._update(palette=palette)

    def set_scale(self, method: str | None, axis: str = "col") -> Heatmap:
        """Scale the matrix per column (or per row) before coloring and ordering."""
        return self._update(scale=method, scale_axis=axis)

    # --- Adjacent panels ---

    def attach(
        self,
        side: str,
        data: Any,
        plot_type: PlotKind | str = PlotKind.SCATTER,
        size: float = 0.3,
        axis_name: str | None = None,
        axis_name_size: float = 10.0,
        num_ticks: int = 3,
        limits: tuple[float, float] | None = None,
        **style: Any,
    ) -> Heatmap:
        """Attach a bar, line, scatter or box plot to one side of the matrix.

        Parameters
        ----------
        side : str
            'left' or 'right' (aligned to rows), 'top' or 'bottom' (aligned
            to columns). At most one panel per side.
        data :
            One value per row/column in original order, or for 'box' one
            collection of values per row/column.
        size : float
            Panel thickness as a fraction of the matrix panel.
        **style :
            PointStyle fields: color, point_colors, point_size, line_size,
            bar_outline_color.
        """
        if style.get("point_colors") is not None:
            style["point_colors"] = tuple(style["point_colors"])
        panel = SidePanelConfig(
            side=side,
            data=data,
            plot_type=PlotKind.parse(plot_type),
            size=size,
            axis_name=axis_name,
            axis_name_size=axis_name_size,
            style=PointStyle(**style),
            num_ticks=num_ticks,
            limits=tuple(limits) if limits is not None else None,
        )
        self._config = merge_panel(self._config, panel)
        return self

    # --- Text, labels, grid ---

    def set_text(
        self,
        text: Any,
        color: Any = None,
        size: float | None = None,
        default_color: str | None = None,
    ) -> Heatmap:
        """Overlay text on the cells.

        ``text`` and a matrix-valued ``color`` must have the matrix's shape
        and are given in original order.
        """
        changes: dict[str, Any] = {"text": text, "color": color}
        if size is not None:
            changes["size"] = size
        if default_color is not None:
            changes["default_color"] = default_color
        return self._update(text=dataclasses.replace(self._config.text, **changes))

    def set_labels(self, axis: str, **settings: Any) -> Heatmap:
        """Style the row (axis 'row') or column (axis 'col') labels.

        Accepts LabelConfig fields: side, size, text_size, text_color,
        background, angle, alignment, visible.
        """
        field_name = {"row": "row_labels", "col": "col_labels"}.get(axis)
        if field_name is None:
            raise ConfigurationError(f"axis must be 'row' or 'col', got '{axis}'.")
        labels = dataclasses.replace(getattr(self._config, field_name), **settings)
        return self._update(**{field_name: labels})

    def set_grid(self, **settings: Any) -> Heatmap:
        """Style grid lines. Accepts GridConfig fields (vline, vline_color, ...)."""
        return self._update(grid=dataclasses.replace(self._config.grid, **settings))

    # --- Title, size, legend ---

    def set_title(self, title: str, size: float | None = None) -> Heatmap:
        """Set a title displayed above the heatmap. Pass an empty string to remove it."""
        changes: dict[str, Any] = {"title": title if title else None}
        if size is not None:
            changes["title_size"] = size
        return self._update(**changes)

    def set_size(
        self,
        cell_size: float | None = None,
        width: float | None = None,
        height: float | None = None,
        margin: float | None = None,
        padding: float | None = None,
    ) -> Heatmap:
        """Control canvas geometry.

        Without ``width``/``height`` every cell is ``cell_size`` units. With
        them the matrix takes whatever the panels and margins leave, and an
        over-budget layout raises ConfigurationError.
        """
        changes = {
            name: value
            for name, value in (
                ("cell_size", cell_size),
                ("canvas_width", width),
                ("canvas_height", height),
                ("margin", margin),
                ("panel_padding", padding),
            )
            if value is not None
        }
        return self._update(**changes)

    def show_legend(self, show: bool = True) -> Heatmap:
        return self._update(legend=show)

    def set_options(self, **options: Any) -> Heatmap:
        """Apply dotted options (``order.rows``, ``X.text``, ...) in their snake_case form."""
        self._config = HeatmapConfig.from_options(options, base=self._config)
        return self

    # --- Render ---

    def render(self) -> Canvas:
        return LayoutComposer.compose(self._matrix, self._config)


def render(
    matrix: Any,
    config: HeatmapConfig | None = None,
    options: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> Canvas:
    """Render ``matrix`` in one call.

    Options come as a mapping with dotted names
    (``{"order.rows": "mean", "right.plot.type": "bar"}``) and/or as
    snake_case keywords (``order_rows="mean"``), merged over ``config``.
    """
    merged = {**(options or {}), **kwargs}
    if merged:
        config = HeatmapConfig.from_options(merged, base=config)
    return LayoutComposer.compose(matrix, config)


def _order_spec(order: Any, ignore_missing: bool, direction: str) -> Any:
    if isinstance(order, str):
        return AggregateOrder(statistic=order, ignore_missing=ignore_missing, direction=direction)
    return order
