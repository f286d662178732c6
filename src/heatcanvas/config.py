"""Configuration structures and default styles.

Every setting lives in a frozen dataclass whose field defaults form the
default style. User overrides produce new instances via
``dataclasses.replace``; nothing here is mutated at render time.

``HeatmapConfig.from_options`` accepts dotted option names
(``order.rows``, ``X.text``, ``grid.hline.col``,
...) and their snake_case spellings (``order_rows``, ``X_text``, ...).
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from .core.validation import (
    validate_choice,
    validate_color,
    validate_non_negative,
    validate_positive,
)
from .errors import ConfigurationError


SIDES = ("top", "bottom", "left", "right")
ROW_SIDES = ("left", "right")
COL_SIDES = ("top", "bottom")

STATISTICS = ("mean", "sum", "median")
DIRECTIONS = ("ascending", "descending")
ALIGNMENTS = ("left", "center", "right")
SCALE_METHODS = ("zscore", "center", "minmax")


class PlotKind(str, Enum):
    """The closed set of adjacent-panel plot kinds."""

    BAR = "bar"
    LINE = "line"
    SCATTER = "scatter"
    BOX = "box"

    @property
    def takes_distribution(self) -> bool:
        return self is PlotKind.BOX

    @classmethod
    def parse(cls, value: Any) -> PlotKind:
        if isinstance(value, cls):
            return value
        aliases = {"barplot": "bar", "boxplot": "box", "scatterplot": "scatter"}
        key = aliases.get(value, value)
        try:
            return cls(key)
        except ValueError:
            raise ConfigurationError(
                f"Unknown plot type {value!r}. Use one of {[k.value for k in cls]}."
            ) from None


def side_axis(side: str) -> str:
    """'row' for left/right panels, 'col' for top/bottom panels."""
    validate_choice(side, SIDES, "side")
    return "row" if side in ROW_SIDES else "col"


@dataclass(frozen=True)
class AggregateOrder:
    """Order an axis by a per-row or per-column statistic."""

    statistic: str = "mean"
    ignore_missing: bool = True
    direction: str = "ascending"

    def __post_init__(self) -> None:
        validate_choice(self.statistic, STATISTICS, "statistic")
        validate_choice(self.direction, DIRECTIONS, "direction")

    @property
    def ascending(self) -> bool:
        return self.direction == "ascending"

    @classmethod
    def coerce(cls, spec: Any) -> Any:
        """Turn statistic names and mappings into AggregateOrder.

        Explicit permutations and ``None`` are returned unchanged.
        """
        if isinstance(spec, str):
            return cls(statistic=spec)
        if isinstance(spec, Mapping):
            unknown = set(spec) - {"statistic", "ignore_missing", "direction"}
            if unknown:
                raise ConfigurationError(
                    f"Unknown aggregate order keys: {sorted(unknown)}."
                )
            return cls(**spec)
        return spec


@dataclass(frozen=True)
class PaletteSpec:
    """Color stops, value domain and the missing-value color.

    ``stops`` is a matplotlib colormap name or a sequence of colors.
    ``positions`` optionally places the stops in [0, 1]. Values outside an
    explicit ``domain`` clamp to the end stops unless
    ``extreme_values_missing`` is set, in which case they take the missing
    color.
    """

    stops: str | tuple = "viridis"
    domain: tuple[float, float] | None = None
    positions: tuple[float, ...] | None = None
    missing_color: str = "#c8c8c8"
    extreme_values_missing: bool = False


@dataclass(frozen=True)
class PointStyle:
    color: str = "#4e79a7"
    point_colors: tuple | None = None
    point_size: float = 2.0
    line_size: float = 1.0
    bar_outline_color: str | None = None


@dataclass(frozen=True)
class SidePanelConfig:
    """One adjacent panel: what to plot, how, and on which side."""

    side: str
    data: Any
    plot_type: PlotKind = PlotKind.SCATTER
    size: float = 0.3
    axis_name: str | None = None
    axis_name_size: float = 10.0
    style: PointStyle = field(default_factory=PointStyle)
    num_ticks: int = 3
    limits: tuple[float, float] | None = None

    @property
    def axis(self) -> str:
        return side_axis(self.side)


@dataclass(frozen=True)
class LabelConfig:
    """Axis label band.

    ``size`` is the band thickness as a fraction of the matrix panel's
    thickness along the perpendicular axis, like adjacent panel sizes.
    """

    side: str
    size: float = 0.2
    text_size: float = 10.0
    text_color: str = "#000000"
    background: str | None = None
    angle: float = 0.0
    alignment: str = "center"
    visible: bool = True


@dataclass(frozen=True)
class GridConfig:
    vline: bool = True
    vline_color: str = "#ffffff"
    vline_size: float = 0.5
    hline: bool = True
    hline_color: str = "#ffffff"
    hline_size: float = 0.5
    force_grid_hline: bool = False
    force_grid_vline: bool = False


@dataclass(frozen=True)
class TextConfig:
    """Per-cell text overlay.

    ``color`` is a single color or a matrix of colors shaped like the
    heatmap matrix. Without it every label uses ``default_color``.
    """

    text: Any = None
    color: Any = None
    size: float = 8.0
    default_color: str = "#000000"


@dataclass(frozen=True)
class HeatmapConfig:
    """Everything one render needs besides the matrix itself."""

    order_rows: Any = None
    order_cols: Any = None
    membership_rows: Any = None
    membership_cols: Any = None
    palette: PaletteSpec = field(default_factory=PaletteSpec)
    panels: tuple[SidePanelConfig, ...] = ()
    row_labels: LabelConfig = field(default_factory=lambda: LabelConfig(side="left"))
    col_labels: LabelConfig = field(default_factory=lambda: LabelConfig(side="bottom"))
    grid: GridConfig = field(default_factory=GridConfig)
    text: TextConfig = field(default_factory=TextConfig)
    title: str | None = None
    title_size: float = 14.0
    scale: str | None = None
    scale_axis: str = "col"
    cell_size: float = 20.0
    canvas_width: float | None = None
    canvas_height: float | None = None
    margin: float = 30.0
    panel_padding: float = 4.0
    legend: bool = False

    def panel(self, side: str) -> SidePanelConfig | None:
        for panel in self.panels:
            if panel.side == side:
                return panel
        return None

    def validate(self) -> None:
        """Check the settings that do not depend on the matrix."""
        seen: set[str] = set()
        for panel in self.panels:
            validate_choice(panel.side, SIDES, "side")
            if panel.side in seen:
                raise ConfigurationError(
                    f"Two panels claim the '{panel.side}' side; attach at most one per side."
                )
            seen.add(panel.side)
            PlotKind.parse(panel.plot_type)
            validate_positive(panel.size, f"{panel.side} plot size")
            validate_positive(panel.axis_name_size, f"{panel.side} axis name size")
            validate_color(panel.style.color, f"{panel.side} plot color")
            if panel.style.bar_outline_color is not None:
                validate_color(panel.style.bar_outline_color, f"{panel.side} bar outline color")
            validate_non_negative(panel.style.point_size, f"{panel.side} point size")
            validate_non_negative(panel.style.line_size, f"{panel.side} line size")
            if int(panel.num_ticks) < 1:
                raise ConfigurationError(f"{panel.side} tick count must be at least 1.")
            if panel.limits is not None:
                _validate_range(panel.limits, f"{panel.side} plot limits")

        validate_choice(self.row_labels.side, ROW_SIDES, "row label side")
        validate_choice(self.col_labels.side, COL_SIDES, "column label side")
        for name, labels in (("row", self.row_labels), ("column", self.col_labels)):
            validate_non_negative(labels.size, f"{name} label size")
            validate_positive(labels.text_size, f"{name} label text size")
            validate_color(labels.text_color, f"{name} label text color")
            if labels.background is not None:
                validate_color(labels.background, f"{name} label background")
            validate_choice(labels.alignment, ALIGNMENTS, f"{name} label alignment")

        validate_color(self.grid.vline_color, "grid.vline.col")
        validate_color(self.grid.hline_color, "grid.hline.col")
        validate_non_negative(self.grid.vline_size, "grid.vline.size")
        validate_non_negative(self.grid.hline_size, "grid.hline.size")

        validate_positive(self.text.size, "X.text.size")
        validate_color(self.text.default_color, "default text color")

        validate_positive(self.title_size, "title size")
        validate_positive(self.cell_size, "cell size")
        validate_non_negative(self.margin, "margin")
        validate_non_negative(self.panel_padding, "panel padding")
        for name, value in (("canvas width", self.canvas_width), ("canvas height", self.canvas_height)):
            if value is not None:
                validate_positive(value, name)
        if self.scale is not None:
            validate_choice(self.scale, SCALE_METHODS, "scale")
        validate_choice(self.scale_axis, ("row", "col"), "scale axis")
        validate_color(self.palette.missing_color, "missing color")
        if self.palette.domain is not None:
            _validate_range(self.palette.domain, "palette domain")

    @classmethod
    def from_options(
        cls,
        options: Mapping[str, Any],
        base: HeatmapConfig | None = None,
    ) -> HeatmapConfig:
        """Merge flat, dotted options into ``base`` (defaults when omitted).

        Per-side panel settings are given either as a mapping under the side
        name (``{"right": {"series": s, "plot.type": "bar"}}``) or as flat
        keys (``"right.plot.type": "bar"``).
        """
        config = base if base is not None else DEFAULT_STYLE
        sections: dict[str | None, dict[str, Any]] = {}
        sides: dict[str, dict[str, Any]] = {}

        for raw_key, value in options.items():
            key = _normalize_key(raw_key)
            side, _, rest = key.partition(".")
            if side in SIDES:
                if not rest:
                    if not isinstance(value, Mapping):
                        raise ConfigurationError(
                            f"Option '{raw_key}' must be a mapping of panel settings."
                        )
                    for sub_key, sub_value in value.items():
                        _put_side(sides, side, _normalize_key(sub_key), sub_value, raw_key)
                else:
                    _put_side(sides, side, rest, value, raw_key)
                continue
            if key not in OPTION_FIELDS:
                raise ConfigurationError(f"Unknown option '{raw_key}'.")
            section, name = OPTION_FIELDS[key]
            sections.setdefault(section, {})[name] = _convert(name, value)

        top_level = sections.pop(None, {})
        for section, updates in sections.items():
            top_level[section] = dataclasses.replace(getattr(config, section), **updates)

        if sides:
            panels = {panel.side: panel for panel in config.panels}
            for side, updates in sides.items():
                style_updates = updates.pop("style", {})
                existing = panels.get(side)
                if existing is None:
                    if "data" not in updates:
                        raise ConfigurationError(
                            f"Panel '{side}' needs a series (or distribution) to plot."
                        )
                    existing = SidePanelConfig(side=side, data=updates.pop("data"))
                merged = dataclasses.replace(existing, **updates)
                if style_updates:
                    merged = dataclasses.replace(
                        merged, style=dataclasses.replace(merged.style, **style_updates)
                    )
                panels[side] = merged
            top_level["panels"] = tuple(panels[s] for s in SIDES if s in panels)

        return dataclasses.replace(config, **top_level)


def _validate_range(value: Any, what: str) -> None:
    try:
        lo, hi = (float(v) for v in value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{what} must be a (low, high) pair, got {value!r}.") from None
    if lo > hi:
        raise ConfigurationError(f"{what} is reversed: {lo} > {hi}.")


def _normalize_key(key: str) -> str:
    return str(key).replace("_", ".")


def _convert(name: str, value: Any) -> Any:
    if name in ("domain", "limits", "positions") and value is not None:
        return tuple(value)
    if name == "stops" and not isinstance(value, str):
        return tuple(value)
    if name == "point_colors" and value is not None:
        return tuple(value)
    if name == "plot_type":
        return PlotKind.parse(value)
    return value


def _put_side(
    sides: dict[str, dict[str, Any]],
    side: str,
    key: str,
    value: Any,
    raw_key: str,
) -> None:
    if key not in SIDE_FIELDS:
        raise ConfigurationError(f"Unknown panel option '{key}' in '{raw_key}'.")
    section, name = SIDE_FIELDS[key]
    updates = sides.setdefault(side, {})
    if section is None:
        updates[name] = _convert(name, value)
    else:
        updates.setdefault(section, {})[name] = _convert(name, value)


# Default settings. Overrides always go through dataclasses.replace.
DEFAULT_STYLE = HeatmapConfig()


# Dotted option name -> (HeatmapConfig section or None, field name).
OPTION_FIELDS: dict[str, tuple[str | None, str]] = {
    "order.rows": (None, "order_rows"),
    "order.cols": (None, "order_cols"),
    "membership.rows": (None, "membership_rows"),
    "membership.cols": (None, "membership_cols"),
    "title": (None, "title"),
    "title.size": (None, "title_size"),
    "scale": (None, "scale"),
    "scale.axis": (None, "scale_axis"),
    "cell.size": (None, "cell_size"),
    "canvas.width": (None, "canvas_width"),
    "canvas.height": (None, "canvas_height"),
    "margin": (None, "margin"),
    "padding": (None, "panel_padding"),
    "legend": (None, "legend"),
    "heat.pal": ("palette", "stops"),
    "heat.pal.values": ("palette", "positions"),
    "heat.lim": ("palette", "domain"),
    "heat.na.col": ("palette", "missing_color"),
    "extreme.values.na": ("palette", "extreme_values_missing"),
    "X.text": ("text", "text"),
    "X.text.col": ("text", "color"),
    "X.text.size": ("text", "size"),
    "X.text.default.col": ("text", "default_color"),
    "grid.vline": ("grid", "vline"),
    "grid.vline.col": ("grid", "vline_color"),
    "grid.vline.size": ("grid", "vline_size"),
    "grid.hline": ("grid", "hline"),
    "grid.hline.col": ("grid", "hline_color"),
    "grid.hline.size": ("grid", "hline_size"),
    "force.grid.hline": ("grid", "force_grid_hline"),
    "force.grid.vline": ("grid", "force_grid_vline"),
}

for _prefix, _section in (("row", "row_labels"), ("col", "col_labels")):
    OPTION_FIELDS.update({
        f"{_prefix}.label": (_section, "visible"),
        f"{_prefix}.label.side": (_section, "side"),
        f"{_prefix}.label.size": (_section, "size"),
        f"{_prefix}.label.col": (_section, "background"),
        f"{_prefix}.label.text.col": (_section, "text_color"),
        f"{_prefix}.label.text.size": (_section, "text_size"),
        f"{_prefix}.label.text.angle": (_section, "angle"),
        f"{_prefix}.label.text.alignment": (_section, "alignment"),
    })

# Per-side option name -> (SidePanelConfig sub-section or None, field name).
SIDE_FIELDS: dict[str, tuple[str | None, str]] = {
    "series": (None, "data"),
    "data": (None, "data"),
    "plot.type": (None, "plot_type"),
    "plot.size": (None, "size"),
    "axis.name": (None, "axis_name"),
    "axis.name.size": (None, "axis_name_size"),
    "num.ticks": (None, "num_ticks"),
    "lim": (None, "limits"),
    "col": ("style", "color"),
    "obs.col": ("style", "point_colors"),
    "point.size": ("style", "point_size"),
    "line.size": ("style", "line_size"),
    "bar.col": ("style", "bar_outline_color"),
}


def merge_panel(
    config: HeatmapConfig,
    panel: SidePanelConfig,
) -> HeatmapConfig:
    """Return ``config`` with ``panel`` attached, refusing a taken side."""
    if config.panel(panel.side) is not None:
        raise ConfigurationError(
            f"A panel is already attached to the '{panel.side}' side."
        )
    return dataclasses.replace(config, panels=config.panels + (panel,))
