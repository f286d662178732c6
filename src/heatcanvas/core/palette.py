"""PaletteMapper: scalar values to colors via interpolated color stops."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import numpy as np
from matplotlib import colormaps
from matplotlib.colors import Colormap, LinearSegmentedColormap, to_hex, to_rgba
from matplotlib.ticker import MaxNLocator

from ..errors import ConfigurationError
from .validation import validate_color, validate_colormap_name

logger = logging.getLogger(__name__)


class PaletteMapper:
    """Maps scalar values to hex colors over a fixed domain.

    The colormap is sampled into a 256-entry lookup table, so equal values
    under an equal domain always produce the same color. Missing values
    (None or NaN) map to the missing color no matter the domain.
    """

    __slots__ = ("_cmap", "_stops", "_lo", "_hi", "_missing_color", "_extreme_missing", "_keep_alpha")

    LUT_SIZE = 256

    def __init__(
        self,
        stops: str | Sequence = "viridis",
        domain: tuple[float, float] = (0.0, 1.0),
        missing_color: Any = "#c8c8c8",
        positions: Sequence[float] | None = None,
        extreme_values_missing: bool = False,
    ) -> None:
        lo, hi = (float(v) for v in domain)
        if not (np.isfinite(lo) and np.isfinite(hi)):
            raise ConfigurationError(f"Palette domain must be finite, got ({lo}, {hi}).")
        if lo > hi:
            raise ConfigurationError(f"Palette domain is reversed: {lo} > {hi}.")
        self._lo = lo
        self._hi = hi
        self._stops = stops if isinstance(stops, str) else tuple(stops)
        self._cmap = self._build_cmap(self._stops, positions)
        validate_color(missing_color, "Missing-value color")
        self._missing_color = to_hex(missing_color, keep_alpha=to_rgba(missing_color)[3] < 1)
        self._extreme_missing = bool(extreme_values_missing)
        self._keep_alpha = (
            not isinstance(self._stops, str)
            and any(to_rgba(c)[3] < 1 for c in self._stops)
        )

    @classmethod
    def from_spec(cls, spec, matrix) -> PaletteMapper:
        """Build a mapper from a PaletteSpec, deriving the domain from the matrix if unset."""
        domain = spec.domain if spec.domain is not None else matrix.finite_range()
        logger.debug(
            "Palette domain %s (%s)", domain, "explicit" if spec.domain is not None else "auto"
        )
        return cls(
            stops=spec.stops,
            domain=domain,
            missing_color=spec.missing_color,
            positions=spec.positions,
            extreme_values_missing=spec.extreme_values_missing,
        )

    def _build_cmap(self, stops: str | tuple, positions: Sequence[float] | None) -> Colormap:
        if isinstance(stops, str):
            if positions is not None:
                raise ConfigurationError(
                    "Stop positions only apply to an explicit list of colors."
                )
            return colormaps[validate_colormap_name(stops)].resampled(self.LUT_SIZE)
        if len(stops) == 0:
            raise ConfigurationError("A palette needs at least one color stop.")
        for i, color in enumerate(stops):
            validate_color(color, f"Palette stop {i}")
        colors = list(stops) if len(stops) > 1 else [stops[0], stops[0]]
        if positions is None:
            return LinearSegmentedColormap.from_list("heatcanvas", colors, N=self.LUT_SIZE)
        pos = [float(p) for p in positions]
        if len(pos) != len(stops):
            raise ConfigurationError(
                f"Got {len(pos)} stop positions for {len(stops)} colors."
            )
        if len(stops) == 1:
            pos = [0.0, 1.0]
        if pos[0] != 0.0 or pos[-1] != 1.0 or any(b < a for a, b in zip(pos, pos[1:])):
            raise ConfigurationError(
                "Stop positions must increase from 0 to 1."
            )
        return LinearSegmentedColormap.from_list(
            "heatcanvas", list(zip(pos, colors)), N=self.LUT_SIZE
        )

    @property
    def domain(self) -> tuple[float, float]:
        return (self._lo, self._hi)

    @property
    def missing_color(self) -> str:
        return self._missing_color

    @property
    def stops(self) -> str | tuple:
        return self._stops

    @staticmethod
    def is_missing(value: Any) -> bool:
        if value is None:
            return True
        try:
            return bool(np.isnan(value))
        except TypeError:
            return False

    def normalize(self, value: float) -> float:
        """Position of ``value`` along the palette, clamped to [0, 1]."""
        if self._hi == self._lo:
            return 0.5
        normalized = (float(value) - self._lo) / (self._hi - self._lo)
        return max(0.0, min(1.0, normalized))

    def map(self, value: Any) -> str:
        """Map a scalar to a hex color string."""
        if self.is_missing(value):
            return self._missing_color
        if self._extreme_missing and not (self._lo <= float(value) <= self._hi):
            return self._missing_color
        return to_hex(self._cmap(self.normalize(value)), keep_alpha=self._keep_alpha)

    def map_array(self, values: np.ndarray) -> np.ndarray:
        """Map every entry of an array, keeping its shape. Returns an object array."""
        values = np.asarray(values, dtype=np.float64)
        out = np.empty(values.shape, dtype=object)
        for index, value in np.ndenumerate(values):
            out[index] = self.map(value)
        return out

    def legend_ticks(self, n_ticks: int = 5) -> list[float]:
        """Tick values for a color bar, inside the domain."""
        if self._hi == self._lo:
            return [self._lo]
        ticks = MaxNLocator(nbins=n_ticks).tick_values(self._lo, self._hi)
        eps = (self._hi - self._lo) * 1e-9
        return [float(t) for t in ticks if self._lo - eps <= t <= self._hi + eps]

    def legend_stops(self, n: int = 11) -> list[dict]:
        """Evenly spaced (value, color) samples across the domain."""
        return [
            {"value": float(v), "color": self.map(v)}
            for v in np.linspace(self._lo, self._hi, n)
        ]

    def __repr__(self) -> str:
        stops = self._stops if isinstance(self._stops, str) else f"{len(self._stops)} stops"
        return f"PaletteMapper({stops!r}, domain=({self._lo}, {self._hi}))"
