"""MatrixData: validated, immutable matrix container."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from .validation import validate_axis, validate_matrix


class MatrixData:
    """Immutable container for a validated numeric matrix.

    Stores the matrix as a contiguous float64 numpy array (row-major)
    alongside the row and column display names. Missing cells are NaN.
    """

    __slots__ = ("_values", "_row_names", "_col_names", "_range")

    def __init__(self, data: Any) -> None:
        df = validate_matrix(data)
        self._values: np.ndarray = np.array(df.to_numpy(), dtype=np.float64, order="C")
        self._values.flags.writeable = False
        self._row_names: np.ndarray = np.array(df.index, dtype=object)
        self._col_names: np.ndarray = np.array(df.columns, dtype=object)
        self._range: tuple[float, float] | None = None

    @classmethod
    def coerce(cls, data: Any) -> MatrixData:
        """Return ``data`` unchanged if it is already a MatrixData."""
        if isinstance(data, cls):
            return data
        return cls(data)

    @property
    def values(self) -> np.ndarray:
        """Float64 matrix (n_rows, n_cols), read-only."""
        return self._values

    @property
    def row_names(self) -> np.ndarray:
        return self._row_names

    @property
    def col_names(self) -> np.ndarray:
        return self._col_names

    @property
    def shape(self) -> tuple[int, int]:
        return self._values.shape

    @property
    def n_rows(self) -> int:
        return self._values.shape[0]

    @property
    def n_cols(self) -> int:
        return self._values.shape[1]

    def axis_length(self, axis: str) -> int:
        return self.n_rows if validate_axis(axis) == "row" else self.n_cols

    def axis_names(self, axis: str) -> np.ndarray:
        return self._row_names if validate_axis(axis) == "row" else self._col_names

    def lines(self, axis: str) -> np.ndarray:
        """Rows for axis 'row', columns (as rows of the transpose) for 'col'."""
        return self._values if validate_axis(axis) == "row" else self._values.T

    def missing_mask(self) -> np.ndarray:
        return np.isnan(self._values)

    def finite_range(self) -> tuple[float, float]:
        """Return (min, max) of all finite values. Used for palette domains.

        Computed once per instance; falls back to (0.0, 1.0) when no value
        is finite.
        """
        if self._range is None:
            finite = self._values[np.isfinite(self._values)]
            if len(finite) == 0:
                self._range = (0.0, 1.0)
            else:
                self._range = (float(finite.min()), float(finite.max()))
        return self._range

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            self._values.copy(),
            index=pd.Index(self._row_names, dtype=object),
            columns=pd.Index(self._col_names, dtype=object),
        )

    def take(self, row_permutation: np.ndarray, col_permutation: np.ndarray) -> np.ndarray:
        """Return the values in display order: ``out[i, j] = values[rows[i], cols[j]]``."""
        return self._values[np.ix_(row_permutation, col_permutation)]

    def __repr__(self) -> str:
        return f"MatrixData(n_rows={self.n_rows}, n_cols={self.n_cols})"
