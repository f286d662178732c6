"""Value scaling applied to the matrix before coloring and ordering."""

from __future__ import annotations

import pandas as pd

from ..core.matrix import MatrixData
from ..core.validation import validate_axis, validate_choice
from ..config import SCALE_METHODS


def _reduce_axis(axis: str) -> int:
    # Statistics per column reduce over rows (pandas axis 0) and vice versa.
    return 0 if validate_axis(axis) == "col" else 1


def _broadcast(df: pd.DataFrame, op: str, stat: pd.Series, axis: str) -> pd.DataFrame:
    return getattr(df, op)(stat, axis=1 if axis == "col" else 0)


def scale_zscore(df: pd.DataFrame, axis: str) -> pd.DataFrame:
    """Subtract the mean and divide by the standard deviation of each column (or row).

    Constant lines are only centered. Missing values are skipped.
    """
    along = _reduce_axis(axis)
    std = df.std(axis=along).replace(0, 1)
    centered = _broadcast(df, "sub", df.mean(axis=along), axis)
    return _broadcast(centered, "div", std, axis)


def scale_center(df: pd.DataFrame, axis: str) -> pd.DataFrame:
    """Subtract the mean of each column (or row)."""
    return _broadcast(df, "sub", df.mean(axis=_reduce_axis(axis)), axis)


def scale_minmax(df: pd.DataFrame, axis: str) -> pd.DataFrame:
    """Rescale each column (or row) to [0, 1]. Constant lines map to 0."""
    along = _reduce_axis(axis)
    lo = df.min(axis=along)
    span = (df.max(axis=along) - lo).replace(0, 1)
    return _broadcast(_broadcast(df, "sub", lo, axis), "div", span, axis)


SCALERS = {
    "zscore": scale_zscore,
    "center": scale_center,
    "minmax": scale_minmax,
}


def scale_matrix(matrix: MatrixData, method: str | None, axis: str = "col") -> MatrixData:
    """Return a new MatrixData scaled per column (axis 'col') or per row (axis 'row')."""
    if method is None:
        return matrix
    validate_choice(method, SCALE_METHODS, "scale")
    return MatrixData(SCALERS[method](matrix.to_frame(), axis))
