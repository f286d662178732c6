"""Input validation with clear error messages."""

from __future__ import annotations

from typing import Any, Iterable

import numpy as np
import pandas as pd
from matplotlib import colormaps
from matplotlib.colors import is_color_like

from ..errors import ConfigurationError


def _preview(items: Iterable) -> str:
    items = list(items)
    text = f"{items[:5]}"
    if len(items) > 5:
        text += f" (and {len(items) - 5} more)"
    return text


def _numeric_column(column: pd.Series) -> pd.Series | None:
    """Convert an object column of numbers and None to float64, else None.

    pandas stores a column holding only None as object dtype; its cells are
    missing, not non-numeric.
    """
    if not pd.api.types.is_object_dtype(column.dtype):
        return None
    try:
        return pd.to_numeric(column).astype(np.float64)
    except (TypeError, ValueError):
        return None


def validate_matrix(data: Any) -> pd.DataFrame:
    """Validate that data is a numeric 2D matrix suitable for a heatmap.

    DataFrames keep their index and columns as display names. Any other
    2D array-like gets positional names "1".."R" and "1".."C". ``None``
    entries become NaN, which marks a missing cell.

    Returns a float64 DataFrame.
    """
    if isinstance(data, pd.DataFrame):
        df = data
        if df.empty:
            raise ConfigurationError(
                "Matrix is empty. Provide at least one row and one column."
            )
        non_numeric = []
        for j, dtype in enumerate(df.dtypes):
            if pd.api.types.is_numeric_dtype(dtype) and not pd.api.types.is_bool_dtype(dtype):
                continue
            column = _numeric_column(df.iloc[:, j])
            if column is None:
                non_numeric.append(df.columns[j])
                continue
            if df is data:
                df = df.copy()
            df.isetitem(j, column)
        if non_numeric:
            raise TypeError(
                f"All columns must be numeric. Non-numeric columns: "
                f"{_preview(non_numeric)}"
            )
    else:
        try:
            values = np.array(data, dtype=np.float64)
        except (TypeError, ValueError):
            raise TypeError(
                "Matrix values must be numeric (or None for missing cells)."
            ) from None
        if values.ndim != 2:
            raise ConfigurationError(
                f"Matrix must be two-dimensional, got {values.ndim} dimension(s)."
            )
        if values.size == 0:
            raise ConfigurationError(
                "Matrix is empty. Provide at least one row and one column."
            )
        n_rows, n_cols = values.shape
        df = pd.DataFrame(
            values,
            index=[str(i + 1) for i in range(n_rows)],
            columns=[str(j + 1) for j in range(n_cols)],
        )

    for axis_name, names in (("Row", df.index), ("Column", df.columns)):
        if names.has_duplicates:
            dupes = names[names.duplicated()].unique().tolist()
            raise ConfigurationError(
                f"{axis_name} names must be unique. Found duplicates: {_preview(dupes)}"
            )
    return df.astype(np.float64)


def validate_axis(axis: str) -> str:
    if axis not in ("row", "col"):
        raise ConfigurationError(f"axis must be 'row' or 'col', got '{axis}'.")
    return axis


def validate_permutation(order: Any, n: int, axis_name: str) -> np.ndarray:
    """Validate that ``order`` is a bijection over ``0..n-1``.

    Returns the permutation as an int64 array.
    """
    arr = np.asarray(order)
    if arr.ndim != 1:
        raise ConfigurationError(
            f"{axis_name} order must be a flat sequence of indices."
        )
    if arr.dtype == bool or not (
        np.issubdtype(arr.dtype, np.integer)
        or (np.issubdtype(arr.dtype, np.floating) and np.all(np.mod(arr, 1) == 0))
    ):
        raise ConfigurationError(
            f"{axis_name} order must contain integer indices, got dtype {arr.dtype}."
        )
    perm = arr.astype(np.int64)
    if len(perm) != n:
        raise ConfigurationError(
            f"{axis_name} order has {len(perm)} entries but the axis has {n}."
        )
    seen = set(perm.tolist())
    expected = set(range(n))
    if seen != expected:
        missing = sorted(expected - seen)
        extra = sorted(seen - expected)
        parts = []
        if missing:
            parts.append(f"missing: {_preview(missing)}")
        if extra:
            parts.append(f"out of range: {_preview(extra)}")
        if not parts:
            parts.append("repeated indices")
        raise ConfigurationError(
            f"{axis_name} order is not a permutation of 0..{n - 1}; {', '.join(parts)}."
        )
    return perm


def validate_length(values: Any, n: int, what: str, axis_name: str) -> None:
    if len(values) != n:
        raise ConfigurationError(
            f"{what} has {len(values)} entries but the {axis_name} axis has {n}."
        )


def validate_shape(values: Any, shape: tuple[int, int], what: str) -> np.ndarray:
    """Validate that a parallel matrix has exactly ``shape``. Returns an object array."""
    if isinstance(values, pd.DataFrame):
        values = values.to_numpy()
    if isinstance(values, (str, bytes)):
        raise ConfigurationError(f"{what} must be a 2D matrix, got a string.")
    rows: list[list] = []
    try:
        for row in values:
            # A string row would otherwise become one cell per character.
            if isinstance(row, (str, bytes)):
                raise ConfigurationError(
                    f"{what} must be a 2D matrix, but row {len(rows)} is the string {row!r}."
                )
            rows.append(list(row))
    except TypeError:
        raise ConfigurationError(f"{what} must be a 2D matrix.") from None
    widths = {len(row) for row in rows}
    if len(rows) != shape[0] or widths != {shape[1]}:
        if len(widths) > 1:
            got = f"{len(rows)} ragged rows"
        else:
            got = f"{len(rows)}x{widths.pop() if widths else 0}"
        raise ConfigurationError(
            f"{what} must have the matrix shape {shape[0]}x{shape[1]}, got {got}."
        )
    arr = np.empty(shape, dtype=object)
    for i, row in enumerate(rows):
        for j, value in enumerate(row):
            arr[i, j] = value
    return arr


def validate_color(color: Any, what: str) -> Any:
    if not is_color_like(color):
        raise ConfigurationError(f"{what} is not a valid color: {color!r}.")
    return color


def validate_colormap_name(name: str) -> str:
    """Validate that a matplotlib colormap name exists."""
    if name not in colormaps:
        raise ConfigurationError(
            f"Unknown colormap '{name}'. Use a matplotlib colormap name "
            f"like 'viridis', 'plasma', 'RdBu_r', or a list of colors."
        )
    return name


def validate_choice(value: Any, choices: Iterable, what: str) -> Any:
    choices = tuple(choices)
    if value not in choices:
        raise ConfigurationError(
            f"{what} must be one of {list(choices)}, got {value!r}."
        )
    return value


def validate_non_negative(value: float, what: str) -> float:
    value = float(value)
    if not np.isfinite(value) or value < 0:
        raise ConfigurationError(f"{what} must be a non-negative number, got {value}.")
    return value


def validate_positive(value: float, what: str) -> float:
    value = float(value)
    if not np.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{what} must be a positive number, got {value}.")
    return value
