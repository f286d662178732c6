"""AxisOrderResolver: explicit or statistic-based row/column ordering."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from ..config import AggregateOrder
from ..core.matrix import MatrixData
from ..core.order import AxisOrder
from ..core.validation import validate_axis, validate_permutation
from ..errors import DataError
from .grouping import MembershipGrouping

logger = logging.getLogger(__name__)


_STATISTICS = {"mean": np.mean, "sum": np.sum, "median": np.median}
_NAN_STATISTICS = {"mean": np.nanmean, "sum": np.nansum, "median": np.nanmedian}


class AxisOrderResolver:
    """Computes the display permutation of one axis.

    ``spec`` is one of:

    - ``None``: original order.
    - a sequence of original indices: validated as a bijection over the axis.
    - an ``AggregateOrder`` (or a statistic name, or a mapping of its
      fields): lines sorted by mean, sum or median with a stable sort, so
      ties keep their original relative order. Lines whose statistic is
      undefined sort last.

    With a membership vector, lines are first grouped into contiguous
    blocks and an aggregate ordering applies within each block.
    """

    @staticmethod
    def resolve(
        spec: Any,
        matrix: MatrixData,
        axis: str,
        membership: Any = None,
    ) -> AxisOrder:
        validate_axis(axis)
        n = matrix.axis_length(axis)
        spec = AggregateOrder.coerce(spec)

        labels = None
        if membership is not None:
            labels = MembershipGrouping.labels(
                membership, n, axis, names=matrix.axis_names(axis)
            )

        if spec is None:
            if labels is None:
                order = AxisOrder.identity(n)
            else:
                order = AxisOrder.from_groups(
                    list(MembershipGrouping.groups(labels).values())
                )
        elif isinstance(spec, AggregateOrder):
            stats = AxisOrderResolver.line_statistics(matrix, axis, spec)
            if labels is None:
                order = AxisOrder.from_permutation(
                    AxisOrderResolver.sort_indices(stats, np.arange(n), spec.ascending),
                    axis_name=axis,
                )
            else:
                order = AxisOrder.from_groups([
                    AxisOrderResolver.sort_indices(
                        stats[members], np.asarray(members), spec.ascending
                    )
                    for members in MembershipGrouping.groups(labels).values()
                ])
        else:
            perm = validate_permutation(spec, n, axis)
            boundaries = (
                MembershipGrouping.boundaries(labels, perm) if labels is not None else ()
            )
            order = AxisOrder.from_permutation(perm, boundaries, axis_name=axis)

        logger.debug("Resolved %s order %s", axis, order)
        return order

    @staticmethod
    def line_statistics(matrix: MatrixData, axis: str, spec: AggregateOrder) -> np.ndarray:
        """Return the statistic of every row (axis 'row') or column (axis 'col').

        Entirely missing lines are NaN when missing values are ignored and
        a DataError otherwise.
        """
        lines = matrix.lines(axis)
        empty = np.isnan(lines).all(axis=1)
        if empty.any() and not spec.ignore_missing:
            names = matrix.axis_names(axis)[empty].tolist()
            raise DataError(
                f"Cannot order {axis}s by {spec.statistic}: "
                f"{axis}(s) {names[:5]} are entirely missing and "
                f"ignore_missing is False."
            )
        stats = np.full(len(lines), np.nan)
        present = ~empty
        func = (_NAN_STATISTICS if spec.ignore_missing else _STATISTICS)[spec.statistic]
        if present.any():
            stats[present] = func(lines[present], axis=1)
        return stats

    @staticmethod
    def sort_indices(stats: np.ndarray, indices: np.ndarray, ascending: bool) -> np.ndarray:
        """Stable sort of ``indices`` by ``stats``; NaN statistics go last either way."""
        key = stats if ascending else -stats
        return np.asarray(indices)[np.argsort(key, kind="stable")]
