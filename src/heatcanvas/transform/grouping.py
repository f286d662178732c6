"""Membership grouping: contiguous blocks of rows or columns."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from ..core.validation import validate_length


class MembershipGrouping:
    """Partitions original positions by a membership label per row/column.

    Group order follows the first-seen order of labels. Labels are
    compared by their string form, so ``1`` and ``"1"`` share a group.
    """

    @staticmethod
    def labels(membership: Any, n: int, axis_name: str, names: np.ndarray | None = None) -> list[str]:
        """Validate a membership vector and return its labels as strings.

        A pandas Series indexed by the axis names is aligned by name.
        """
        if isinstance(membership, pd.Series) and names is not None:
            if set(membership.index) == set(names.tolist()) and len(membership) == n:
                membership = membership.loc[list(names)]
        values = list(membership)
        validate_length(values, n, "Membership", axis_name)
        return [str(v) for v in values]

    @staticmethod
    def groups(labels: list[str]) -> dict[str, list[int]]:
        """Return an ordered ``{label: [original indices]}`` mapping."""
        groups: dict[str, list[int]] = {}
        for idx, label in enumerate(labels):
            groups.setdefault(label, []).append(idx)
        return groups

    @staticmethod
    def boundaries(labels: list[str], permutation: np.ndarray) -> frozenset[int]:
        """Display positions where the label changes between neighbours."""
        shown = [labels[i] for i in permutation.tolist()]
        return frozenset(
            k for k in range(1, len(shown)) if shown[k] != shown[k - 1]
        )
