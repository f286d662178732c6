"""AxisOrder: the display permutation of one matrix axis.

Maps between original positions and display positions. Every panel aligned
to an axis reads its data through the same AxisOrder, so a reordering can
never leave a side plot or a label out of step with the matrix.
Immutable: transforms return a new AxisOrder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

import numpy as np

from .validation import validate_permutation


@dataclass(frozen=True, eq=False)
class AxisOrder:
    """A permutation of ``0..n-1`` plus optional group boundaries.

    ``permutation[display] == original``. ``boundaries`` holds display
    positions ``k`` with a group edge between display ``k - 1`` and ``k``.
    """

    permutation: np.ndarray
    boundaries: frozenset[int] = field(default_factory=frozenset)

    @classmethod
    def identity(cls, n: int) -> AxisOrder:
        return cls(permutation=np.arange(n, dtype=np.int64))

    @classmethod
    def from_permutation(
        cls,
        permutation: Any,
        boundaries: Iterable[int] = (),
        axis_name: str = "axis",
    ) -> AxisOrder:
        perm = validate_permutation(permutation, len(permutation), axis_name)
        return cls(permutation=perm, boundaries=frozenset(int(b) for b in boundaries))

    @classmethod
    def from_groups(cls, groups: Sequence[Sequence[int]]) -> AxisOrder:
        """Concatenate groups of original indices, marking a boundary between each."""
        perm: list[int] = []
        edges: set[int] = set()
        for group in groups:
            if perm and len(group) > 0:
                edges.add(len(perm))
            perm.extend(int(i) for i in group)
        return cls.from_permutation(perm, edges)

    def __post_init__(self) -> None:
        perm = np.array(self.permutation, dtype=np.int64)
        perm.flags.writeable = False
        object.__setattr__(self, "permutation", perm)
        inverse = np.empty_like(perm)
        inverse[perm] = np.arange(len(perm), dtype=np.int64)
        inverse.flags.writeable = False
        object.__setattr__(self, "_inverse", inverse)

    @property
    def size(self) -> int:
        return len(self.permutation)

    @property
    def inverse(self) -> np.ndarray:
        """``inverse[original] == display``."""
        return self._inverse

    @property
    def is_identity(self) -> bool:
        return bool(np.array_equal(self.permutation, np.arange(self.size)))

    def original_index(self, display: int) -> int:
        return int(self.permutation[display])

    def display_index(self, original: int) -> int:
        return int(self._inverse[original])

    def apply(self, values: Any) -> np.ndarray:
        """Return ``values`` (in original order) rearranged into display order."""
        return np.asarray(values)[self.permutation]

    def apply_list(self, values: Sequence) -> list:
        """Like ``apply`` but for arbitrary Python objects, element by element."""
        return [values[i] for i in self.permutation.tolist()]

    def groups(self) -> list[tuple[int, int]]:
        """Display ranges ``[start, end)`` between consecutive boundaries."""
        edges = [0, *sorted(b for b in self.boundaries if 0 < b < self.size), self.size]
        return [(a, b) for a, b in zip(edges, edges[1:])]

    def to_dict(self) -> dict:
        return {
            "permutation": self.permutation.tolist(),
            "boundaries": sorted(self.boundaries),
            "size": self.size,
        }

    def __repr__(self) -> str:
        return f"AxisOrder({self.permutation.tolist()}, boundaries={sorted(self.boundaries)})"
