"""Index-by-index comparison of two canonical transaction lists."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .models import Transaction


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    """Outcome of :func:`compare_transactions_detailed`.

    ``mismatched_indices`` covers only the overlapping prefix; records beyond
    the shorter list are counted in ``length_difference``.
    """

    left_count: int
    right_count: int
    mismatched_indices: tuple[int, ...]

    @property
    def length_difference(self) -> int:
        return abs(self.left_count - self.right_count)

    @property
    def mismatches(self) -> int:
        return len(self.mismatched_indices) + self.length_difference

    @property
    def identical(self) -> bool:
        return self.mismatches == 0


def compare_transactions_detailed(
    left: Sequence[Transaction], right: Sequence[Transaction]
) -> ComparisonResult:
    diffs = tuple(i for i, (a, b) in enumerate(zip(left, right)) if a != b)
    return ComparisonResult(
        left_count=len(left), right_count=len(right), mismatched_indices=diffs
    )


def compare_transactions(left: Sequence[Transaction], right: Sequence[Transaction]) -> int:
    """Return the number of mismatching positions plus the length difference."""

    return compare_transactions_detailed(left, right).mismatches


__all__ = ["ComparisonResult", "compare_transactions", "compare_transactions_detailed"]
