from dataclasses import replace

from tests.helpers.factories import sample_batch
from ypbank.compare import compare_transactions, compare_transactions_detailed


def test_identical_lists():
    result = compare_transactions_detailed(sample_batch(), sample_batch())
    assert result.identical
    assert result.mismatches == 0
    assert compare_transactions(sample_batch(), sample_batch()) == 0


def test_single_field_difference_is_reported_by_position():
    left = sample_batch()
    right = sample_batch()
    right[1] = replace(right[1], description="changed")
    result = compare_transactions_detailed(left, right)
    assert result.mismatched_indices == (1,)
    assert not result.identical


def test_length_difference_counts_as_mismatches():
    left = sample_batch()
    right = left[:1]
    result = compare_transactions_detailed(left, right)
    assert result.mismatched_indices == ()
    assert result.length_difference == 2
    assert compare_transactions(left, right) == 2


def test_order_matters():
    left = sample_batch()
    assert compare_transactions(left, list(reversed(left))) == 2


def test_empty_lists_are_identical():
    assert compare_transactions([], []) == 0
