import pytest

from tests.helpers.factories import deposit, transfer, withdrawal
from ypbank.convert import (
    to_binary_record,
    to_csv_record,
    to_text_record,
    to_transaction,
    to_transactions,
)
from ypbank.errors import OverflowSize
from ypbank.models import BinaryRecord, CsvRecord, TextRecord, TxStatus, TxType


def _csv(tx_type: TxType, amount: int) -> CsvRecord:
    return CsvRecord(1, tx_type, 10, 20, amount, 1700000000000, TxStatus.SUCCESS, "x")


@pytest.mark.parametrize(
    ("tx_type", "expected"),
    [
        (TxType.DEPOSIT, 100),
        (TxType.TRANSFER, -100),
        (TxType.WITHDRAWAL, -100),
    ],
)
def test_textual_amounts_gain_sign_from_type(tx_type: TxType, expected: int):
    assert to_transaction(_csv(tx_type, 100)).amount == expected


def test_text_records_follow_the_same_sign_rule():
    rec = TextRecord(7, TxType.WITHDRAWAL, 1, 0, 250, 0, TxStatus.PENDING, "cash")
    assert to_transaction(rec).amount == -250


def test_back_conversion_stores_magnitude():
    assert to_csv_record(transfer()).amount == 50000
    assert to_text_record(withdrawal()).amount == 25000
    assert to_csv_record(deposit()).amount == 100000


def test_magnitude_above_i64_overflows():
    with pytest.raises(OverflowSize) as ei:
        to_transaction(_csv(TxType.DEPOSIT, 2**63))
    assert ei.value.from_type == "u64"
    assert ei.value.to_type == "i64"


def test_i64_max_magnitude_still_fits():
    assert to_transaction(_csv(TxType.TRANSFER, 2**63 - 1)).amount == -(2**63 - 1)


def test_binary_records_pass_through_unchanged():
    # A positive transfer amount is kept as stored.
    rec = BinaryRecord(5, TxType.TRANSFER, 1, 2, 300, 0, TxStatus.SUCCESS, 3, "abc")
    tx = to_transaction(rec)
    assert tx.amount == 300
    assert tx.description == "abc"


def test_missing_description_becomes_empty_in_textual_records():
    assert to_csv_record(deposit(None)).description == ""
    assert to_text_record(deposit(None)).description == ""


def test_binary_record_desc_len_counts_utf8_bytes():
    assert to_binary_record(transfer("héllo")).desc_len == 6
    assert to_binary_record(deposit(None)).desc_len == 0
    assert to_binary_record(deposit("")).desc_len == 0


def test_to_transactions_keeps_order():
    recs = [_csv(TxType.DEPOSIT, 1), _csv(TxType.TRANSFER, 2)]
    assert [tx.amount for tx in to_transactions(recs)] == [1, -2]


def test_unknown_record_type_is_rejected():
    with pytest.raises(TypeError):
        to_transaction(object())  # type: ignore[arg-type]
