"""Per-format record ⇄ canonical :class:`~ypbank.models.Transaction` mapping.

Sign normalization
------------------
CSV and Text store only the magnitude of ``amount``. Converting them into
canonical form re-derives the sign from ``tx_type``: transfers and withdrawals
become negative, deposits stay non-negative. Converting back stores
``abs(amount)``.

Binary stores the signed amount itself, so binary records pass through
unchanged in both directions; only ``desc_len`` is recomputed on the way out.
"""

from __future__ import annotations

from collections.abc import Iterable

from .errors import OverflowSize
from .models import (
    I64_MAX,
    U32_MAX,
    BinaryRecord,
    CsvRecord,
    FormatRecord,
    TextRecord,
    Transaction,
    TxType,
)

_NEGATIVE_TYPES = frozenset({TxType.TRANSFER, TxType.WITHDRAWAL})


def _signed_amount(magnitude: int, tx_type: TxType) -> int:
    if magnitude > I64_MAX:
        raise OverflowSize("u64", "i64", magnitude)
    return -magnitude if tx_type in _NEGATIVE_TYPES else magnitude


def to_transaction(record: FormatRecord) -> Transaction:
    """Convert one per-format record into a canonical transaction."""

    if isinstance(record, BinaryRecord):
        return Transaction(
            tx_id=record.tx_id,
            tx_type=record.tx_type,
            from_user_id=record.from_user_id,
            to_user_id=record.to_user_id,
            amount=record.amount,
            timestamp=record.timestamp,
            status=record.status,
            description=record.description,
        )
    if isinstance(record, CsvRecord | TextRecord):
        return Transaction(
            tx_id=record.tx_id,
            tx_type=record.tx_type,
            from_user_id=record.from_user_id,
            to_user_id=record.to_user_id,
            amount=_signed_amount(record.amount, record.tx_type),
            timestamp=record.timestamp,
            status=record.status,
            description=record.description,
        )
    raise TypeError(f"unsupported record type: {type(record).__name__}")


def to_csv_record(tx: Transaction) -> CsvRecord:
    return CsvRecord(
        tx_id=tx.tx_id,
        tx_type=tx.tx_type,
        from_user_id=tx.from_user_id,
        to_user_id=tx.to_user_id,
        amount=abs(tx.amount),
        timestamp=tx.timestamp,
        status=tx.status,
        description=tx.description or "",
    )


def to_text_record(tx: Transaction) -> TextRecord:
    return TextRecord(
        tx_id=tx.tx_id,
        tx_type=tx.tx_type,
        from_user_id=tx.from_user_id,
        to_user_id=tx.to_user_id,
        amount=abs(tx.amount),
        timestamp=tx.timestamp,
        status=tx.status,
        description=tx.description or "",
    )


def to_binary_record(tx: Transaction) -> BinaryRecord:
    """Convert to a binary record, computing ``desc_len`` from UTF-8 bytes.

    Raises :class:`~ypbank.errors.OverflowSize` when the encoded description
    does not fit an unsigned 32-bit length.
    """

    desc_len = len(tx.description.encode("utf-8")) if tx.description else 0
    if desc_len > U32_MAX:
        raise OverflowSize("usize", "u32", desc_len)
    return BinaryRecord(
        tx_id=tx.tx_id,
        tx_type=tx.tx_type,
        from_user_id=tx.from_user_id,
        to_user_id=tx.to_user_id,
        amount=tx.amount,
        timestamp=tx.timestamp,
        status=tx.status,
        desc_len=desc_len,
        description=tx.description,
    )


def to_transactions(records: Iterable[FormatRecord]) -> list[Transaction]:
    """Convert a batch; the first failing record aborts the whole batch."""

    return [to_transaction(r) for r in records]


__all__ = [
    "to_binary_record",
    "to_csv_record",
    "to_text_record",
    "to_transaction",
    "to_transactions",
]
