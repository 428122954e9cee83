"""Data models for ``ypbank``.

Two layers live here:

- The canonical :class:`Transaction`, the single record type used to compare
  or convert data across formats.
- The per-format records (:class:`CsvRecord`, :class:`TextRecord`,
  :class:`BinaryRecord`), which mirror how each format physically stores the
  same fields. CSV and Text store the amount as an unsigned magnitude and the
  description as a plain (possibly empty) string; Binary stores a signed
  amount plus an explicit description byte length.

All records are frozen dataclasses. Integer fields are range-checked on
construction so a record that exists always fits its wire representation.

Field order (exact, shared by every format)::

    TX_ID, TX_TYPE, FROM_USER_ID, TO_USER_ID, AMOUNT, TIMESTAMP, STATUS, DESCRIPTION
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Self, TypeAlias

from .errors import IncorrectField, OverflowSize, ParseError

# ---------------------------------------------------------------------------
# Integer ranges
# ---------------------------------------------------------------------------

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

_RANGES: dict[str, tuple[int, int]] = {
    "u32": (0, U32_MAX),
    "u64": (0, U64_MAX),
    "i64": (I64_MIN, I64_MAX),
}


def check_range(value: int, to_type: str, *, from_type: str = "int") -> int:
    """Return ``value`` unchanged when it fits ``to_type``; raise otherwise."""

    lo, hi = _RANGES[to_type]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer for {to_type}, got {type(value).__name__}")
    if not lo <= value <= hi:
        raise OverflowSize(from_type, to_type, value)
    return value


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TxType(Enum):
    """Transaction type. Values are the on-wire numeric codes."""

    DEPOSIT = 0
    TRANSFER = 1
    WITHDRAWAL = 2

    @property
    def code(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return _TX_TYPE_LABELS[self]

    @classmethod
    def from_code(cls, code: int) -> TxType | None:
        return _TX_TYPE_BY_CODE.get(code)

    @classmethod
    def from_label(cls, label: str) -> TxType | None:
        return _TX_TYPE_BY_LABEL.get(label.strip().upper())

    def __str__(self) -> str:
        return self.label


class TxStatus(Enum):
    """Transaction status. Values are the on-wire numeric codes."""

    SUCCESS = 0
    FAILURE = 1
    PENDING = 2

    @property
    def code(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return _TX_STATUS_LABELS[self]

    @classmethod
    def from_code(cls, code: int) -> TxStatus | None:
        return _TX_STATUS_BY_CODE.get(code)

    @classmethod
    def from_label(cls, label: str) -> TxStatus | None:
        return _TX_STATUS_BY_LABEL.get(label.strip().upper())

    def __str__(self) -> str:
        return self.label


_TX_TYPE_LABELS: dict[TxType, str] = {
    TxType.DEPOSIT: "DEPOSIT",
    TxType.TRANSFER: "TRANSFER",
    TxType.WITHDRAWAL: "WITHDRAWAL",
}
_TX_TYPE_BY_CODE: dict[int, TxType] = {t.value: t for t in _TX_TYPE_LABELS}
_TX_TYPE_BY_LABEL: dict[str, TxType] = {label: t for t, label in _TX_TYPE_LABELS.items()}

_TX_STATUS_LABELS: dict[TxStatus, str] = {
    TxStatus.SUCCESS: "SUCCESS",
    TxStatus.FAILURE: "FAILURE",
    TxStatus.PENDING: "PENDING",
}
_TX_STATUS_BY_CODE: dict[int, TxStatus] = {s.value: s for s in _TX_STATUS_LABELS}
_TX_STATUS_BY_LABEL: dict[str, TxStatus] = {label: s for s, label in _TX_STATUS_LABELS.items()}


# ---------------------------------------------------------------------------
# Field catalogue
# ---------------------------------------------------------------------------

FIELD_NAMES: tuple[str, ...] = (
    "TX_ID",
    "TX_TYPE",
    "FROM_USER_ID",
    "TO_USER_ID",
    "AMOUNT",
    "TIMESTAMP",
    "STATUS",
    "DESCRIPTION",
)


def has_field(name: str) -> bool:
    """Case-insensitive membership test against :data:`FIELD_NAMES`."""

    return name.strip().upper() in FIELD_NAMES


# ---------------------------------------------------------------------------
# Canonical record
# ---------------------------------------------------------------------------


def _check_enums(tx_type: object, status: object) -> None:
    if not isinstance(tx_type, TxType):
        raise TypeError(f"tx_type must be a TxType, got {tx_type!r}")
    if not isinstance(status, TxStatus):
        raise TypeError(f"status must be a TxStatus, got {status!r}")


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single canonical transaction.

    ``amount`` is signed: deposits are non-negative, transfers and withdrawals
    are non-positive once normalized from a CSV/Text source. Records read from
    the binary format carry the stored amount through unchanged.

    ``description`` distinguishes "absent" (``None``) from "present but empty"
    (``""``).
    """

    tx_id: int
    tx_type: TxType
    from_user_id: int
    to_user_id: int
    amount: int
    timestamp: int
    status: TxStatus
    description: str | None = None

    def __post_init__(self) -> None:
        _check_enums(self.tx_type, self.status)
        check_range(self.tx_id, "u64")
        check_range(self.from_user_id, "u64")
        check_range(self.to_user_id, "u64")
        check_range(self.amount, "i64")
        check_range(self.timestamp, "u64")
        if self.description is not None and not isinstance(self.description, str):
            raise TypeError("description must be a str or None")


# ---------------------------------------------------------------------------
# Per-format records
# ---------------------------------------------------------------------------

_UNSIGNED_RE = re.compile(r"^\+?[0-9]+$")


def _field(fields: Mapping[str, str], key: str) -> str:
    try:
        return fields[key]
    except KeyError:
        raise IncorrectField(key) from None


def _parse_unsigned(fields: Mapping[str, str], key: str, to_type: str = "u64") -> int:
    raw = _field(fields, key)
    if not _UNSIGNED_RE.fullmatch(raw):
        raise ParseError(f"cannot parse field `{key}`: {raw!r}")
    value = int(raw)
    try:
        return check_range(value, to_type, from_type="str")
    except OverflowSize as exc:
        raise ParseError(f"cannot parse field `{key}`: {raw!r} ({exc.description})") from exc


def _parse_tx_type(fields: Mapping[str, str]) -> TxType:
    raw = _field(fields, "TX_TYPE")
    tx_type = TxType.from_label(raw)
    if tx_type is None:
        raise ParseError(f"cannot parse field `TX_TYPE`: {raw!r}")
    return tx_type


def _parse_status(fields: Mapping[str, str]) -> TxStatus:
    raw = _field(fields, "STATUS")
    status = TxStatus.from_label(raw)
    if status is None:
        raise ParseError(f"cannot parse field `STATUS`: {raw!r}")
    return status


@dataclass(frozen=True, slots=True)
class _TextualRecord:
    # Shared shape of CSV and Text records: unsigned amount, mandatory description.
    tx_id: int
    tx_type: TxType
    from_user_id: int
    to_user_id: int
    amount: int
    timestamp: int
    status: TxStatus
    description: str = ""

    def __post_init__(self) -> None:
        _check_enums(self.tx_type, self.status)
        check_range(self.tx_id, "u64")
        check_range(self.from_user_id, "u64")
        check_range(self.to_user_id, "u64")
        check_range(self.amount, "u64")
        check_range(self.timestamp, "u64")
        if not isinstance(self.description, str):
            raise TypeError("description must be a str")

    @classmethod
    def from_fields(cls, fields: Mapping[str, str]) -> Self:
        """Build a record from an ``{UPPERCASE_FIELD: raw_value}`` map.

        Missing keys raise :class:`IncorrectField`; unparseable values raise
        :class:`ParseError` naming the field.
        """

        return cls(
            tx_id=_parse_unsigned(fields, "TX_ID"),
            tx_type=_parse_tx_type(fields),
            from_user_id=_parse_unsigned(fields, "FROM_USER_ID"),
            to_user_id=_parse_unsigned(fields, "TO_USER_ID"),
            amount=_parse_unsigned(fields, "AMOUNT"),
            timestamp=_parse_unsigned(fields, "TIMESTAMP"),
            status=_parse_status(fields),
            description=_field(fields, "DESCRIPTION"),
        )

    def field_values(self) -> dict[str, str]:
        """Return the unescaped textual value of every field, in field order."""

        return {
            "TX_ID": str(self.tx_id),
            "TX_TYPE": self.tx_type.label,
            "FROM_USER_ID": str(self.from_user_id),
            "TO_USER_ID": str(self.to_user_id),
            "AMOUNT": str(self.amount),
            "TIMESTAMP": str(self.timestamp),
            "STATUS": self.status.label,
            "DESCRIPTION": self.description,
        }


@dataclass(frozen=True, slots=True)
class CsvRecord(_TextualRecord):
    """One CSV data line."""


@dataclass(frozen=True, slots=True)
class TextRecord(_TextualRecord):
    """One ``# Record N (TYPE)`` block of the text format."""


@dataclass(frozen=True, slots=True)
class BinaryRecord:
    """One binary frame body.

    ``desc_len`` is the UTF-8 byte length of ``description``; ``0`` means the
    description is absent. The writer recomputes the length from the
    description, so ``desc_len`` is informational for records built in memory.
    """

    tx_id: int
    tx_type: TxType
    from_user_id: int
    to_user_id: int
    amount: int
    timestamp: int
    status: TxStatus
    desc_len: int = 0
    description: str | None = None

    def __post_init__(self) -> None:
        _check_enums(self.tx_type, self.status)
        check_range(self.tx_id, "u64")
        check_range(self.from_user_id, "u64")
        check_range(self.to_user_id, "u64")
        check_range(self.amount, "i64")
        check_range(self.timestamp, "u64")
        check_range(self.desc_len, "u32")
        if self.description is not None and not isinstance(self.description, str):
            raise TypeError("description must be a str or None")


FormatRecord: TypeAlias = CsvRecord | TextRecord | BinaryRecord
"""Any per-format record."""


__all__ = [
    "FIELD_NAMES",
    "I64_MAX",
    "I64_MIN",
    "U32_MAX",
    "U64_MAX",
    "BinaryRecord",
    "CsvRecord",
    "FormatRecord",
    "TextRecord",
    "Transaction",
    "TxStatus",
    "TxType",
    "check_range",
    "has_field",
]
