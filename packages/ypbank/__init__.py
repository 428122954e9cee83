"""Public interface for the ``ypbank`` package.

This module only re-exports the stable import surface: the canonical model,
the format registry with its read/write entry points, the comparison helpers
and the exception taxonomy.
"""

from .compare import ComparisonResult, compare_transactions, compare_transactions_detailed
from .errors import (
    CodecIOError,
    EmptyData,
    IncorrectField,
    InvalidFormat,
    OverflowSize,
    ParseBinaryError,
    ParseError,
    SettingsError,
    SizeLimitExceeded,
    UnsupportedFormat,
    YPBankError,
)
from .formats import SupportedFormat, dumps, loads, read, write
from .models import BinaryRecord, CsvRecord, TextRecord, Transaction, TxStatus, TxType
from .settings import CodecSettings, load_settings

__all__ = [
    # API
    "read",
    "write",
    "loads",
    "dumps",
    "compare_transactions",
    "compare_transactions_detailed",
    "ComparisonResult",
    "SupportedFormat",
    "CodecSettings",
    "load_settings",
    # Models
    "Transaction",
    "TxType",
    "TxStatus",
    "CsvRecord",
    "TextRecord",
    "BinaryRecord",
    # Errors
    "YPBankError",
    "CodecIOError",
    "SizeLimitExceeded",
    "IncorrectField",
    "ParseError",
    "ParseBinaryError",
    "SettingsError",
    "EmptyData",
    "InvalidFormat",
    "OverflowSize",
    "UnsupportedFormat",
]
