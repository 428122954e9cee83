"""Format selection and the canonical read/write entry points.

Usage
-----
txs = read(open("bank.csv", "rb"), "csv")          # -> list[Transaction]
write(open("bank.bin", "wb"), txs, SupportedFormat.BINARY)
"""

from __future__ import annotations

import io
from collections.abc import Sequence
from enum import Enum
from os import PathLike
from pathlib import Path
from typing import Any, BinaryIO

from .codecs import BinaryCodec, Codec, CsvCodec, TextCodec
from .convert import to_binary_record, to_csv_record, to_text_record, to_transactions
from .errors import EmptyData, UnsupportedFormat
from .logging_setup import get_logger
from .models import Transaction
from .settings import CodecSettings, load_settings

_logger = get_logger("ypbank.formats")


class SupportedFormat(Enum):
    CSV = "csv"
    TEXT = "txt"
    BINARY = "bin"

    @classmethod
    def from_tag(cls, tag: str) -> SupportedFormat:
        """Resolve a user-supplied tag (``csv``, ``txt``/``text``, ``bin``/``binary``)."""

        t = tag.strip().lower()
        if t == "csv":
            return cls.CSV
        if t in {"txt", "text"}:
            return cls.TEXT
        if t in {"bin", "binary"}:
            return cls.BINARY
        raise UnsupportedFormat(tag)

    @classmethod
    def from_extension(cls, path: str | PathLike[str]) -> SupportedFormat | None:
        """Guess the format from a file suffix; ``None`` when the suffix is unknown."""

        suffix = Path(path).suffix.lstrip(".")
        if not suffix:
            return None
        try:
            return cls.from_tag(suffix)
        except UnsupportedFormat:
            return None

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    def codec(self, settings: CodecSettings | None = None) -> Codec[Any]:
        settings = settings or load_settings()
        if self is SupportedFormat.CSV:
            return CsvCodec(settings)
        if self is SupportedFormat.TEXT:
            return TextCodec(settings)
        return BinaryCodec(settings)

    def __str__(self) -> str:
        return self.value


_DESCRIPTIONS: dict[SupportedFormat, str] = {
    SupportedFormat.CSV: '*.csv (tag: "csv")',
    SupportedFormat.TEXT: '*.txt (tags: "txt", "text")',
    SupportedFormat.BINARY: '*.bin (tags: "bin", "binary")',
}

_TO_RECORD = {
    SupportedFormat.CSV: to_csv_record,
    SupportedFormat.TEXT: to_text_record,
    SupportedFormat.BINARY: to_binary_record,
}


def _resolve(fmt: SupportedFormat | str) -> SupportedFormat:
    return fmt if isinstance(fmt, SupportedFormat) else SupportedFormat.from_tag(fmt)


def read(
    source: BinaryIO | bytes,
    fmt: SupportedFormat | str,
    *,
    settings: CodecSettings | None = None,
) -> list[Transaction]:
    """Parse a byte source of the declared format into canonical transactions.

    CSV and Text inputs that parse cleanly but hold no records raise
    :class:`~ypbank.errors.EmptyData`. An empty binary stream is a valid empty
    list.
    """

    f = _resolve(fmt)
    stream = io.BytesIO(source) if isinstance(source, bytes | bytearray) else source
    records = f.codec(settings).decode(stream)
    if not records and f is not SupportedFormat.BINARY:
        raise EmptyData()
    txs = to_transactions(records)
    _logger.debug("read %d transactions as %s", len(txs), f)
    return txs


def write(
    sink: BinaryIO,
    transactions: Sequence[Transaction],
    fmt: SupportedFormat | str,
    *,
    settings: CodecSettings | None = None,
) -> None:
    """Serialize canonical transactions into ``sink`` using the declared format.

    All records are converted before the first byte is written, so a
    conversion failure leaves ``sink`` untouched.
    """

    f = _resolve(fmt)
    to_record = _TO_RECORD[f]
    records = [to_record(tx) for tx in transactions]
    f.codec(settings).encode(records, sink)
    _logger.debug("wrote %d transactions as %s", len(records), f)


def loads(
    data: bytes, fmt: SupportedFormat | str, *, settings: CodecSettings | None = None
) -> list[Transaction]:
    return read(data, fmt, settings=settings)


def dumps(
    transactions: Sequence[Transaction],
    fmt: SupportedFormat | str,
    *,
    settings: CodecSettings | None = None,
) -> bytes:
    buf = io.BytesIO()
    write(buf, transactions, fmt, settings=settings)
    return buf.getvalue()


__all__ = ["SupportedFormat", "dumps", "loads", "read", "write"]
