"""CSV codec.

Header (exact, first line)::

    TX_ID,TX_TYPE,FROM_USER_ID,TO_USER_ID,AMOUNT,TIMESTAMP,STATUS,DESCRIPTION

Each following line is one transaction; the description is the last field and
is always written quoted, with inner quotes doubled::

    1002,TRANSFER,501,502,15000,1672534800000,FAILURE,"Payment for services, invoice #123"

Blank data lines are skipped. The stdlib :mod:`csv` module is not used: only
the trailing field may be quoted, and a quote opening mid-field must be
rejected rather than tolerated.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import BinaryIO

from ..errors import ParseError, YPBankError
from ..line_utils import escape_quotes, has_line_break, is_blank, is_eq, iter_lines, split_csv_line
from ..logging_setup import get_logger
from ..models import FIELD_NAMES, CsvRecord
from ..settings import CodecSettings, load_settings
from .base import read_text_buffer, write_text

HEADER: str = ",".join(FIELD_NAMES)

_logger = get_logger("ypbank.codecs.csv_format")


def format_line(record: CsvRecord) -> str:
    """Render one record as a CSV data line (no trailing newline)."""

    values = record.field_values()
    values["DESCRIPTION"] = escape_quotes(record.description)
    return ",".join(values[name] for name in FIELD_NAMES)


def _parse_data_line(line: str, line_no: int) -> CsvRecord:
    data = split_csv_line(line)
    if data is None:
        raise ParseError(f"malformed csv line: {line}", line_no, 0)
    if len(data) != len(FIELD_NAMES):
        raise ParseError(
            f"expected {len(FIELD_NAMES)} fields, got {len(data)}: {line}", line_no, 0
        )
    try:
        return CsvRecord.from_fields(dict(zip(FIELD_NAMES, data, strict=True)))
    except ParseError as exc:
        raise ParseError(exc.message, line_no, 0) from exc


def parse_csv(text: str) -> list[CsvRecord]:
    """Parse a fully buffered CSV document into records."""

    lines = iter_lines(text)
    if not lines:
        raise ParseError("missing csv header", 1, 0)
    if not is_eq(lines[0], HEADER):
        raise ParseError(f"invalid csv header: {lines[0]}", 1, 0)

    records: list[CsvRecord] = []
    for line_no, line in enumerate(lines[1:], start=2):
        if is_blank(line):
            continue
        records.append(_parse_data_line(line, line_no))
    return records


def render_csv(records: Sequence[CsvRecord]) -> str:
    """Render the header plus one line per record, each ending in ``\\n``.

    Descriptions containing line breaks cannot be represented and are
    rejected with a :class:`ParseError` naming the record position.
    """

    out = [HEADER]
    for idx, record in enumerate(records):
        if has_line_break(record.description):
            raise ParseError(
                f"description of record {idx} (tx_id={record.tx_id}) contains a line break",
                idx + 2,
                0,
            )
        out.append(format_line(record))
    return "\n".join(out) + "\n"


class CsvCodec:
    """:class:`~ypbank.codecs.base.Codec` implementation for CSV."""

    name = "csv"

    def __init__(self, settings: CodecSettings | None = None) -> None:
        self.settings = settings or load_settings()

    def decode(self, stream: BinaryIO) -> list[CsvRecord]:
        text = read_text_buffer(stream, self.settings.max_text_bytes)
        try:
            records = parse_csv(text)
        except YPBankError as exc:
            _logger.debug("csv decode failed: %s", exc)
            raise
        _logger.debug("decoded %d csv records (%d chars)", len(records), len(text))
        return records

    def encode(self, records: Sequence[CsvRecord], stream: BinaryIO) -> None:
        write_text(stream, render_csv(records))
        _logger.debug("encoded %d csv records", len(records))


__all__ = ["HEADER", "CsvCodec", "format_line", "parse_csv", "render_csv"]
