"""Human-readable key/value block codec.

Example document::

    # Record 1 (DEPOSIT)
    TX_ID: 1234567890123456
    TX_TYPE: DEPOSIT
    FROM_USER_ID: 0
    TO_USER_ID: 9876543210987654
    AMOUNT: 10000
    TIMESTAMP: 1633036800000
    STATUS: SUCCESS
    DESCRIPTION: "Terminal deposit"

    # Record 2 (TRANSFER)
    ...

Rules:

- Blocks are separated by one or more blank lines and open with a title line.
  Any line starting with ``#`` opens a new block and must be a valid title.
- Keys are case-insensitive, appear once per block, and may come in any order.
- The record number in the title is written as ``tx_id % 10**15`` and is
  decorative: it is never read back. The title's type token is captured but
  the body's ``TX_TYPE`` field is authoritative.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import BinaryIO

from ..errors import ParseError, YPBankError
from ..line_utils import (
    escape_quotes,
    has_line_break,
    is_blank,
    is_hash_marker,
    iter_lines,
    split_key_value,
)
from ..logging_setup import get_logger
from ..models import FIELD_NAMES, TextRecord, has_field
from ..settings import CodecSettings, load_settings
from .base import read_text_buffer, write_text

TITLE_RE = re.compile(r"^#\s*Record\s+\d+\s*\((?P<tx_type>[^)]+)\)$")
TITLE_NUMBER_MODULUS = 10**15

_logger = get_logger("ypbank.codecs.text_block")


@dataclass(slots=True)
class _Block:
    title_line: int
    title_type: str
    lines: list[tuple[int, str]] = field(default_factory=list)


def parse_title(line: str, line_no: int) -> str:
    """Return the type token captured from a block title."""

    m = TITLE_RE.fullmatch(line.strip())
    if m is None:
        raise ParseError(f"invalid block title: {line}", line_no, 0)
    return m.group("tx_type")


def _parse_block(block: _Block) -> TextRecord:
    fields: dict[str, str] = {}
    key_lines: dict[str, int] = {}
    for line_no, line in block.lines:
        kv = split_key_value(line)
        if kv is None:
            raise ParseError(f"expected `KEY: value`, got: {line}", line_no, 0)
        key, value = kv
        if not has_field(key):
            raise ParseError(f"unknown key {key} in line: {line}", line_no, 0)
        if key in fields:
            raise ParseError(f"duplicate key {key} in line: {line}", line_no, 0)
        fields[key] = value
        key_lines[key] = line_no

    try:
        return TextRecord.from_fields(fields)
    except ParseError as exc:
        # Point at the line holding the offending value when we can tell.
        line_no = next(
            (n for k, n in key_lines.items() if f"`{k}`" in exc.message),
            block.title_line,
        )
        raise ParseError(exc.message, line_no, 0) from exc


def parse_text(text: str) -> list[TextRecord]:
    """Parse a fully buffered text document into records."""

    records: list[TextRecord] = []
    current: _Block | None = None

    for line_no, line in enumerate(iter_lines(text), start=1):
        if is_blank(line):
            if current is not None:
                records.append(_parse_block(current))
                current = None
            continue
        if is_hash_marker(line):
            if current is not None:
                records.append(_parse_block(current))
            current = _Block(title_line=line_no, title_type=parse_title(line, line_no))
            continue
        if current is None:
            raise ParseError(f"line outside of a record block: {line}", line_no, 0)
        current.lines.append((line_no, line))

    if current is not None:
        records.append(_parse_block(current))
    return records


def make_title(record: TextRecord) -> str:
    return f"# Record {record.tx_id % TITLE_NUMBER_MODULUS} ({record.tx_type.label})"


def format_block(record: TextRecord) -> str:
    """Render one record as a title line plus eight ``KEY: value`` lines."""

    values = record.field_values()
    values["DESCRIPTION"] = escape_quotes(record.description)
    body = [f"{name}: {values[name]}" for name in FIELD_NAMES]
    return "\n".join([make_title(record), *body])


def render_text(records: Sequence[TextRecord]) -> str:
    blocks: list[str] = []
    for idx, record in enumerate(records):
        if has_line_break(record.description):
            raise ParseError(
                f"description of record {idx} (tx_id={record.tx_id}) contains a line break"
            )
        blocks.append(format_block(record))
    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


class TextCodec:
    """:class:`~ypbank.codecs.base.Codec` implementation for the text format."""

    name = "txt"

    def __init__(self, settings: CodecSettings | None = None) -> None:
        self.settings = settings or load_settings()

    def decode(self, stream: BinaryIO) -> list[TextRecord]:
        text = read_text_buffer(stream, self.settings.max_text_bytes)
        try:
            records = parse_text(text)
        except YPBankError as exc:
            _logger.debug("text decode failed: %s", exc)
            raise
        _logger.debug("decoded %d text blocks (%d chars)", len(records), len(text))
        return records

    def encode(self, records: Sequence[TextRecord], stream: BinaryIO) -> None:
        write_text(stream, render_text(records))
        _logger.debug("encoded %d text blocks", len(records))


__all__ = [
    "TITLE_RE",
    "TextCodec",
    "format_block",
    "make_title",
    "parse_text",
    "parse_title",
    "render_text",
]
