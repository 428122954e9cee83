"""Magic-framed, big-endian binary codec.

A file is a plain concatenation of frames, with no file-level header::

    MAGIC (4 bytes, b"YPBN") | BODY_LEN (u32) | BODY (BODY_LEN bytes)

Body layout (all integers big-endian)::

    tx_id:u64  tx_type:u8  from_user_id:u64  to_user_id:u64  amount:i64
    timestamp:u64  status:u8  desc_len:u32  description:desc_len bytes (UTF-8)

The writer zeroes ``from_user_id`` for deposits and ``to_user_id`` for
withdrawals. The reader returns whatever was stored and does not re-check
that convention.
"""

from __future__ import annotations

import struct
from collections.abc import Sequence
from typing import BinaryIO

from ..errors import (
    CodecIOError,
    OverflowSize,
    ParseBinaryError,
    ParseError,
    SizeLimitExceeded,
)
from ..logging_setup import get_logger
from ..models import U32_MAX, BinaryRecord, TxStatus, TxType
from ..settings import CodecSettings, load_settings
from .base import read_exact

MAGIC: bytes = b"YPBN"
HEADER_SIZE: int = len(MAGIC) + 4

_U8 = struct.Struct(">B")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")
_I64 = struct.Struct(">q")
_FIXED_BODY = struct.Struct(">QBQQqQBI")

_logger = get_logger("ypbank.codecs.binary")


class _BodyReader:
    """Sequential field reader over one frame body."""

    def __init__(self, body: bytes) -> None:
        self._body = body
        self._pos = 0

    def _unpack(self, fmt: struct.Struct, field_name: str) -> int:
        if self._pos + fmt.size > len(self._body):
            raise ParseBinaryError(
                f"frame body ends before field {field_name} (offset {self._pos}, "
                f"need {fmt.size} bytes, body is {len(self._body)} bytes)"
            )
        (value,) = fmt.unpack_from(self._body, self._pos)
        self._pos += fmt.size
        return value

    def u8(self, field_name: str) -> int:
        return self._unpack(_U8, field_name)

    def u32(self, field_name: str) -> int:
        return self._unpack(_U32, field_name)

    def u64(self, field_name: str) -> int:
        return self._unpack(_U64, field_name)

    def i64(self, field_name: str) -> int:
        return self._unpack(_I64, field_name)

    def take(self, size: int, field_name: str) -> bytes:
        if self._pos + size > len(self._body):
            raise ParseBinaryError(
                f"frame body ends before field {field_name} ends "
                f"(declared {size} bytes, {len(self._body) - self._pos} available)"
            )
        chunk = self._body[self._pos : self._pos + size]
        self._pos += size
        return chunk


def decode_body(body: bytes) -> BinaryRecord:
    """Decode one frame body. Trailing bytes after the description are ignored."""

    r = _BodyReader(body)
    tx_id = r.u64("TX_ID")
    type_code = r.u8("TX_TYPE")
    tx_type = TxType.from_code(type_code)
    if tx_type is None:
        raise ParseBinaryError(f"unknown TX_TYPE code {type_code}")
    from_user_id = r.u64("FROM_USER_ID")
    to_user_id = r.u64("TO_USER_ID")
    amount = r.i64("AMOUNT")
    timestamp = r.u64("TIMESTAMP")
    status_code = r.u8("STATUS")
    status = TxStatus.from_code(status_code)
    if status is None:
        raise ParseBinaryError(f"unknown STATUS code {status_code}")
    desc_len = r.u32("DESC_LEN")
    description: str | None = None
    if desc_len > 0:
        raw = r.take(desc_len, "DESCRIPTION")
        try:
            description = raw.decode("utf-8")
        except UnicodeDecodeError as err:
            raise ParseBinaryError(f"DESCRIPTION is not valid UTF-8: {err}") from err

    return BinaryRecord(
        tx_id=tx_id,
        tx_type=tx_type,
        from_user_id=from_user_id,
        to_user_id=to_user_id,
        amount=amount,
        timestamp=timestamp,
        status=status,
        desc_len=desc_len,
        description=description,
    )


def encode_body(record: BinaryRecord) -> bytes:
    """Encode one record body, applying the unused-side zeroing convention."""

    from_user_id = 0 if record.tx_type is TxType.DEPOSIT else record.from_user_id
    to_user_id = 0 if record.tx_type is TxType.WITHDRAWAL else record.to_user_id
    desc = record.description.encode("utf-8") if record.description else b""
    if len(desc) > U32_MAX:
        raise OverflowSize("usize", "u32", len(desc))
    fixed = _FIXED_BODY.pack(
        record.tx_id,
        record.tx_type.code,
        from_user_id,
        to_user_id,
        record.amount,
        record.timestamp,
        record.status.code,
        len(desc),
    )
    return fixed + desc


def encode_frame(record: BinaryRecord) -> bytes:
    body = encode_body(record)
    if len(body) > U32_MAX:
        raise OverflowSize("usize", "u32", len(body))
    return MAGIC + _U32.pack(len(body)) + body


def read_records(stream: BinaryIO, limit: int) -> list[BinaryRecord]:
    """Read frames until EOF at a frame boundary.

    ``limit`` caps the cumulative number of bytes consumed (headers and
    bodies). It is checked after each length prefix is read and before the
    body is buffered.
    """

    records: list[BinaryRecord] = []
    consumed = 0
    try:
        while True:
            magic = read_exact(stream, len(MAGIC))
            if not magic:
                break
            if magic != MAGIC:
                raise ParseError(
                    f"invalid frame magic {magic!r} at byte {consumed} (expected {MAGIC!r})",
                    0,
                    0,
                )
            len_raw = read_exact(stream, _U32.size)
            if len(len_raw) < _U32.size:
                raise ParseBinaryError(f"truncated BODY_LEN in frame {len(records)}")
            (body_len,) = _U32.unpack(len_raw)

            consumed += HEADER_SIZE + body_len
            if consumed > limit:
                raise SizeLimitExceeded(consumed, limit)

            body = read_exact(stream, body_len)
            if len(body) < body_len:
                raise ParseBinaryError(
                    f"truncated body in frame {len(records)}: "
                    f"expected {body_len} bytes, got {len(body)}"
                )
            records.append(decode_body(body))
    except OSError as err:
        raise CodecIOError(f"failed to read binary data: {err}") from err

    _logger.debug("decoded %d binary frames (%d bytes)", len(records), consumed)
    return records


def write_records(stream: BinaryIO, records: Sequence[BinaryRecord]) -> None:
    """Write one frame per record.

    Each frame is fully assembled before it is written. A failure part-way
    through leaves the frames already written in place.
    """

    written = 0
    for record in records:
        frame = encode_frame(record)
        try:
            stream.write(frame)
        except OSError as err:
            raise CodecIOError(
                f"failed to write binary frame {written} (tx_id={record.tx_id}): {err}"
            ) from err
        written += 1
    _logger.debug("encoded %d binary frames", written)


class BinaryCodec:
    """:class:`~ypbank.codecs.base.Codec` implementation for the binary format."""

    name = "bin"

    def __init__(self, settings: CodecSettings | None = None) -> None:
        self.settings = settings or load_settings()

    def decode(self, stream: BinaryIO) -> list[BinaryRecord]:
        return read_records(stream, self.settings.max_binary_bytes)

    def encode(self, records: Sequence[BinaryRecord], stream: BinaryIO) -> None:
        write_records(stream, records)


__all__ = [
    "HEADER_SIZE",
    "MAGIC",
    "BinaryCodec",
    "decode_body",
    "encode_body",
    "encode_frame",
    "read_records",
    "write_records",
]
