import io
import struct

import pytest

from tests.helpers.factories import deposit, sample_batch, transfer, withdrawal
from ypbank.codecs.binary import (
    MAGIC,
    BinaryCodec,
    decode_body,
    encode_body,
    encode_frame,
    read_records,
)
from ypbank.convert import to_binary_record
from ypbank.errors import ParseBinaryError, ParseError, SizeLimitExceeded
from ypbank.models import BinaryRecord, TxStatus, TxType
from ypbank.settings import CodecSettings


def _frames(*records: BinaryRecord) -> bytes:
    return b"".join(encode_frame(r) for r in records)


def test_deposit_frame_layout():
    rec = to_binary_record(deposit("Initial account funding"))
    frame = encode_frame(rec)

    desc = b"Initial account funding"
    assert frame[:4] == MAGIC
    (body_len,) = struct.unpack(">I", frame[4:8])
    assert body_len == 46 + len(desc) == len(frame) - 8
    assert struct.unpack(">Q", frame[8:16]) == (987654321,)
    assert frame[16] == TxType.DEPOSIT.code
    assert struct.unpack(">q", frame[33:41]) == (100000,)
    assert frame[49] == TxStatus.PENDING.code
    assert struct.unpack(">I", frame[50:54]) == (len(desc),)
    assert frame[54:] == desc


def test_writer_zeroes_unused_user_ids():
    dep = BinaryRecord(1, TxType.DEPOSIT, 77, 88, 10, 0, TxStatus.SUCCESS)
    wd = BinaryRecord(2, TxType.WITHDRAWAL, 77, 88, -10, 0, TxStatus.SUCCESS)
    tr = BinaryRecord(3, TxType.TRANSFER, 77, 88, -10, 0, TxStatus.SUCCESS)

    dep_frame, wd_frame, tr_frame = encode_frame(dep), encode_frame(wd), encode_frame(tr)
    assert dep_frame[17:25] == b"\x00" * 8
    assert struct.unpack(">Q", dep_frame[25:33]) == (88,)
    assert struct.unpack(">Q", wd_frame[17:25]) == (77,)
    assert wd_frame[25:33] == b"\x00" * 8
    assert struct.unpack(">QQ", tr_frame[17:33]) == (77, 88)


def test_round_trip_preserves_records():
    records = [to_binary_record(tx) for tx in sample_batch()]
    out = io.BytesIO()
    BinaryCodec(CodecSettings()).encode(records, out)
    decoded = BinaryCodec(CodecSettings()).decode(io.BytesIO(out.getvalue()))
    assert decoded == records


def test_absent_description_reads_back_as_none():
    rec = to_binary_record(deposit(None))
    decoded = read_records(io.BytesIO(encode_frame(rec)), 1024)
    assert decoded[0].description is None
    assert decoded[0].desc_len == 0


def test_empty_stream_is_empty_list():
    assert read_records(io.BytesIO(b""), 1024) == []


def test_invalid_magic_is_parse_error():
    frame = bytearray(encode_frame(to_binary_record(transfer())))
    frame[:4] = b"XXXX"
    with pytest.raises(ParseError):
        read_records(io.BytesIO(bytes(frame)), 1024)


def test_invalid_magic_after_good_frame():
    data = _frames(to_binary_record(transfer())) + b"NOPE\x00\x00\x00\x00"
    with pytest.raises(ParseError):
        read_records(io.BytesIO(data), 1024)


def test_short_magic_is_parse_error():
    with pytest.raises(ParseError):
        read_records(io.BytesIO(b"YP"), 1024)


def test_truncated_length_prefix():
    with pytest.raises(ParseBinaryError):
        read_records(io.BytesIO(MAGIC + b"\x00\x00"), 1024)


def test_truncated_body():
    frame = encode_frame(to_binary_record(withdrawal()))
    with pytest.raises(ParseBinaryError):
        read_records(io.BytesIO(frame[:-3]), 1024)


def test_body_shorter_than_fixed_fields():
    data = MAGIC + struct.pack(">I", 10) + b"\x00" * 10
    with pytest.raises(ParseBinaryError):
        read_records(io.BytesIO(data), 1024)


def test_description_longer_than_body():
    body = bytearray(encode_body(to_binary_record(transfer("abc"))))
    body[42:46] = struct.pack(">I", 50)
    with pytest.raises(ParseBinaryError):
        decode_body(bytes(body))


def test_unknown_codes_are_rejected():
    body = bytearray(encode_body(to_binary_record(transfer())))
    bad_type = bytearray(body)
    bad_type[8] = 9
    with pytest.raises(ParseBinaryError, match="TX_TYPE"):
        decode_body(bytes(bad_type))
    bad_status = bytearray(body)
    bad_status[41] = 7
    with pytest.raises(ParseBinaryError, match="STATUS"):
        decode_body(bytes(bad_status))


def test_invalid_utf8_description():
    body = bytearray(encode_body(to_binary_record(transfer("ab"))))
    body[-2:] = b"\xff\xfe"
    with pytest.raises(ParseBinaryError):
        decode_body(bytes(body))


def test_trailing_body_bytes_are_ignored():
    body = encode_body(to_binary_record(transfer("abc"))) + b"extra"
    assert decode_body(body).description == "abc"


def test_cumulative_size_limit():
    frame = encode_frame(to_binary_record(transfer("x")))
    settings = CodecSettings(max_text_bytes=10, max_binary_bytes=len(frame) + 10)
    codec = BinaryCodec(settings)

    assert len(codec.decode(io.BytesIO(frame))) == 1
    with pytest.raises(SizeLimitExceeded) as ei:
        codec.decode(io.BytesIO(frame + frame))
    assert ei.value.actual == 2 * len(frame)
    assert ei.value.limit == len(frame) + 10


def test_declared_body_length_is_checked_before_reading():
    # Only the header is present; the oversized declaration alone trips the limit.
    data = MAGIC + struct.pack(">I", 10_000)
    with pytest.raises(SizeLimitExceeded):
        read_records(io.BytesIO(data), 100)
