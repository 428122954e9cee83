"""The codec interface and the buffered-read helper for text formats.

A codec maps a byte stream to a list of per-format records and back. Each
format implements :class:`Codec` exactly once; :mod:`ypbank.formats` selects
the implementation from the closed :class:`~ypbank.formats.SupportedFormat`
enumeration.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import BinaryIO, Protocol, TypeVar

from ..errors import CodecIOError, ParseError, SizeLimitExceeded

_DRAIN_CHUNK = 64 * 1024

R = TypeVar("R")


class Codec(Protocol[R]):
    name: str

    def decode(self, stream: BinaryIO) -> list[R]: ...

    def encode(self, records: Sequence[R], stream: BinaryIO) -> None: ...


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes, retrying short reads until EOF."""

    parts: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def read_text_buffer(stream: BinaryIO, limit: int) -> str:
    """Read the whole stream as UTF-8 text, refusing inputs above ``limit`` bytes.

    At most ``limit + 1`` bytes are buffered. When the input is larger, the
    rest is drained in fixed-size chunks only to report the actual size.
    """

    try:
        data = read_exact(stream, limit + 1)
        if len(data) > limit:
            actual = len(data)
            while chunk := stream.read(_DRAIN_CHUNK):
                actual += len(chunk)
            raise SizeLimitExceeded(actual, limit)
    except OSError as err:
        raise CodecIOError(f"failed to read input data: {err}") from err

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as err:
        line = data[: err.start].count(b"\n") + 1
        raise ParseError("input is not valid UTF-8", line, 0) from err


def write_text(stream: BinaryIO, text: str) -> None:
    try:
        stream.write(text.encode("utf-8"))
    except OSError as err:
        raise CodecIOError(f"failed to write output data: {err}") from err


__all__ = ["Codec", "read_exact", "read_text_buffer", "write_text"]
