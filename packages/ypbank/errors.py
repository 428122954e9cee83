"""Exception taxonomy shared by every ``ypbank`` codec.

All codec failures derive from :class:`YPBankError`, so callers (the CLI, or
any host application) can catch one base class and print ``str(err)``
directly: every message already carries the context an end user needs (line
numbers, expected vs. actual values, byte counts).

Wrapping errors keep the underlying exception chained via ``raise ... from``.
"""

from __future__ import annotations


class YPBankError(Exception):
    """Base class for all codec errors."""


class CodecIOError(YPBankError):
    """An underlying I/O failure while reading or writing a stream."""

    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(f"I/O error: {description}")


class SizeLimitExceeded(YPBankError):
    def __init__(self, actual: int, limit: int) -> None:
        self.actual = actual
        self.limit = limit
        super().__init__(f"input size ({actual} bytes) exceeds the limit of {limit} bytes")


class IncorrectField(YPBankError):
    """A named field is absent while building a record from a field map."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"missing or invalid field: {key}")


class ParseError(YPBankError):
    """Structural or grammar violation.

    ``line`` and ``column`` are 1-based; ``0`` means the position is unknown.
    """

    def __init__(self, message: str, line: int = 0, column: int = 0) -> None:
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"parse error (line {line}, column {column}): {message}")


class ParseBinaryError(YPBankError):
    """Binary-specific decode failure (short read, unknown code, bad UTF-8)."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        text = "failed to decode binary data"
        super().__init__(f"{text}: {message}" if message else text)


class EmptyData(YPBankError):
    def __init__(self) -> None:
        super().__init__("no records found in input data")


class InvalidFormat(YPBankError):
    """Declared format does not match the detected one.

    The optional cause is attached as ``__cause__`` so tracebacks show it.
    """

    def __init__(self, expected: str, got: str, cause: BaseException | None = None) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"invalid format: expected {expected}, got {got}")
        if cause is not None:
            self.__cause__ = cause


class OverflowSize(YPBankError):
    """A numeric value does not fit the target integer type."""

    def __init__(self, from_type: str, to_type: str, value: object) -> None:
        self.from_type = from_type
        self.to_type = to_type
        self.value = value
        self.description = f"value {value} is out of range for type {to_type}"
        super().__init__(f"overflow: {from_type} cannot be converted to {to_type}: {self.description}")


class SettingsError(YPBankError, ValueError):
    """A size limit or log level taken from the environment is invalid."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"invalid configuration: {message}")


class UnsupportedFormat(YPBankError):
    def __init__(self, invalid_format: str) -> None:
        self.invalid_format = invalid_format
        super().__init__(
            f"format {invalid_format!r} is not supported (expected one of: csv, txt, text, bin, binary)"
        )


__all__ = [
    "CodecIOError",
    "EmptyData",
    "IncorrectField",
    "InvalidFormat",
    "OverflowSize",
    "ParseBinaryError",
    "ParseError",
    "SettingsError",
    "SizeLimitExceeded",
    "UnsupportedFormat",
    "YPBankError",
]
