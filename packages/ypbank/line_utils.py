"""Line-level helpers shared by the CSV and Text codecs.

The CSV splitter here is deliberately narrower than RFC 4180: only the final
field (the description) may be quoted, and everything after its closing quote
is ignored. Unquoted fields are trimmed; quoted content is not.
"""

from __future__ import annotations


def iter_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, dropping a trailing ``\\r`` from each line.

    ``str.splitlines`` is avoided because it also breaks on characters such as
    ``\\x0c`` or ``\\u2028`` that may legitimately appear inside a description.
    """

    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [ln[:-1] if ln.endswith("\r") else ln for ln in lines]


def has_line_break(value: str) -> bool:
    return "\n" in value or "\r" in value


def is_blank(line: str) -> bool:
    return not line.strip()


def is_hash_marker(line: str) -> bool:
    return line.strip().startswith("#")


def is_eq(line: str, other: str) -> bool:
    """Compare two lines ignoring surrounding whitespace."""

    return line.strip() == other.strip()


def escape_quotes(value: str) -> str:
    """Wrap ``value`` in double quotes, doubling any inner quote."""

    return '"' + value.replace('"', '""') + '"'


def clean_quote(value: str) -> str:
    """Strip one pair of surrounding quotes (when present) and unescape ``""``."""

    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return value.replace('""', '"')


def split_key_value(line: str) -> tuple[str, str] | None:
    """Split ``KEY: value`` into ``(KEY, value)``.

    The key is trimmed and upper-cased; the value is trimmed and unquoted via
    :func:`clean_quote`. Returns ``None`` when there is no ``:`` or when either
    side is empty.
    """

    key, sep, value = line.partition(":")
    if not sep:
        return None
    key = key.strip().upper()
    value = value.strip()
    if not key or not value:
        return None
    return key, clean_quote(value)


def split_csv_line(line: str) -> list[str] | None:
    """Split one CSV data line into trimmed fields.

    Returns ``None`` for a malformed line: a quote opening while an unquoted
    field is mid-accumulation, a quoted field with no closing quote, or fewer
    than two fields overall. Field count against the header is the caller's
    concern.
    """

    fields: list[str] = []
    buffer: list[str] = []
    chars = iter(line)
    for ch in chars:
        if ch == '"':
            if "".join(buffer).strip():
                return None
            quoted: list[str] = []
            for c in chars:
                if c == '"':
                    if next(chars, None) == '"':
                        quoted.append('"')
                        continue
                    break
                quoted.append(c)
            else:
                # No closing quote.
                return None
            # Quoted content is kept verbatim; nothing is expected after it.
            fields.append("".join(quoted))
            return fields
        if ch == ",":
            fields.append("".join(buffer).strip())
            buffer.clear()
            continue
        buffer.append(ch)

    tail = "".join(buffer).strip()
    if tail:
        fields.append(tail)
    return fields if len(fields) >= 2 else None


__all__ = [
    "clean_quote",
    "escape_quotes",
    "has_line_break",
    "is_blank",
    "is_eq",
    "is_hash_marker",
    "iter_lines",
    "split_csv_line",
    "split_key_value",
]
