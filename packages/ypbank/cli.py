"""CLI for the ``ypbank`` package.

Two subcommands drive the codec layer:

- ``convert``: read a file in one format and write it in another.
- ``compare``: parse two files (each in its own format) and report whether
  their canonical transaction lists are identical.

Command logic lives in plain functions (``cmd_convert``, ``cmd_compare``)
returning a process exit code; the Typer commands are thin wrappers. A local
``.env`` is loaded with ``python-dotenv`` (without overriding the existing
environment) so ``YPBANK_*`` size limits and log level can be set there.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated, BinaryIO

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .compare import compare_transactions_detailed
from .errors import CodecIOError, InvalidFormat, YPBankError
from .formats import SupportedFormat, dumps, read
from .logging_setup import configure_logging, get_logger
from .models import Transaction

_logger = get_logger("ypbank.cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_DIFFERENT = 2


# ---- Small module-level helpers -----------------------------------------------


def _open(path: Path) -> BinaryIO:
    try:
        return open(path, "rb")  # noqa: SIM115 - closed by the caller's ``with``
    except OSError as err:
        raise CodecIOError(f"failure to open file: {path} ({err.strerror})") from err


def _save(path: Path, data: bytes) -> None:
    try:
        path.write_bytes(data)
    except OSError as err:
        raise CodecIOError(f"failure to create file: {path} ({err.strerror})") from err


def _check_extension(path: Path, declared: SupportedFormat) -> None:
    """Reject an input whose suffix names a different known format."""

    detected = SupportedFormat.from_extension(path)
    if detected is not None and detected is not declared:
        raise InvalidFormat(expected=str(declared), got=f"{detected} ({path.name})")


def _load(path: Path, fmt: SupportedFormat) -> list[Transaction]:
    if not path.is_file():
        raise CodecIOError(f"the file {path} does not exist")
    with _open(path) as f:
        return read(f, fmt)


def _fail(message: object) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return EXIT_ERROR


# ---- Command handlers -----------------------------------------------------------


def cmd_convert(
    input_file: Path,
    input_format: str,
    output_file: Path,
    output_format: str,
    *,
    force: bool = False,
) -> int:
    """Convert ``input_file`` into ``output_file``.

    Refuses to overwrite an existing output unless ``force`` is set. Errors are
    printed to stderr and yield a non-zero exit status.
    """

    try:
        in_fmt = SupportedFormat.from_tag(input_format)
        out_fmt = SupportedFormat.from_tag(output_format)
        _check_extension(input_file, in_fmt)
        if output_file.exists() and not force:
            return _fail(f"output file {output_file} already exists (use --force to overwrite)")
        transactions = _load(input_file, in_fmt)
        # The output file is created only after serialization succeeds.
        _save(output_file, dumps(transactions, out_fmt))
    except YPBankError as e:
        _logger.debug("convert failed", exc_info=True)
        return _fail(e)

    print(
        f"OK: converted {len(transactions)} transactions "
        f"from {input_file} ({in_fmt}) to {output_file} ({out_fmt})"
    )
    return EXIT_OK


def cmd_compare(
    first_file: Path,
    first_format: str,
    second_file: Path,
    second_format: str,
) -> int:
    """Compare two files record-by-record.

    Returns ``0`` when identical, ``2`` when they differ, ``1`` on error.
    """

    try:
        left = _load(first_file, SupportedFormat.from_tag(first_format))
        right = _load(second_file, SupportedFormat.from_tag(second_format))
    except YPBankError as e:
        _logger.debug("compare failed", exc_info=True)
        return _fail(e)

    result = compare_transactions_detailed(left, right)
    names = (first_file.name, second_file.name)
    if result.identical:
        print(f"The transaction records in '{names[0]}' and '{names[1]}' are IDENTICAL")
        return EXIT_OK

    print(f"The transaction records in '{names[0]}' and '{names[1]}' are NOT IDENTICAL")
    print(f"Number of mismatched elements: {result.mismatches}")
    if result.mismatched_indices:
        shown = ", ".join(str(i) for i in result.mismatched_indices[:20])
        more = "" if len(result.mismatched_indices) <= 20 else ", ..."
        print(f"Mismatched positions: {shown}{more}")
    if result.length_difference:
        print(f"Record counts differ: {result.left_count} vs {result.right_count}")
    return EXIT_DIFFERENT


# ---- Typer-based console interface ----------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Convert and compare bank transaction files in CSV, TXT and BIN formats.",
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults).
INPUT_FILE_OPTION: OptionInfo = typer.Option(
    ..., "--input-file", "-i", help="Path to the source file", dir_okay=False
)
INPUT_FORMAT_OPTION: OptionInfo = typer.Option(
    ..., "--input-format", help="Source format: csv, txt/text, bin/binary"
)
OUTPUT_FILE_OPTION: OptionInfo = typer.Option(
    ..., "--output-file", "-o", help="Path to the file to create", dir_okay=False
)
OUTPUT_FORMAT_OPTION: OptionInfo = typer.Option(
    ..., "--output-format", help="Target format: csv, txt/text, bin/binary"
)


@app.command("convert")
def convert_cmd(
    input_file: Annotated[Path, INPUT_FILE_OPTION],
    input_format: Annotated[str, INPUT_FORMAT_OPTION],
    output_file: Annotated[Path, OUTPUT_FILE_OPTION],
    output_format: Annotated[str, OUTPUT_FORMAT_OPTION],
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite the output file if it exists.")
    ] = False,
) -> None:
    """Read a transaction file in one format and write it in another."""

    code = cmd_convert(input_file, input_format, output_file, output_format, force=force)
    raise typer.Exit(code)


@app.command("compare")
def compare_cmd(
    first_file: Annotated[Path, typer.Option(..., "--first-file", dir_okay=False)],
    first_format: Annotated[str, typer.Option(..., "--first-format")],
    second_file: Annotated[Path, typer.Option(..., "--second-file", dir_okay=False)],
    second_format: Annotated[str, typer.Option(..., "--second-format")],
) -> None:
    """Compare the transactions stored in two files (formats may differ)."""

    raise typer.Exit(cmd_compare(first_file, first_format, second_file, second_format))


@app.command("formats")
def formats_cmd() -> None:
    """List supported formats and their tags."""

    for fmt in SupportedFormat:
        typer.echo(fmt.description)


@app.callback()
def _root(
    *,
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level (DEBUG, INFO, ...); defaults to YPBANK_LOG_LEVEL."
    ),
) -> None:
    """Load ``.env`` from the current directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    try:
        configure_logging(log_level)
    except YPBankError as e:
        raise typer.Exit(_fail(e)) from e


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
