"""Reading delimited input tables.

All inputs are tab-delimited text, some gzip-compressed. Files are opened in
a ``with`` block and read fully before parsing, so a truncated gzip stream
fails as a pipeline error rather than inside polars. Every column is read
as a string; stages cast the few numeric columns they need.
"""

import gzip
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

import polars as pl
import structlog

from oncodomain.errors import MissingFileError, SchemaError

logger = structlog.get_logger()

GZIP_MAGIC = b"\x1f\x8b"

# Tokens treated as missing in every input table
NULL_VALUES = ["", "NA", "-", "na", "N/A"]


def is_gzipped(path: Path) -> bool:
    """Detect gzip compression from the file's magic bytes."""
    with open(path, "rb") as f:
        return f.read(2) == GZIP_MAGIC


@contextmanager
def open_table(path: Path | str, stage: str) -> Iterator[IO[bytes]]:
    """Open an input table for reading, transparently decompressing gzip.

    Args:
        path: Table location
        stage: Pipeline stage name used in error messages

    Yields:
        Binary file object positioned at the start of the (decompressed) data

    Raises:
        MissingFileError: If the path does not exist or cannot be opened
    """
    path = Path(path)
    if not path.is_file():
        raise MissingFileError(path, stage)

    try:
        handle = gzip.open(path, "rb") if is_gzipped(path) else open(path, "rb")
    except OSError as e:
        raise MissingFileError(path, stage) from e

    with handle:
        yield handle


def read_tsv(
    path: Path | str,
    stage: str,
    has_header: bool = True,
    new_columns: list[str] | None = None,
) -> pl.DataFrame:
    """Read a tab-delimited file into an all-string DataFrame.

    Args:
        path: Table location (plain or gzip-compressed)
        stage: Pipeline stage name used in error messages
        has_header: Whether the first line holds column names
        new_columns: Names assigned to the columns of a headerless file

    Returns:
        DataFrame with String columns; missing tokens become null

    Raises:
        MissingFileError: If the path does not exist, or a gzip stream is
            truncated or corrupt
        SchemaError: If the content cannot be parsed as a table, or the
            column count differs from ``new_columns``
    """
    path = Path(path)

    with open_table(path, stage) as handle:
        try:
            data = handle.read()
        except (OSError, EOFError, zlib.error) as e:
            raise MissingFileError(path, stage) from e

        try:
            df = pl.read_csv(
                data,
                separator="\t",
                has_header=has_header,
                infer_schema=False,
                quote_char=None,
                null_values=NULL_VALUES,
            )
        except (pl.exceptions.ComputeError, pl.exceptions.NoDataError) as e:
            raise SchemaError(f"Could not parse table: {e}", stage, path) from e

    if new_columns is not None:
        if df.width != len(new_columns):
            raise SchemaError(
                f"Expected {len(new_columns)} columns, found {df.width}",
                stage,
                path,
            )
        df = df.rename(dict(zip(df.columns, new_columns)))

    logger.info(
        "table_read",
        stage=stage,
        path=str(path),
        rows=df.height,
        columns=df.width,
    )

    return df


def resolve_columns(
    df: pl.DataFrame,
    aliases: dict[str, list[str]],
    stage: str,
    path: Path | str | None = None,
    required: list[str] | None = None,
) -> dict[str, str]:
    """Map the file's header names to standardized column names.

    Args:
        df: Table as read from disk
        aliases: Standard name -> accepted header spellings, in priority order
        stage: Pipeline stage name used in error messages
        path: Source file, for error messages
        required: Standard names that must resolve (default: all of them)

    Returns:
        Mapping of actual header name -> standard name

    Raises:
        SchemaError: If a required column has no matching header
    """
    required = list(aliases) if required is None else required
    mapping = {}
    for standard, variants in aliases.items():
        for variant in variants:
            if variant in df.columns:
                mapping[variant] = standard
                break

    missing = [name for name in required if name not in mapping.values()]
    if missing:
        raise SchemaError(
            f"Missing required column(s) {missing}; "
            f"found {df.columns[:12]}",
            stage,
            path,
        )

    return mapping
