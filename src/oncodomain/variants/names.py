"""Amino-acid position parsing from ClinVar variant names."""

import re
import warnings
from typing import NamedTuple

import polars as pl
import structlog

from oncodomain.errors import UnparseablePositionWarning

logger = structlog.get_logger()

DIGITS = re.compile(r"\d+")

# Positions are stored as Int64; larger digit runs are treated as unparseable
MAX_POSITION = 2**63 - 1


class ParsedName(NamedTuple):
    """Components of a variant name.

    Attributes:
        protein_change: Text before the first space (whole name if no space)
        variant_token: Text after the first space (None if no space)
        position: First run of digits in variant_token (None if absent)
    """

    protein_change: str
    variant_token: str | None
    position: int | None


def parse_variant_name(name: str) -> ParsedName:
    """Split a variant name and extract the amino-acid position.

    Parentheses are removed, the result is split on the first space, and the
    first run of digits in the second part becomes the position. A digit run
    beyond the Int64 range gives no position, as in :func:`add_positions`.

    Examples:
        >>> parse_variant_name("p.Val600Glu (V600E)")
        ParsedName(protein_change='p.Val600Glu', variant_token='V600E', position=600)
        >>> parse_variant_name("NM_000059.4(BRCA2):c.-26G>A")
        ParsedName(protein_change='NM_000059.4BRCA2:c.-26G>A', variant_token=None, position=None)
    """
    stripped = name.replace("(", "").replace(")", "")
    head, sep, tail = stripped.partition(" ")
    if not sep:
        return ParsedName(head, None, None)

    match = DIGITS.search(tail)
    position = int(match.group()) if match else None
    if position is not None and position > MAX_POSITION:
        position = None
    return ParsedName(head, tail, position)


def add_positions(df: pl.DataFrame, name_col: str = "name") -> pl.DataFrame:
    """Add protein_change, variant_token and position columns.

    Vectorized equivalent of :func:`parse_variant_name`. A summary
    UnparseablePositionWarning is emitted when any row has no position;
    such rows are kept and later excluded from domain classification.

    Args:
        df: Variant table with a name column
        name_col: Column holding the raw variant name

    Returns:
        DataFrame with the three parsed columns appended (position is Int64)
    """
    stripped = pl.col(name_col).str.replace_all(r"[()]", "")

    df = df.with_columns(
        stripped.str.splitn(" ", 2).struct.rename_fields(
            ["protein_change", "variant_token"]
        ).alias("_parts")
    ).unnest("_parts")

    df = df.with_columns(
        pl.col("variant_token")
        .str.extract(r"(\d+)", 1)
        .cast(pl.Int64, strict=False)
        .alias("position")
    )

    unparseable = count_unparseable(df)
    if unparseable:
        logger.warning(
            "unparseable_positions",
            rows=unparseable,
            total=df.height,
        )
        warnings.warn(
            f"{unparseable} of {df.height} variant names have no amino-acid position",
            UnparseablePositionWarning,
            stacklevel=2,
        )

    return df


def count_unparseable(df: pl.DataFrame) -> int:
    """Number of rows whose position could not be parsed."""
    return df.filter(pl.col("position").is_null()).height
