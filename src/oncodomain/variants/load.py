"""Load the ClinVar variant summary table."""

from pathlib import Path

import polars as pl
import structlog

from oncodomain.errors import SchemaError
from oncodomain.tables import read_tsv
from oncodomain.variants.models import REQUIRED_COLUMNS, RETAINED_COLUMNS

logger = structlog.get_logger()

STAGE = "variant_loader"


def load_variant_summary(path: Path | str) -> pl.DataFrame:
    """Read variant_summary and standardize its column names.

    Args:
        path: ClinVar variant_summary.txt(.gz), tab-delimited with header

    Returns:
        DataFrame with the REQUIRED_COLUMNS (always) and the RETAINED_COLUMNS
        that exist in the file, renamed to snake_case. All columns are strings.

    Raises:
        MissingFileError: If the file does not exist
        SchemaError: If a required column is absent from the header
    """
    df = read_tsv(path, STAGE)

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise SchemaError(
            f"Variant table is missing required column(s) {missing}",
            STAGE,
            path,
        )

    mapping = dict(REQUIRED_COLUMNS)
    mapping.update({old: new for old, new in RETAINED_COLUMNS.items() if old in df.columns})

    df = df.select([pl.col(old).alias(new) for old, new in mapping.items()])

    logger.info(
        "variant_summary_loaded",
        rows=df.height,
        retained_columns=df.width,
        assemblies=sorted(a for a in df["assembly"].unique().to_list() if a is not None),
    )

    return df


def filter_assembly(df: pl.DataFrame, assembly: str = "GRCh38") -> pl.DataFrame:
    """Keep rows mapped to a single genome assembly."""
    result = df.filter(pl.col("assembly") == assembly)

    logger.info(
        "assembly_filter",
        assembly=assembly,
        input_rows=df.height,
        output_rows=result.height,
    )

    return result
