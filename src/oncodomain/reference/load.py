"""Load and validate the reference tables that link genes to Pfam domains."""

import re
from dataclasses import dataclass
from pathlib import Path

import polars as pl
import structlog

from oncodomain.config.schema import InputFiles
from oncodomain.reference.models import (
    DOMAIN_CATALOG_COLUMNS,
    DOMAIN_REGION_COLUMN_VARIANTS,
    GENE_UNIPROT_COLUMN_VARIANTS,
    PFAM_ACCESSION_PATTERN,
    UNIPROT_PFAM_COLUMNS,
)
from oncodomain.tables import read_tsv, resolve_columns

logger = structlog.get_logger()

STAGE = "reference_loader"


@dataclass(frozen=True)
class ReferenceTables:
    """The four reference tables, loaded once per run.

    Attributes:
        gene_uniprot: gene_symbol, uniprot_accession
        uniprot_pfam: uniprot_accession, pfam_accession
        domain_catalog: pfam_accession, clan_accession, clan_name,
            domain_symbol, domain_name
        domain_regions: pfam_accession, region_start, region_end
    """

    gene_uniprot: pl.DataFrame
    uniprot_pfam: pl.DataFrame
    domain_catalog: pl.DataFrame
    domain_regions: pl.DataFrame


def strip_pfam_version(col: str) -> pl.Expr:
    """Drop the release suffix from a Pfam accession (PF00069.28 -> PF00069)."""
    return pl.col(col).str.strip_chars().str.replace(r"\.\d+$", "")


def load_gene_uniprot_map(path: Path | str) -> pl.DataFrame:
    """Load the gene symbol -> UniProt accession cross-reference.

    Args:
        path: Tab-delimited file with a header row

    Returns:
        DataFrame with gene_symbol and uniprot_accession, no nulls,
        unique per (gene_symbol, uniprot_accession). A comma-separated
        accession cell becomes one row per accession.

    Raises:
        MissingFileError: If the file does not exist
        SchemaError: If either column cannot be found in the header
    """
    df = read_tsv(path, STAGE)
    mapping = resolve_columns(df, GENE_UNIPROT_COLUMN_VARIANTS, STAGE, path)

    df = (
        df.select([pl.col(old).alias(new) for old, new in mapping.items()])
        # HGNC lists several accessions for some genes: "P04637, Q53GA5"
        .with_columns(pl.col("uniprot_accession").str.split(","))
        .explode("uniprot_accession")
        .with_columns(
            pl.col("gene_symbol").str.strip_chars(),
            pl.col("uniprot_accession").str.strip_chars(),
        )
        .filter(
            pl.col("uniprot_accession").is_not_null()
            & (pl.col("uniprot_accession") != "")
        )
        .unique(subset=["gene_symbol", "uniprot_accession"], maintain_order=True)
    )

    logger.info(
        "gene_uniprot_loaded",
        rows=df.height,
        symbols=df["gene_symbol"].n_unique(),
    )

    return df


def load_uniprot_pfam_map(path: Path | str) -> pl.DataFrame:
    """Load the UniProt -> Pfam mapping from the PDB/Pfam cross-reference.

    The file has no usable header; columns are addressed through the named
    layout in ``UNIPROT_PFAM_LAYOUT``. Some releases carry a header line that
    polars reads as data: a first row whose Pfam field is not a Pfam
    accession is treated as such and removed.

    Args:
        path: Tab-delimited mapping file

    Returns:
        DataFrame with uniprot_accession and pfam_accession (version suffix
        removed), unique per pair

    Raises:
        MissingFileError: If the file does not exist
        SchemaError: If the file does not have the expected column count
    """
    df = read_tsv(path, STAGE, has_header=False, new_columns=UNIPROT_PFAM_COLUMNS)

    if df.height > 0:
        first_pfam = df["pfam_accession"][0]
        looks_like_data = (
            first_pfam is not None
            and re.match(PFAM_ACCESSION_PATTERN, first_pfam.strip()) is not None
        )
        if not looks_like_data:
            logger.warning(
                "uniprot_pfam_header_row_stripped",
                path=str(path),
                first_row=df.row(0),
            )
            df = df.slice(1)

    df = (
        df.select(
            pl.col("uniprot_accession").str.strip_chars(),
            strip_pfam_version("pfam_accession").alias("pfam_accession"),
        )
        .drop_nulls()
        .unique(maintain_order=True)
    )

    logger.info(
        "uniprot_pfam_loaded",
        rows=df.height,
        uniprot_accessions=df["uniprot_accession"].n_unique(),
        pfam_accessions=df["pfam_accession"].n_unique(),
    )

    return df


def load_domain_catalog(path: Path | str) -> pl.DataFrame:
    """Load Pfam family metadata (Pfam-A.clans.tsv layout).

    Args:
        path: Five-column tab-delimited file without a header

    Returns:
        DataFrame with DOMAIN_CATALOG_COLUMNS, one row per Pfam accession

    Raises:
        MissingFileError: If the file does not exist
        SchemaError: If the file does not have exactly five columns
    """
    df = read_tsv(path, STAGE, has_header=False, new_columns=DOMAIN_CATALOG_COLUMNS)

    df = (
        df.with_columns(strip_pfam_version("pfam_accession").alias("pfam_accession"))
        .filter(pl.col("pfam_accession").is_not_null())
        .unique(subset=["pfam_accession"], keep="first", maintain_order=True)
    )

    logger.info("domain_catalog_loaded", rows=df.height)

    return df


def load_domain_regions(path: Path | str) -> pl.DataFrame:
    """Load Pfam domain coordinates (Pfam-A.regions layout).

    Only the Pfam accession and the start/end columns are kept. Rows with
    missing or non-numeric coordinates, or with start > end, are rejected.

    Args:
        path: Tab-delimited file with header, usually gzip-compressed

    Returns:
        DataFrame with pfam_accession, region_start (Int64), region_end
        (Int64), unique per triple

    Raises:
        MissingFileError: If the file does not exist
        SchemaError: If a required column cannot be found in the header
    """
    df = read_tsv(path, STAGE)
    mapping = resolve_columns(df, DOMAIN_REGION_COLUMN_VARIANTS, STAGE, path)

    df = df.select([pl.col(old).alias(new) for old, new in mapping.items()]).with_columns(
        strip_pfam_version("pfam_accession").alias("pfam_accession"),
        pl.col("region_start").str.strip_chars().cast(pl.Int64, strict=False),
        pl.col("region_end").str.strip_chars().cast(pl.Int64, strict=False),
    )

    total = df.height
    df = df.filter(
        pl.col("pfam_accession").is_not_null()
        & pl.col("region_start").is_not_null()
        & pl.col("region_end").is_not_null()
        & (pl.col("region_start") <= pl.col("region_end"))
    )
    rejected = total - df.height
    if rejected:
        logger.warning("domain_regions_rejected", rejected=rejected, total=total)

    df = df.unique(
        subset=["pfam_accession", "region_start", "region_end"],
        maintain_order=True,
    )

    logger.info(
        "domain_regions_loaded",
        rows=df.height,
        pfam_accessions=df["pfam_accession"].n_unique(),
    )

    return df


def load_reference_tables(inputs: InputFiles) -> ReferenceTables:
    """Load all four reference tables named in the configuration."""
    return ReferenceTables(
        gene_uniprot=load_gene_uniprot_map(inputs.gene_uniprot),
        uniprot_pfam=load_uniprot_pfam_map(inputs.uniprot_pfam),
        domain_catalog=load_domain_catalog(inputs.domain_catalog),
        domain_regions=load_domain_regions(inputs.domain_regions),
    )
