"""Annotate variants with Pfam domains and flag in-domain positions."""

from typing import Iterator

import polars as pl
import structlog

from oncodomain.reference.load import ReferenceTables
from oncodomain.variants.cohorts import CohortPair

logger = structlog.get_logger()

# Rows per fan-out batch for large cohorts
DEFAULT_BATCH_SIZE = 3000

REGION_KEY = ["pfam_accession", "region_start", "region_end"]


def annotate_cohort(cohort: pl.DataFrame, references: ReferenceTables) -> pl.DataFrame:
    """Attach UniProt, Pfam and catalog annotations to a cohort.

    Joins gene_symbol -> uniprot_accession -> pfam_accession -> catalog
    with left joins, removing duplicate rows after each join. Rows that end
    up without a position or without a Pfam accession cannot be placed
    relative to a domain and are dropped.

    Args:
        cohort: Variant table with gene_symbol and position columns
        references: Loaded reference tables

    Returns:
        One row per (variant, Pfam accession) with catalog attributes
    """
    logger.info("annotate_cohort_start", input_rows=cohort.height)

    annotated = cohort.join(
        references.gene_uniprot, on="gene_symbol", how="left", maintain_order="left"
    ).unique(maintain_order=True)
    with_uniprot = annotated.filter(pl.col("uniprot_accession").is_not_null()).height

    annotated = annotated.join(
        references.uniprot_pfam, on="uniprot_accession", how="left", maintain_order="left"
    ).unique(maintain_order=True)

    annotated = annotated.join(
        references.domain_catalog, on="pfam_accession", how="left", maintain_order="left"
    ).unique(maintain_order=True)

    joined_rows = annotated.height
    annotated = annotated.filter(
        pl.col("position").is_not_null() & pl.col("pfam_accession").is_not_null()
    )

    logger.info(
        "annotate_cohort_complete",
        with_uniprot=with_uniprot,
        joined_rows=joined_rows,
        dropped_missing_position_or_pfam=joined_rows - annotated.height,
        output_rows=annotated.height,
    )

    return annotated


def restrict_regions(regions: pl.DataFrame, annotated: pl.DataFrame) -> pl.DataFrame:
    """Keep only regions of Pfam families present in an annotated cohort.

    Must be computed for each cohort separately: a region table restricted
    to one cohort's families silently loses matches for the other.
    """
    families = annotated.select("pfam_accession").unique()
    restricted = regions.join(
        families, on="pfam_accession", how="semi", maintain_order="left"
    ).unique(subset=REGION_KEY, maintain_order=True)

    logger.debug(
        "regions_restricted",
        families=families.height,
        input_regions=regions.height,
        output_regions=restricted.height,
    )

    return restricted


def classify_membership(
    annotated: pl.DataFrame,
    regions: pl.DataFrame,
    restrict: bool = True,
) -> pl.DataFrame:
    """Fan out each variant over its family's regions and flag containment.

    Args:
        annotated: Output of annotate_cohort
        regions: Domain region table (pfam_accession, region_start, region_end)
        restrict: Semi-join regions to the cohort's families before joining.
            The result is the same either way; restricting keeps the join small.

    Returns:
        One row per (variant, region) with variant_in_domain (Int8): 1 when
        region_start <= position <= region_end, 0 otherwise, including when
        the family has no region at all
    """
    if restrict:
        regions = restrict_regions(regions, annotated)

    joined = annotated.join(
        regions, on="pfam_accession", how="left", maintain_order="left_right"
    )
    return joined.with_columns(
        pl.col("position")
        .is_between(pl.col("region_start"), pl.col("region_end"), closed="both")
        .fill_null(False)
        .cast(pl.Int8)
        .alias("variant_in_domain")
    )


def iter_batches(df: pl.DataFrame, batch_size: int) -> Iterator[pl.DataFrame]:
    """Yield consecutive row slices of at most batch_size rows."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    for offset in range(0, df.height, batch_size):
        yield df.slice(offset, batch_size)


def classify_in_batches(
    annotated: pl.DataFrame,
    regions: pl.DataFrame,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> pl.DataFrame:
    """Batched classify_membership, bounding the size of each fan-out join.

    Regions are restricted once for the whole cohort, then every batch is
    classified independently and the outputs are concatenated in order.
    The result equals classify_membership on the full table.
    """
    restricted = restrict_regions(regions, annotated)

    if annotated.height <= batch_size:
        return classify_membership(annotated, restricted, restrict=False)

    total_batches = (annotated.height + batch_size - 1) // batch_size
    logger.info(
        "classify_batches_start",
        rows=annotated.height,
        batch_size=batch_size,
        total_batches=total_batches,
    )

    return pl.concat(
        [
            classify_membership(batch, restricted, restrict=False)
            for batch in iter_batches(annotated, batch_size)
        ],
        how="vertical",
    )


def enrich_cohorts(
    cohorts: CohortPair,
    references: ReferenceTables,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> CohortPair:
    """Annotate and classify both cohorts.

    Each cohort gets its own region restriction.

    Args:
        cohorts: Cohorts with parsed positions
        references: Loaded reference tables
        batch_size: Rows per fan-out batch

    Returns:
        CohortPair of classified (EnrichedVariant) tables
    """
    classified = {}
    for cohort, df in cohorts.items():
        annotated = annotate_cohort(df, references)
        result = classify_in_batches(annotated, references.domain_regions, batch_size)
        classified[cohort] = result

        logger.info(
            "cohort_classified",
            cohort=cohort,
            variants=annotated.height,
            variant_region_rows=result.height,
            in_domain_rows=int(result["variant_in_domain"].sum()),
        )

    return CohortPair(**classified)
