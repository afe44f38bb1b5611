"""Grouped counts and derived datasets for the cohort comparison."""

import polars as pl
import structlog

from oncodomain.errors import InsufficientDataError
from oncodomain.variants.cohorts import CohortPair
from oncodomain.variants.models import CONTROL_CLASS, ONCOGENIC_CLASS

logger = structlog.get_logger(__name__)

STAGE = "aggregator"

# Number of domain symbols shown in the domain/variant-type breakdown
DEFAULT_TOP_N = 8

# Columns carried into the regression dataset
REGRESSION_COLUMNS = [
    "gene_symbol",
    "variant_type",
    "oncogenicity",
    "position",
    "pfam_accession",
    "domain_symbol",
    "variant_in_domain",
]


def domain_type_counts(classified: pl.DataFrame, top_n: int = DEFAULT_TOP_N) -> pl.DataFrame:
    """
    Count in-domain variant/region matches per domain symbol and variant type.

    Each row with variant_in_domain == 1 counts once, so a variant inside two
    regions of the same family contributes two counts. Only the top_n domain
    symbols by total count are kept.

    Args:
        classified: Classified cohort table
        top_n: Number of domain symbols to keep

    Returns:
        DataFrame with domain_symbol, variant_type, count, total (count over
        all variant types of that symbol), sorted by total DESC,
        domain_symbol ASC, count DESC, variant_type ASC

    Raises:
        InsufficientDataError: If top_n exceeds the number of distinct
            domain symbols with an in-domain match

    Notes:
        - Ties in total are broken alphabetically by domain_symbol, so the
          selection does not depend on group_by output order
        - Rows without a domain_symbol (family missing from the catalog)
          are not counted
    """
    in_domain = classified.filter(
        (pl.col("variant_in_domain") == 1) & pl.col("domain_symbol").is_not_null()
    )

    totals = (
        in_domain.group_by("domain_symbol")
        .agg(pl.len().alias("total"))
        .sort(["total", "domain_symbol"], descending=[True, False])
    )

    if top_n > totals.height:
        raise InsufficientDataError(
            f"Requested top {top_n} domain symbols but only {totals.height} "
            "distinct symbols have in-domain variants",
            STAGE,
        )

    top = totals.head(top_n)

    counts = (
        in_domain.join(top, on="domain_symbol", how="inner")
        .group_by(["domain_symbol", "variant_type", "total"])
        .agg(pl.len().alias("count"))
        .select(["domain_symbol", "variant_type", "count", "total"])
        .sort(
            ["total", "domain_symbol", "count", "variant_type"],
            descending=[True, False, True, False],
        )
    )

    logger.info(
        "domain_type_counts",
        top_n=top_n,
        symbols=top["domain_symbol"].to_list(),
        rows=counts.height,
    )

    return counts


def membership_type_counts(classified: pl.DataFrame) -> pl.DataFrame:
    """Count rows per (variant_in_domain, variant_type)."""
    return (
        classified.group_by(["variant_in_domain", "variant_type"])
        .agg(pl.len().alias("count"))
        .sort(["variant_in_domain", "variant_type"])
    )


def membership_type_counts_by_cohort(cohorts: CohortPair) -> pl.DataFrame:
    """membership_type_counts for each cohort, stacked with a cohort column."""
    return pl.concat(
        [
            membership_type_counts(df).select(
                pl.lit(cohort).alias("cohort"),
                pl.all(),
            )
            for cohort, df in cohorts.items()
        ],
        how="vertical",
    )


def contingency_table(cohorts: CohortPair) -> pl.DataFrame:
    """
    Build the 2x2 cohort x membership table used for the chi-squared test.

    Args:
        cohorts: Classified cohorts

    Returns:
        DataFrame with one row per cohort (oncogenic first) and columns
        cohort, outside_domain, inside_domain, summed over variant types
    """
    rows = []
    for cohort, df in cohorts.items():
        inside = df.filter(pl.col("variant_in_domain") == 1).height
        rows.append({
            "cohort": cohort,
            "outside_domain": df.height - inside,
            "inside_domain": inside,
        })

    table = pl.DataFrame(
        rows,
        schema={"cohort": pl.String, "outside_domain": pl.Int64, "inside_domain": pl.Int64},
    )

    logger.info("contingency_table", table=table.to_dicts())

    return table


def balanced_regression_dataset(cohorts: CohortPair, seed: int) -> pl.DataFrame:
    """
    Combine the oncogenic cohort with an equally sized germline sample.

    The germline cohort is downsampled uniformly without replacement to the
    oncogenic row count. oncogenicity_class collapses the labels to
    "Oncogenic" (Oncogenic and Likely oncogenic) and "None" (controls).

    Args:
        cohorts: Classified cohorts
        seed: Random seed; the same seed and input give the same sample

    Returns:
        DataFrame with REGRESSION_COLUMNS plus oncogenicity_class,
        oncogenic rows first

    Raises:
        InsufficientDataError: If the germline cohort has fewer rows than
            the oncogenic cohort
    """
    n = cohorts.oncogenic.height
    if n > cohorts.germline.height:
        raise InsufficientDataError(
            f"Balanced sample needs {n} germline rows but the cohort has "
            f"{cohorts.germline.height}",
            STAGE,
        )

    sample = cohorts.germline.sample(n=n, with_replacement=False, seed=seed)

    dataset = pl.concat(
        [
            cohorts.oncogenic.select(REGRESSION_COLUMNS).with_columns(
                pl.lit(ONCOGENIC_CLASS).alias("oncogenicity_class")
            ),
            sample.select(REGRESSION_COLUMNS).with_columns(
                pl.lit(CONTROL_CLASS).alias("oncogenicity_class")
            ),
        ],
        how="vertical_relaxed",
    )

    logger.info(
        "balanced_regression_dataset",
        seed=seed,
        rows_per_class=n,
        germline_pool=cohorts.germline.height,
    )

    return dataset
