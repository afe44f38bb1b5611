"""Split variants into the oncogenic cohort and the germline control cohort."""

from dataclasses import dataclass
from typing import Iterator

import polars as pl
import structlog

from oncodomain.errors import EmptyCohortError
from oncodomain.variants.load import filter_assembly
from oncodomain.variants.models import GERMLINE, ONCOGENIC

logger = structlog.get_logger()

STAGE = "variant_classifier"


@dataclass(frozen=True)
class CohortPair:
    """One table per cohort, keyed by cohort identifier.

    Every pipeline stage that works per cohort takes a CohortPair and
    returns a new one; tables are never modified in place.
    """

    oncogenic: pl.DataFrame
    germline: pl.DataFrame

    def __getitem__(self, cohort: str) -> pl.DataFrame:
        if cohort == ONCOGENIC:
            return self.oncogenic
        if cohort == GERMLINE:
            return self.germline
        raise KeyError(cohort)

    def items(self) -> Iterator[tuple[str, pl.DataFrame]]:
        yield ONCOGENIC, self.oncogenic
        yield GERMLINE, self.germline

    def heights(self) -> dict[str, int]:
        return {cohort: df.height for cohort, df in self.items()}


def _lower(col: str) -> pl.Expr:
    # Null origin/oncogenicity compare as the empty string
    return pl.col(col).fill_null("").str.to_lowercase()


def select_oncogenic(df: pl.DataFrame) -> pl.DataFrame:
    """Somatic variants classified Oncogenic or Likely oncogenic.

    Both tests are case-insensitive substring matches, so "Likely oncogenic"
    and "germline/somatic" origins qualify.
    """
    return df.filter(
        _lower("oncogenicity").str.contains("oncogenic", literal=True)
        & _lower("origin").str.contains("somatic", literal=True)
    )


def select_germline_controls(
    df: pl.DataFrame,
    oncogenic: pl.DataFrame,
    not_applicable: str = "not applicable",
) -> pl.DataFrame:
    """Control variants in the same genes as the oncogenic cohort.

    Controls carry no oncogenicity call (exactly ``not_applicable``) and an
    origin that mentions neither "somatic" nor "germline". Records with a
    missing origin therefore qualify, while explicitly germline-labelled ones
    do not; the cohort is named "germline" after its role as the
    non-oncogenic comparison group.

    Args:
        df: Assembly-filtered variant table
        oncogenic: Output of :func:`select_oncogenic`
        not_applicable: Oncogenicity value meaning "no oncogenicity call"

    Returns:
        Control rows restricted to gene symbols present in ``oncogenic``
    """
    origin = _lower("origin")
    candidates = df.filter(
        (pl.col("oncogenicity") == not_applicable)
        & ~origin.str.contains("somatic", literal=True)
        & ~origin.str.contains("germline", literal=True)
    )

    genes = oncogenic.select("gene_symbol").unique()
    return candidates.join(genes, on="gene_symbol", how="semi", maintain_order="left")


def split_cohorts(
    df: pl.DataFrame,
    assembly: str = "GRCh38",
    not_applicable: str = "not applicable",
) -> CohortPair:
    """Filter to one assembly and build both cohorts.

    Args:
        df: Variant table from load_variant_summary
        assembly: Genome assembly to keep
        not_applicable: Oncogenicity value marking controls

    Returns:
        CohortPair with disjoint oncogenic and germline tables

    Raises:
        EmptyCohortError: If either cohort has no rows
    """
    df = filter_assembly(df, assembly)

    oncogenic = select_oncogenic(df)
    if oncogenic.height == 0:
        raise EmptyCohortError(ONCOGENIC, STAGE)

    germline = select_germline_controls(df, oncogenic, not_applicable)
    if germline.height == 0:
        raise EmptyCohortError(GERMLINE, STAGE)

    logger.info(
        "cohorts_split",
        assembly=assembly,
        oncogenic_rows=oncogenic.height,
        oncogenic_genes=oncogenic["gene_symbol"].n_unique(),
        germline_rows=germline.height,
        germline_genes=germline["gene_symbol"].n_unique(),
    )

    return CohortPair(oncogenic=oncogenic, germline=germline)
