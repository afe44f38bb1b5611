"""End-to-end analysis: load -> cohorts -> annotate -> classify -> compare.

Each stage takes immutable tables and returns new ones; the only state that
outlives a stage is what ends up in the returned AnalysisResult.
"""

from dataclasses import dataclass

import polars as pl
import structlog

from oncodomain.analysis import (
    ChiSquaredResult,
    RegressionResult,
    RocResult,
    balanced_regression_dataset,
    chi_squared_test,
    contingency_table,
    domain_type_counts,
    evaluate_regression,
    fit_membership_glm,
    membership_type_counts_by_cohort,
)
from oncodomain.annotation import enrich_cohorts
from oncodomain.config.schema import PipelineConfig
from oncodomain.errors import EmptyCohortError
from oncodomain.persistence import ProvenanceTracker
from oncodomain.reference import ReferenceTables, load_reference_tables
from oncodomain.variants import (
    CohortPair,
    add_positions,
    count_unparseable,
    load_variant_summary,
    split_cohorts,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class AnalysisResult:
    """Everything a run produces, for writing and plotting.

    Attributes:
        references: Loaded reference tables
        cohorts: Cohorts with parsed positions (before annotation)
        classified: Cohorts after annotation and domain classification
        domain_counts: Top domain symbols x variant type (oncogenic cohort)
        membership_counts: Membership x variant type per cohort
        contingency: 2x2 cohort x membership table
        chi_squared: Independence test on the contingency table
        regression_data: Balanced dataset used for the GLM
        regression: Fitted binomial GLM
        roc: ROC/AUC of the GLM's fitted probabilities
        unparseable_positions: Cohort -> rows without a parsed position
    """

    references: ReferenceTables
    cohorts: CohortPair
    classified: CohortPair
    domain_counts: pl.DataFrame
    membership_counts: pl.DataFrame
    contingency: pl.DataFrame
    chi_squared: ChiSquaredResult
    regression_data: pl.DataFrame
    regression: RegressionResult
    roc: RocResult
    unparseable_positions: dict[str, int]

    def tables(self) -> dict[str, pl.DataFrame]:
        """Summary tables to write to disk, keyed by file base name."""
        return {
            "domain_type_counts": self.domain_counts,
            "membership_type_counts": self.membership_counts,
            "contingency_table": self.contingency,
            "regression_coefficients": self.regression.to_frame(),
        }


def parse_cohort_positions(cohorts: CohortPair) -> CohortPair:
    """Add protein_change, variant_token and position to both cohorts."""
    return CohortPair(
        oncogenic=add_positions(cohorts.oncogenic),
        germline=add_positions(cohorts.germline),
    )


def run_analysis(
    config: PipelineConfig,
    provenance: ProvenanceTracker | None = None,
) -> AnalysisResult:
    """
    Run the full analysis described by a configuration.

    Args:
        config: Validated pipeline configuration
        provenance: Tracker to record steps in (created from config if None)

    Returns:
        AnalysisResult

    Raises:
        MissingFileError: An input file does not exist
        SchemaError: An input table has unexpected columns
        EmptyCohortError: A cohort is empty after filtering or annotation
        InsufficientDataError: Too little data for an aggregate or test
    """
    if provenance is None:
        provenance = ProvenanceTracker.from_config(config)
    settings = config.analysis

    logger.info("run_analysis_start", config_hash=config.config_hash()[:16])

    references = load_reference_tables(config.inputs)
    provenance.record_step("load_reference_tables", {
        "gene_uniprot_rows": references.gene_uniprot.height,
        "uniprot_pfam_rows": references.uniprot_pfam.height,
        "domain_catalog_rows": references.domain_catalog.height,
        "domain_region_rows": references.domain_regions.height,
    })

    variants = load_variant_summary(config.inputs.variant_summary)
    provenance.record_step("load_variant_summary", {
        "output_count": variants.height,
        "criteria": "ClinVar variant_summary rows",
    })

    cohorts = split_cohorts(
        variants,
        assembly=settings.assembly,
        not_applicable=settings.not_applicable_label,
    )
    provenance.record_step("select_oncogenic", {
        "input_count": variants.height,
        "output_count": cohorts.oncogenic.height,
        "criteria": f"{settings.assembly}; oncogenicity ~ oncogenic; origin ~ somatic",
    })
    provenance.record_step("select_germline_controls", {
        "input_count": variants.height,
        "output_count": cohorts.germline.height,
        "criteria": (
            f"{settings.assembly}; oncogenicity == '{settings.not_applicable_label}'; "
            "origin neither somatic nor germline; gene in oncogenic cohort"
        ),
    })

    cohorts = parse_cohort_positions(cohorts)
    unparseable = {cohort: count_unparseable(df) for cohort, df in cohorts.items()}
    provenance.record_step("parse_positions", {"unparseable_positions": unparseable})

    classified = enrich_cohorts(cohorts, references, batch_size=settings.batch_size)
    for cohort, df in classified.items():
        if df.height == 0:
            raise EmptyCohortError(cohort, "annotation_joiner")
        provenance.record_step(f"classify_{cohort}", {
            "input_count": cohorts[cohort].height,
            "output_count": df.height,
            "criteria": "position and Pfam accession present; one row per domain region",
            "in_domain_rows": int(df["variant_in_domain"].sum()),
        })

    domain_counts = domain_type_counts(classified.oncogenic, top_n=settings.top_n_domains)
    membership_counts = membership_type_counts_by_cohort(classified)
    contingency = contingency_table(classified)
    chi_squared = chi_squared_test(contingency)
    provenance.record_step("chi_squared_test", chi_squared.to_dict())

    regression_data = balanced_regression_dataset(classified, seed=settings.seed)
    regression = fit_membership_glm(regression_data)
    roc = evaluate_regression(regression_data, regression)
    provenance.record_step("membership_regression", {
        "input_count": classified.germline.height,
        "output_count": regression_data.height,
        "criteria": f"germline downsampled to oncogenic size (seed={settings.seed})",
        "odds_ratio": regression.odds_ratio,
        "auc": roc.auc,
    })

    logger.info(
        "run_analysis_complete",
        oncogenic_rows=classified.oncogenic.height,
        germline_rows=classified.germline.height,
        chi_squared_p=chi_squared.p_value,
        auc=round(roc.auc, 4),
    )

    return AnalysisResult(
        references=references,
        cohorts=cohorts,
        classified=classified,
        domain_counts=domain_counts,
        membership_counts=membership_counts,
        contingency=contingency,
        chi_squared=chi_squared,
        regression_data=regression_data,
        regression=regression,
        roc=roc,
        unparseable_positions=unparseable,
    )
