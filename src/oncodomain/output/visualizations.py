"""Figures for the cohort comparison."""

import logging
from pathlib import Path

import matplotlib
import polars as pl

# Use Agg backend (non-interactive, safe for headless/CLI use)
matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import seaborn as sns  # noqa: E402

from oncodomain.analysis.statistics import RocResult  # noqa: E402

logger = logging.getLogger(__name__)

MEMBERSHIP_COLORS = {"Outside domain": "#95a5a6", "Inside domain": "#2980b9"}


def _save(fig, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=300, bbox_inches="tight")
    # Close figure to release memory between plots
    plt.close(fig)
    return output_path


def plot_domain_type_counts(counts: pl.DataFrame, output_path: Path) -> Path:
    """
    Stacked bar chart of in-domain oncogenic variants per domain symbol.

    Args:
        counts: Output of domain_type_counts (domain_symbol, variant_type, count, total)
        output_path: Path where PNG will be saved

    Returns:
        Path to the saved PNG file

    Notes:
        - Bars keep the domain ordering of the input (highest total first)
        - One stacked segment per variant type
    """
    wide = (
        counts.pivot(on="variant_type", index="domain_symbol", values="count")
        .fill_null(0)
        .to_pandas()
        .set_index("domain_symbol")
    )
    order = counts.unique(subset=["domain_symbol"], maintain_order=True)["domain_symbol"].to_list()
    wide = wide.loc[order]

    sns.set_theme(style="whitegrid", context="paper")
    fig, ax = plt.subplots(figsize=(10, 6))

    wide.plot(kind="bar", stacked=True, ax=ax, colormap="viridis")

    plt.setp(ax.get_xticklabels(), rotation=45, ha="right")
    ax.set_xlabel("Pfam Domain")
    ax.set_ylabel("Variant-Region Matches")
    ax.set_title("Oncogenic Variants by Domain and Variant Type")
    ax.legend(title="Variant Type", bbox_to_anchor=(1.02, 1), loc="upper left")

    _save(fig, output_path)
    logger.info(f"Saved domain/type plot to {output_path}")
    return output_path


def plot_membership_by_type(membership: pl.DataFrame, output_path: Path) -> Path:
    """
    Grouped bar charts of inside/outside-domain counts per variant type, one panel per cohort.

    Args:
        membership: Output of membership_type_counts_by_cohort
        output_path: Path where PNG will be saved

    Returns:
        Path to the saved PNG file
    """
    pdf = membership.with_columns(
        pl.when(pl.col("variant_in_domain") == 1)
        .then(pl.lit("Inside domain"))
        .otherwise(pl.lit("Outside domain"))
        .alias("membership")
    ).to_pandas()

    sns.set_theme(style="whitegrid", context="paper")
    cohorts = list(dict.fromkeys(pdf["cohort"]))
    fig, axes = plt.subplots(1, len(cohorts), figsize=(6 * len(cohorts), 6), squeeze=False)

    for ax, cohort in zip(axes[0], cohorts):
        sns.barplot(
            data=pdf[pdf["cohort"] == cohort],
            x="variant_type",
            y="count",
            hue="membership",
            hue_order=list(MEMBERSHIP_COLORS),
            palette=MEMBERSHIP_COLORS,
            ax=ax,
        )
        plt.setp(ax.get_xticklabels(), rotation=45, ha="right")
        ax.set_xlabel("Variant Type")
        ax.set_ylabel("Count")
        ax.set_title(f"{cohort.capitalize()} Cohort")

    _save(fig, output_path)
    logger.info(f"Saved membership plot to {output_path}")
    return output_path


def plot_roc_curve(roc: RocResult, output_path: Path) -> Path:
    """
    ROC curve of the membership regression with the AUC in the legend.

    Args:
        roc: Output of roc_auc / evaluate_regression
        output_path: Path where PNG will be saved

    Returns:
        Path to the saved PNG file
    """
    sns.set_theme(style="whitegrid", context="paper")
    fig, ax = plt.subplots(figsize=(6, 6))

    ax.plot(roc.fpr, roc.tpr, color="#2980b9", label=f"AUC = {roc.auc:.3f}")
    ax.plot([0, 1], [0, 1], linestyle="--", color="#7f8c8d")

    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_xlabel("False Positive Rate")
    ax.set_ylabel("True Positive Rate")
    ax.set_title("Domain Membership ROC")
    ax.legend(loc="lower right")

    _save(fig, output_path)
    logger.info(f"Saved ROC curve to {output_path}")
    return output_path


def generate_all_plots(
    domain_counts: pl.DataFrame,
    membership_counts: pl.DataFrame,
    roc: RocResult,
    output_dir: Path,
) -> dict[str, Path]:
    """
    Generate all figures.

    Args:
        domain_counts: Output of domain_type_counts
        membership_counts: Output of membership_type_counts_by_cohort
        roc: ROC result of the membership regression
        output_dir: Directory where plots will be saved

    Returns:
        Dictionary mapping plot name to file path

    Notes:
        - Creates output directory if needed
        - A failing plot is logged and skipped; the others are still produced
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    plots = {}

    try:
        plots["domain_type_counts"] = plot_domain_type_counts(
            domain_counts,
            output_dir / "domain_type_counts.png",
        )
    except Exception as e:
        logger.warning(f"Failed to create domain/type plot: {e}")

    try:
        plots["membership_by_type"] = plot_membership_by_type(
            membership_counts,
            output_dir / "membership_by_type.png",
        )
    except Exception as e:
        logger.warning(f"Failed to create membership plot: {e}")

    try:
        plots["roc_curve"] = plot_roc_curve(
            roc,
            output_dir / "roc_curve.png",
        )
    except Exception as e:
        logger.warning(f"Failed to create ROC plot: {e}")

    logger.info(f"Generated {len(plots)} plots in {output_dir}")
    return plots
