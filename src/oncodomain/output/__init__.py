"""Output generation: summary tables, figures and the analysis summary."""

from oncodomain.output.summary import AnalysisSummary, generate_analysis_summary
from oncodomain.output.visualizations import (
    generate_all_plots,
    plot_domain_type_counts,
    plot_membership_by_type,
    plot_roc_curve,
)
from oncodomain.output.writers import write_analysis_tables

__all__ = [
    "write_analysis_tables",
    "AnalysisSummary",
    "generate_analysis_summary",
    "generate_all_plots",
    "plot_domain_type_counts",
    "plot_membership_by_type",
    "plot_roc_curve",
]
