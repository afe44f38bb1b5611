"""Cohort comparison: grouped counts, chi-squared test, GLM and ROC/AUC."""

from oncodomain.analysis.aggregate import (
    DEFAULT_TOP_N,
    balanced_regression_dataset,
    contingency_table,
    domain_type_counts,
    membership_type_counts,
    membership_type_counts_by_cohort,
)
from oncodomain.analysis.statistics import (
    ChiSquaredResult,
    RegressionResult,
    RocResult,
    chi_squared_test,
    evaluate_regression,
    fit_membership_glm,
    roc_auc,
)

__all__ = [
    "DEFAULT_TOP_N",
    "balanced_regression_dataset",
    "contingency_table",
    "domain_type_counts",
    "membership_type_counts",
    "membership_type_counts_by_cohort",
    "ChiSquaredResult",
    "RegressionResult",
    "RocResult",
    "chi_squared_test",
    "evaluate_regression",
    "fit_membership_glm",
    "roc_auc",
]
