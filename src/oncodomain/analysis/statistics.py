"""Chi-squared test, binomial GLM and ROC/AUC for domain membership."""

from dataclasses import dataclass, field

import numpy as np
import polars as pl
import statsmodels.api as sm
import statsmodels.formula.api as smf
import structlog
from scipy.stats import chi2_contingency
from sklearn.metrics import roc_auc_score, roc_curve

from oncodomain.errors import InsufficientDataError
from oncodomain.variants.models import ONCOGENIC_CLASS

logger = structlog.get_logger(__name__)

STAGE = "statistics"

# Response ~ predictor for the membership model
GLM_FORMULA = "variant_in_domain ~ is_oncogenic"


@dataclass(frozen=True)
class ChiSquaredResult:
    """Chi-squared test of independence on the cohort x membership table."""

    statistic: float
    p_value: float
    dof: int
    expected: np.ndarray = field(repr=False)

    def to_dict(self) -> dict:
        return {
            "statistic": self.statistic,
            "p_value": self.p_value,
            "dof": self.dof,
            "expected": self.expected.tolist(),
        }


@dataclass(frozen=True)
class RegressionResult:
    """Fitted binomial GLM of domain membership on oncogenicity class.

    Attributes:
        coefficients: Term -> log-odds estimate (Intercept, is_oncogenic)
        std_errors: Term -> standard error
        p_values: Term -> Wald test p-value
        odds_ratio: exp(is_oncogenic coefficient)
        aic: Akaike information criterion
        n_obs: Number of observations used in the fit
        fitted: Predicted membership probability per input row
    """

    coefficients: dict[str, float]
    std_errors: dict[str, float]
    p_values: dict[str, float]
    odds_ratio: float
    aic: float
    n_obs: int
    fitted: np.ndarray = field(repr=False)

    def to_frame(self) -> pl.DataFrame:
        """Coefficient table with one row per model term."""
        terms = list(self.coefficients)
        return pl.DataFrame({
            "term": terms,
            "estimate": [self.coefficients[t] for t in terms],
            "std_error": [self.std_errors[t] for t in terms],
            "p_value": [self.p_values[t] for t in terms],
        })


@dataclass(frozen=True)
class RocResult:
    """ROC curve and area under it."""

    fpr: np.ndarray = field(repr=False)
    tpr: np.ndarray = field(repr=False)
    thresholds: np.ndarray = field(repr=False)
    auc: float = 0.0


def _require_two_classes(labels: np.ndarray, what: str) -> None:
    if np.unique(labels).size < 2:
        raise InsufficientDataError(
            f"{what} needs both in-domain and out-of-domain rows; "
            f"all {labels.size} rows have variant_in_domain={labels[0] if labels.size else 'n/a'}",
            STAGE,
        )


def chi_squared_test(table: pl.DataFrame) -> ChiSquaredResult:
    """
    Test independence of cohort and domain membership.

    Args:
        table: Output of contingency_table (outside_domain, inside_domain columns)

    Returns:
        ChiSquaredResult (Yates continuity correction applies to 2x2 tables)

    Raises:
        InsufficientDataError: If an expected frequency is zero
    """
    observed = table.select(["outside_domain", "inside_domain"]).to_numpy()

    try:
        statistic, p_value, dof, expected = chi2_contingency(observed)
    except ValueError as e:
        raise InsufficientDataError(f"Chi-squared test failed: {e}", STAGE) from e

    result = ChiSquaredResult(
        statistic=float(statistic),
        p_value=float(p_value),
        dof=int(dof),
        expected=expected,
    )

    logger.info(
        "chi_squared_test",
        statistic=round(result.statistic, 4),
        p_value=result.p_value,
        dof=result.dof,
    )

    return result


def fit_membership_glm(dataset: pl.DataFrame) -> RegressionResult:
    """
    Fit a binomial GLM of variant_in_domain on the oncogenicity class.

    Args:
        dataset: Output of balanced_regression_dataset

    Returns:
        RegressionResult with fitted probabilities in dataset row order

    Raises:
        InsufficientDataError: If variant_in_domain takes a single value
    """
    _require_two_classes(dataset["variant_in_domain"].to_numpy(), "Membership regression")

    pdf = dataset.select(
        pl.col("variant_in_domain").cast(pl.Int64),
        (pl.col("oncogenicity_class") == ONCOGENIC_CLASS).cast(pl.Int64).alias("is_oncogenic"),
    ).to_pandas()

    model = smf.glm(GLM_FORMULA, data=pdf, family=sm.families.Binomial())
    fit = model.fit()

    coefficients = {term: float(v) for term, v in fit.params.items()}
    result = RegressionResult(
        coefficients=coefficients,
        std_errors={term: float(v) for term, v in fit.bse.items()},
        p_values={term: float(v) for term, v in fit.pvalues.items()},
        odds_ratio=float(np.exp(coefficients["is_oncogenic"])),
        aic=float(fit.aic),
        n_obs=int(fit.nobs),
        fitted=np.asarray(fit.fittedvalues, dtype=float),
    )

    logger.info(
        "membership_glm_fit",
        n_obs=result.n_obs,
        coefficients={k: round(v, 4) for k, v in coefficients.items()},
        odds_ratio=round(result.odds_ratio, 4),
        aic=round(result.aic, 2),
    )

    return result


def roc_auc(labels: np.ndarray, scores: np.ndarray) -> RocResult:
    """
    ROC curve and AUC of scores against binary membership labels.

    Raises:
        InsufficientDataError: If labels contain a single class
    """
    labels = np.asarray(labels)
    _require_two_classes(labels, "ROC/AUC")

    fpr, tpr, thresholds = roc_curve(labels, scores)
    auc = float(roc_auc_score(labels, scores))

    logger.info("roc_auc", auc=round(auc, 4), points=len(fpr))

    return RocResult(fpr=fpr, tpr=tpr, thresholds=thresholds, auc=auc)


def evaluate_regression(dataset: pl.DataFrame, regression: RegressionResult) -> RocResult:
    """ROC/AUC of the GLM's fitted probabilities on its own training rows."""
    return roc_auc(dataset["variant_in_domain"].to_numpy(), regression.fitted)
