"""Sentiment regression stage: OLS of sentiment on topic plus party fixed effects."""

from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np
import pandas as pd
import statsmodels.api as sm
import statsmodels.formula.api as smf

from manifesto.logger import get_logger

logger = get_logger("stages.regression")

COEFFICIENT_COLUMNS = ["term", "estimate", "std_error", "t_value", "p_value"]


@dataclass
class RegressionResult:
    """Fitted sentiment model with estimability diagnostics."""

    formula: str
    coefficients: pd.DataFrame
    r_squared: float
    adj_r_squared: float
    n_obs: int
    df_resid: float
    non_estimable: list[str] = field(default_factory=list)
    sparse_levels: list[str] = field(default_factory=list)
    fit: Optional[Any] = field(default=None, repr=False)

    def summary_table(self) -> pd.DataFrame:
        """Coefficient table with NaN rows for non-estimable terms."""
        return self.coefficients.copy()

    def to_dict(self) -> dict:
        """Convert to a plain dictionary for logging.

        Returns:
            dict: Formula, fit statistics and coefficient estimates.
        """
        return {
            'formula': self.formula,
            'n_obs': self.n_obs,
            'r_squared': self.r_squared,
            'adj_r_squared': self.adj_r_squared,
            'df_resid': self.df_resid,
            'coefficients': {
                row.term: None if pd.isna(row.estimate) else float(row.estimate)
                for row in self.coefficients.itertuples()
            },
            'non_estimable': list(self.non_estimable),
            'sparse_levels': list(self.sparse_levels),
        }


def _estimable_columns(exog: np.ndarray) -> list[int]:
    """Indices of design columns that are not linear combinations of earlier ones.

    Columns are scanned in order, so the intercept and earlier terms are kept
    and later aliased terms are dropped (as R's ``lm`` reports them as NA).
    """
    keep: list[int] = []
    rank = 0
    for j in range(exog.shape[1]):
        candidate = keep + [j]
        candidate_rank = np.linalg.matrix_rank(exog[:, candidate])
        if candidate_rank > rank:
            keep.append(j)
            rank = candidate_rank
    return keep


def fit_sentiment_model(
    df: pd.DataFrame,
    outcome: str = "sentiment",
    topic: str = "housing",
    group: str = "party",
    min_per_level: int = 2,
) -> RegressionResult:
    """Fit ``outcome ~ topic + C(group)`` by ordinary least squares.

    Args:
        df: Per-sentence table with outcome, boolean topic and group columns.
        outcome: Sentiment score column.
        topic: Binary topic indicator column.
        group: Categorical column entered as fixed effects.
        min_per_level: Minimum sentences per group level for a reliable
            fixed effect; smaller levels are reported in ``sparse_levels``.

    Returns:
        RegressionResult: Coefficients, standard errors, p-values and R².

    Raises:
        ValueError: If columns are missing, the outcome has no variance or
            there are no residual degrees of freedom.
    """
    missing = [col for col in (outcome, topic, group) if col not in df.columns]
    if missing:
        raise ValueError(f"Regression input is missing columns: {', '.join(missing)}")

    df_model = df[[outcome, topic, group]].dropna().copy()
    df_model[topic] = df_model[topic].astype(int)
    df_model[group] = df_model[group].astype(str)

    if df_model.empty:
        raise ValueError("No complete observations to fit the sentiment model")
    if df_model[outcome].nunique() < 2:
        raise ValueError(f"Outcome '{outcome}' has zero variance; R² is undefined")

    level_counts = df_model[group].value_counts().sort_index()
    sparse_levels = [str(level) for level, n in level_counts.items() if n < min_per_level]
    if sparse_levels:
        logger.warning(
            f"{len(sparse_levels)} {group} level(s) have fewer than {min_per_level} sentences: "
            f"{', '.join(sparse_levels)}"
        )

    formula = f"{outcome} ~ {topic} + C({group})"
    model = smf.ols(formula, data=df_model)
    exog = np.asarray(model.exog, dtype=float)
    names = list(model.exog_names)

    keep = _estimable_columns(exog)
    non_estimable = [names[j] for j in range(len(names)) if j not in keep]
    if non_estimable:
        logger.warning(f"Non-estimable coefficients (aliased): {', '.join(non_estimable)}")

    if len(df_model) <= len(keep):
        raise ValueError(
            f"Not enough observations ({len(df_model)}) for {len(keep)} estimable coefficients"
        )

    fit = sm.OLS(np.asarray(model.endog, dtype=float), exog[:, keep]).fit()

    coefficients = pd.DataFrame({"term": names})
    for column in COEFFICIENT_COLUMNS[1:]:
        coefficients[column] = np.nan
    values = {
        "estimate": fit.params,
        "std_error": fit.bse,
        "t_value": fit.tvalues,
        "p_value": fit.pvalues,
    }
    for column, series in values.items():
        coefficients.loc[keep, column] = np.asarray(series, dtype=float)

    result = RegressionResult(
        formula=formula,
        coefficients=coefficients[COEFFICIENT_COLUMNS],
        r_squared=float(fit.rsquared),
        adj_r_squared=float(fit.rsquared_adj),
        n_obs=int(fit.nobs),
        df_resid=float(fit.df_resid),
        non_estimable=non_estimable,
        sparse_levels=sparse_levels,
        fit=fit,
    )
    logger.info(f"Fitted {formula}: n={result.n_obs}, R²={result.r_squared:.4f}")
    return result
