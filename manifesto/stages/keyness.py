"""Keyness stage: compare term frequencies between two party cohorts.

For every term a 2x2 contingency table is formed:

                    target      reference
    term              a             b
    other terms       c             d

with c = target total - a and d = reference total - b. The statistic is
signed: positive when the term is over-represented in the target cohort.

Measures:

- ``chi2``: Pearson chi-square. ``correction="default"`` or ``"yates"`` applies
  Yates' continuity correction. The correction is clipped at |O - E| so that it
  never flips the sign of a deviation (as in scipy.stats.chi2_contingency).
- ``lr``: likelihood-ratio G². ``correction="default"`` or ``"williams"``
  applies Williams' correction, as quanteda's textstat_keyness does.
"""

from typing import Callable, Iterable, Optional

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from scipy.stats import chi2 as chi2_dist
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS, CountVectorizer

from manifesto.logger import get_logger

logger = get_logger("stages.keyness")

KEYNESS_COLUMNS = ["feature", "statistic", "p", "n_target", "n_reference"]
MEASURES = ("chi2", "lr")
CORRECTIONS = ("default", "yates", "williams", "none")


def assign_cohorts(
    df: pd.DataFrame,
    target_parties: Iterable[str],
    group_column: str = "party",
    target_label: str = "target",
    reference_label: str = "reference",
) -> pd.DataFrame:
    """Regroup documents into a target cohort and a reference cohort.

    Args:
        df: Corpus with a party column.
        target_parties: Parties forming the target cohort; all others are reference.
        group_column: Column holding the party name.
        target_label: Cohort label for target documents.
        reference_label: Cohort label for the remaining documents.

    Returns:
        pd.DataFrame: Copy with a ``cohort`` column.

    Raises:
        ValueError: If a target party does not occur in the corpus.
    """
    targets = set(target_parties)
    present = set(df[group_column].unique())
    unknown = sorted(targets - present)
    if unknown:
        raise ValueError(
            f"Target parties not found in corpus: {', '.join(unknown)}. "
            f"Known parties: {', '.join(sorted(map(str, present)))}"
        )

    df_out = df.copy()
    df_out["cohort"] = np.where(df_out[group_column].isin(targets), target_label, reference_label)

    counts = df_out["cohort"].value_counts()
    logger.info(
        f"Cohorts: {target_label}={int(counts.get(target_label, 0))}, "
        f"{reference_label}={int(counts.get(reference_label, 0))} sentences"
    )
    return df_out


def cohort_frequencies(
    df: pd.DataFrame,
    tokenizer: Callable[[str], list[str]],
    target_label: str = "target",
    cohort_column: str = "cohort",
    remove_stopwords: bool = True,
    min_count: int = 1,
) -> tuple[pd.Series, pd.Series]:
    """Build term frequency distributions for the two cohorts.

    Args:
        df: Corpus with text and cohort columns.
        tokenizer: Tokenizer shared with the dictionary stage.
        target_label: Cohort label treated as target; every other label is reference.
        cohort_column: Column holding cohort labels.
        remove_stopwords: Drop scikit-learn's English stop words.
        min_count: Minimum total frequency for a term to be kept.

    Returns:
        tuple[pd.Series, pd.Series]: Target and reference counts over the same
            vocabulary, indexed by term.
    """
    if df.empty:
        empty = pd.Series(dtype=int)
        return empty, empty.copy()

    stop_words = ENGLISH_STOP_WORDS if remove_stopwords else frozenset()

    def analyzer(text: str) -> list[str]:
        return [tok for tok in tokenizer(text) if tok not in stop_words]

    vectorizer = CountVectorizer(analyzer=analyzer)
    try:
        dfm = vectorizer.fit_transform(df["text"])
    except ValueError:
        # Raised when no document yields any token
        logger.warning("No terms left after tokenization; keyness input is empty")
        empty = pd.Series(dtype=int)
        return empty, empty.copy()

    vocabulary = vectorizer.get_feature_names_out()
    is_target = (df[cohort_column] == target_label).to_numpy()

    target_counts = np.asarray(dfm[np.flatnonzero(is_target)].sum(axis=0)).ravel()
    reference_counts = np.asarray(dfm[np.flatnonzero(~is_target)].sum(axis=0)).ravel()

    target = pd.Series(target_counts, index=vocabulary, dtype=int, name="target")
    reference = pd.Series(reference_counts, index=vocabulary, dtype=int, name="reference")

    if min_count > 1:
        keep = (target + reference) >= min_count
        target, reference = target[keep], reference[keep]

    logger.info(f"Built cohort frequencies over {len(target)} terms")
    return target, reference


def _expected(a, b, c, d):
    n = a + b + c + d
    return (
        (a + b) * (a + c) / n,
        (a + b) * (b + d) / n,
        (c + d) * (a + c) / n,
        (c + d) * (b + d) / n,
    )


def _chi2(a, b, c, d, yates: bool) -> np.ndarray:
    expected = _expected(a, b, c, d)
    # In a 2x2 table every cell deviates from its expectation by the same amount
    deviation = np.abs(a - expected[0])
    if yates:
        deviation = deviation - np.minimum(0.5, deviation)
    return sum(
        np.divide(deviation ** 2, e, out=np.zeros_like(deviation), where=e > 0)
        for e in expected
    )


def _g2(a, b, c, d, williams: bool) -> np.ndarray:
    observed = (a, b, c, d)
    expected = _expected(a, b, c, d)
    g2 = np.zeros_like(a)
    for o, e in zip(observed, expected):
        ratio = np.divide(o, e, out=np.ones_like(o), where=(o > 0) & (e > 0))
        g2 = g2 + o * np.log(ratio)
    g2 = 2 * g2

    if williams:
        n = a + b + c + d
        rows = (a + b, c + d)
        cols = (a + c, b + d)
        with np.errstate(divide="ignore", invalid="ignore"):
            q = 1 + (n * sum(1 / r for r in rows) - 1) * (n * sum(1 / k for k in cols) - 1) / (6 * n)
        q = np.where(np.isfinite(q) & (q > 0), q, 1.0)
        g2 = g2 / q
    return g2


def keyness(
    target: pd.Series,
    reference: pd.Series,
    measure: str = "chi2",
    correction: str = "default",
) -> pd.DataFrame:
    """Compute a signed keyness statistic per term.

    Args:
        target: Term counts for the target group.
        reference: Term counts for the reference group.
        measure: "chi2" or "lr".
        correction: "default" (Yates for chi2, Williams for lr), "yates"
            (chi2 only), "williams" (lr only) or "none".

    Returns:
        pd.DataFrame: feature, statistic, p, n_target, n_reference sorted by
            statistic descending then feature ascending. Terms absent from
            both groups are excluded.
    """
    if measure not in MEASURES:
        raise ValueError(f"measure must be one of {MEASURES}, got '{measure}'")
    if correction not in CORRECTIONS:
        raise ValueError(f"correction must be one of {CORRECTIONS}, got '{correction}'")

    vocabulary = target.index.union(reference.index)
    target = target.reindex(vocabulary, fill_value=0).astype(float)
    reference = reference.reindex(vocabulary, fill_value=0).astype(float)

    present = (target + reference) > 0
    target, reference = target[present], reference[present]
    if target.empty:
        logger.warning("No terms shared by the keyness input; returning an empty table")
        return pd.DataFrame(columns=KEYNESS_COLUMNS)

    a = target.to_numpy()
    b = reference.to_numpy()
    c = target.sum() - a
    d = reference.sum() - b

    if measure == "chi2":
        yates = correction in ("default", "yates")
        statistic = _chi2(a, b, c, d, yates=yates)
    else:
        statistic = _g2(a, b, c, d, williams=correction in ("default", "williams"))

    expected_a = _expected(a, b, c, d)[0]
    sign = np.where(a > expected_a, 1.0, -1.0)
    p = chi2_dist.sf(statistic, df=1)

    table = pd.DataFrame({
        "feature": target.index.astype(str),
        "statistic": sign * statistic,
        "p": p,
        "n_target": a.astype(int),
        "n_reference": b.astype(int),
    })
    table = table.sort_values(["statistic", "feature"], ascending=[False, True], kind="mergesort")
    return table.reset_index(drop=True)[KEYNESS_COLUMNS]


def top_terms(table: pd.DataFrame, n: int = 20) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Split a keyness table into the top ``n`` target and reference terms.

    Args:
        table: Output of ``keyness``.
        n: Terms per side.

    Returns:
        tuple[pd.DataFrame, pd.DataFrame]: Target terms (most positive first)
            and reference terms (most negative first).
    """
    positive = table[table["statistic"] > 0].head(n)
    negative = (
        table[table["statistic"] < 0]
        .sort_values(["statistic", "feature"], ascending=[True, True], kind="mergesort")
        .head(n)
    )
    return positive.reset_index(drop=True), negative.reset_index(drop=True)


def plot_keyness(
    table: pd.DataFrame,
    n: int = 20,
    target_label: str = "target",
    reference_label: str = "reference",
    title: Optional[str] = None,
) -> go.Figure:
    """Plot the most distinctive terms of each cohort as horizontal bars.

    Args:
        table: Output of ``keyness``.
        n: Terms per cohort.
        target_label: Legend label for target terms.
        reference_label: Legend label for reference terms.
        title: Optional figure title.

    Returns:
        go.Figure: Plotly bar chart.
    """
    positive, negative = top_terms(table, n=n)

    fig = go.Figure()
    # Reversed so that the strongest term sits at the top of each block
    fig.add_trace(go.Bar(
        x=negative["statistic"][::-1],
        y=negative["feature"][::-1],
        orientation="h",
        name=reference_label,
        marker_color="#bb5a38",
    ))
    fig.add_trace(go.Bar(
        x=positive["statistic"][::-1],
        y=positive["feature"][::-1],
        orientation="h",
        name=target_label,
        marker_color="#059669",
    ))
    term_order = list(negative["feature"][::-1]) + list(positive["feature"][::-1])
    fig.update_layout(
        title=title or f"Keyness: {target_label} vs {reference_label}",
        xaxis_title="Keyness statistic",
        yaxis={"categoryorder": "array", "categoryarray": term_order},
        barmode="overlay",
        height=max(400, 22 * (len(positive) + len(negative)) + 120),
        template="plotly_white",
    )
    return fig
