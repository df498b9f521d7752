"""Aggregation stage: join features to metadata and summarize by party."""

import pandas as pd

from manifesto.logger import get_logger

logger = get_logger("stages.aggregation")


def join_features(corpus: pd.DataFrame, *feature_tables: pd.DataFrame) -> pd.DataFrame:
    """Left-join per-document feature tables onto the corpus metadata.

    Args:
        corpus: Corpus with a doc_id column.
        *feature_tables: Tables indexed by doc_id. Count columns missing for a
            document become 0. A column already joined (such as n_tokens) is
            not duplicated.

    Returns:
        pd.DataFrame: Corpus rows with feature columns appended.
    """
    df = corpus.copy()
    for features in feature_tables:
        new_columns = [col for col in features.columns if col not in df.columns]
        df = df.merge(features[new_columns], how="left", left_on="doc_id", right_index=True)
        for col in new_columns:
            if pd.api.types.is_integer_dtype(features[col]):
                df[col] = df[col].fillna(0).astype(int)

    return df


def add_topic_indicator(df: pd.DataFrame, category: str = "housing", column: str = "housing") -> pd.DataFrame:
    """Add a boolean column flagging sentences with at least one category match.

    Args:
        df: Joined corpus with a count column for ``category``.
        category: Dictionary category count column.
        column: Name of the boolean indicator column.

    Returns:
        pd.DataFrame: Copy with the indicator column. When ``column`` equals
            ``category`` the count is kept as ``<category>_count``.
    """
    if category not in df.columns:
        raise ValueError(f"No '{category}' count column to derive a topic indicator from")

    df_out = df.copy()
    counts = df_out[category]
    if column == category:
        df_out[f"{category}_count"] = counts
    df_out[column] = counts > 0
    return df_out


def aggregate_by_party(df: pd.DataFrame, indicator: str = "housing", sentiment: str = "sentiment") -> pd.DataFrame:
    """Summarize topic mentions and sentiment per party.

    Args:
        df: Joined corpus with party, the boolean indicator and sentiment columns.
        indicator: Boolean topic column.
        sentiment: Sentiment score column.

    Returns:
        pd.DataFrame: One row per party (sorted) with n_sentences,
            <indicator>_sentences, <indicator>_share, mean_sentiment,
            <indicator>_mean_sentiment and other_mean_sentiment.
    """
    columns = [
        "party",
        "n_sentences",
        f"{indicator}_sentences",
        f"{indicator}_share",
        "mean_sentiment",
        f"{indicator}_mean_sentiment",
        "other_mean_sentiment",
    ]
    if df.empty:
        return pd.DataFrame(columns=columns)

    flag = df[indicator].astype(bool)
    df_work = df.assign(
        _flag=flag.astype(int),
        _topic_sentiment=df[sentiment].where(flag),
        _other_sentiment=df[sentiment].where(~flag),
    )

    df_party = (
        df_work.groupby("party")
        .agg(
            n_sentences=("doc_id", "size"),
            topic_sentences=("_flag", "sum"),
            mean_sentiment=(sentiment, "mean"),
            topic_mean_sentiment=("_topic_sentiment", "mean"),
            other_mean_sentiment=("_other_sentiment", "mean"),
        )
        .reset_index()
        .sort_values("party")
        .reset_index(drop=True)
    )
    df_party["topic_share"] = df_party["topic_sentences"] / df_party["n_sentences"]
    df_party = df_party.rename(columns={
        "topic_sentences": f"{indicator}_sentences",
        "topic_share": f"{indicator}_share",
        "topic_mean_sentiment": f"{indicator}_mean_sentiment",
    })

    logger.info(
        f"Aggregated {len(df)} sentences across {len(df_party)} parties "
        f"({int(flag.sum())} flagged as {indicator})"
    )
    return df_party[columns]


def housing_totals(df: pd.DataFrame, indicator: str = "housing") -> dict[str, int]:
    """Count topic-flagged sentences per party.

    Args:
        df: Joined corpus with party and boolean indicator columns.
        indicator: Boolean topic column.

    Returns:
        dict[str, int]: Party -> number of flagged sentences.
    """
    totals = df.groupby("party")[indicator].sum()
    return {str(party): int(total) for party, total in totals.items()}
