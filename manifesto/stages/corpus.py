"""Corpus loading stage for sentence-level manifesto records."""

from pathlib import Path
from typing import Optional

import pandas as pd

from manifesto.logger import get_logger

logger = get_logger("stages.corpus")

CORPUS_COLUMNS = ["doc_id", "party", "date", "text"]


def load_corpus(
    path: Path,
    party_column: str = "party",
    date_column: str = "date",
    text_column: str = "text",
    id_column: Optional[str] = None,
    date_format: Optional[str] = None,
) -> pd.DataFrame:
    """Load sentence-level manifesto records from a CSV file.

    Source columns are renamed to the canonical ``party``, ``date``, ``text``
    and ``doc_id`` columns. Extra columns are kept as document variables.

    Args:
        path: Path to the CSV file, one row per sentence.
        party_column: Name of the party column in the file.
        date_column: Name of the date column in the file.
        text_column: Name of the sentence text column in the file.
        id_column: Optional document id column; ids are generated when None.
        date_format: Optional strftime format for parsing dates. Integer
            dates such as 202002 are read as YYYYMM (or YYYYMMDD) without one.

    Returns:
        pd.DataFrame: Corpus with doc_id, party, date, text columns first.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If required columns are missing, a party or date is empty,
            or dates cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Corpus file not found: {path}")

    df_raw = pd.read_csv(path)
    logger.info(f"Read {len(df_raw)} rows from {path.name}")

    return prepare_corpus(
        df_raw,
        party_column=party_column,
        date_column=date_column,
        text_column=text_column,
        id_column=id_column,
        date_format=date_format,
    )


def prepare_corpus(
    df_raw: pd.DataFrame,
    party_column: str = "party",
    date_column: str = "date",
    text_column: str = "text",
    id_column: Optional[str] = None,
    date_format: Optional[str] = None,
) -> pd.DataFrame:
    """Validate and normalize an in-memory table of sentence records.

    Args:
        df_raw: Raw records as read from file.
        party_column: Name of the party column.
        date_column: Name of the date column.
        text_column: Name of the text column.
        id_column: Optional document id column.
        date_format: Optional strftime format for parsing dates. Integer
            dates such as 202002 are read as YYYYMM (or YYYYMMDD) without one.

    Returns:
        pd.DataFrame: Normalized corpus.

    Raises:
        ValueError: If required columns are missing, ids are duplicated, a
            party or date is empty, or dates cannot be parsed.
    """
    required = [party_column, date_column, text_column]
    if id_column:
        required.append(id_column)
    missing = [col for col in required if col not in df_raw.columns]
    if missing:
        raise ValueError(
            f"Corpus is missing required columns: {', '.join(missing)}. "
            f"Available columns: {', '.join(map(str, df_raw.columns))}"
        )

    rename = {party_column: "party", date_column: "date", text_column: "text"}
    if id_column:
        rename[id_column] = "doc_id"
    df = df_raw.rename(columns=rename).copy()

    if not id_column:
        df["doc_id"] = [f"text{i}" for i in range(1, len(df) + 1)]
    df["doc_id"] = df["doc_id"].astype(str)
    if df["doc_id"].duplicated().any():
        duplicates = df.loc[df["doc_id"].duplicated(), "doc_id"].unique()[:5]
        raise ValueError(f"Duplicate document ids in corpus: {', '.join(duplicates)}")

    missing_party = df["party"].isna() | (df["party"].astype(str).str.strip() == "")
    if missing_party.any():
        raise ValueError(
            f"Column '{party_column}' is empty for {int(missing_party.sum())} rows "
            f"(e.g. {', '.join(df.loc[missing_party, 'doc_id'].head(5))})"
        )

    date_format = date_format or _numeric_date_format(df["date"], date_column)
    try:
        if date_format:
            values = df["date"]
            if pd.api.types.is_numeric_dtype(values):
                values = values.astype("Int64").astype("string")
            df["date"] = pd.to_datetime(values.astype("string"), format=date_format)
        else:
            df["date"] = pd.to_datetime(df["date"])
    except (ValueError, TypeError) as e:
        raise ValueError(f"Could not parse corpus dates in column '{date_column}': {e}") from e

    missing_date = df["date"].isna()
    if missing_date.any():
        raise ValueError(
            f"Column '{date_column}' is empty for {int(missing_date.sum())} rows "
            f"(e.g. {', '.join(df.loc[missing_date, 'doc_id'].head(5))})"
        )

    df["party"] = df["party"].astype(str).str.strip()
    df["text"] = df["text"].fillna("").astype(str)

    empty_mask = df["text"].str.strip() == ""
    if empty_mask.any():
        logger.warning(f"Dropping {int(empty_mask.sum())} sentences with empty text")
        df = df[~empty_mask]

    other_columns = [col for col in df.columns if col not in CORPUS_COLUMNS]
    return df[CORPUS_COLUMNS + other_columns].reset_index(drop=True)


def _numeric_date_format(values: pd.Series, column: str) -> Optional[str]:
    """Return the strftime format of Manifesto Project style integer dates."""
    if pd.api.types.is_bool_dtype(values) or not pd.api.types.is_numeric_dtype(values):
        return None
    present = values.dropna()
    if present.empty:
        return None
    if (present % 1 != 0).any():
        raise ValueError(f"Column '{column}' holds non-integer numeric dates")
    widths = set(present.astype("int64").astype(str).str.len())
    if widths == {6}:
        return "%Y%m"
    if widths == {8}:
        return "%Y%m%d"
    raise ValueError(
        f"Column '{column}' holds numeric dates that are neither YYYYMM nor YYYYMMDD; "
        f"set date_format explicitly"
    )


def filter_time_slice(
    df: pd.DataFrame,
    year: Optional[int] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> pd.DataFrame:
    """Keep sentences within a single time slice (bounds inclusive).

    Args:
        df: Corpus with a datetime ``date`` column.
        year: Keep only sentences dated in this year.
        date_from: Earliest date to keep.
        date_to: Latest date to keep.

    Returns:
        pd.DataFrame: Filtered corpus.
    """
    mask = pd.Series(True, index=df.index)
    if year is not None:
        mask &= df["date"].dt.year == int(year)
    if date_from is not None:
        mask &= df["date"] >= pd.Timestamp(date_from)
    if date_to is not None:
        mask &= df["date"] <= pd.Timestamp(date_to)

    df_slice = df[mask].reset_index(drop=True)
    if df_slice.empty:
        logger.warning(f"No sentences in time slice (year={year}, from={date_from}, to={date_to})")
    else:
        logger.info(f"Kept {len(df_slice)}/{len(df)} sentences in time slice")
    return df_slice


def summarize_corpus(df: pd.DataFrame) -> pd.DataFrame:
    """Count sentences per party.

    Args:
        df: Corpus DataFrame.

    Returns:
        pd.DataFrame: party, n_sentences, first_date, last_date sorted by party.
    """
    if df.empty:
        return pd.DataFrame(columns=["party", "n_sentences", "first_date", "last_date"])

    return (
        df.groupby("party")
        .agg(n_sentences=("doc_id", "size"), first_date=("date", "min"), last_date=("date", "max"))
        .reset_index()
        .sort_values("party")
        .reset_index(drop=True)
    )
