"""Lexicon-based sentence sentiment stage.

Sentences are scored with the Lexicoder Sentiment Dictionary (LSD2015), whose
four categories separate plain and negated polarity terms. The score is a
smoothed log ratio of positive to negative evidence:

    sentiment = log((positive + neg_negative + s) / (negative + neg_positive + s))

With s = 0.5 a sentence without lexicon matches scores exactly 0.
"""

import json
import re
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from manifesto.constants import (
    LSD_CATEGORIES,
    LSD_NEG_NEGATIVE,
    LSD_NEG_POSITIVE,
    LSD_NEGATIVE,
    LSD_POSITIVE,
    SENTIMENT_SMOOTHING,
)
from manifesto.logger import get_logger
from manifesto.stages.dictionary import DictionaryMatcher, Tokenizer, build_tokenizer, validate_dictionary

logger = get_logger("stages.sentiment")

# WordStat/Lexicoder entries may carry a weight suffix such as "ABANDON* (1)"
CAT_WEIGHT_RE = re.compile(r"\s*\(\d+\)\s*$")


def _parse_cat_file(path: Path) -> dict[str, list[str]]:
    """Parse a Lexicoder/WordStat ``.cat`` dictionary.

    Category names start at column 0; their terms follow on indented lines.
    """
    lexicon: dict[str, list[str]] = {}
    current: Optional[str] = None
    with open(path, encoding="utf-8-sig") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            if not line[0].isspace():
                current = line.strip().lower()
                lexicon.setdefault(current, [])
                continue
            if current is None:
                raise ValueError(f"{path.name}:{line_no}: term found before any category")
            term = CAT_WEIGHT_RE.sub("", line.strip())
            if term:
                lexicon[current].append(term)
    return lexicon


def load_lexicon(path: Path) -> dict[str, list[str]]:
    """Load the sentiment lexicon from JSON or Lexicoder ``.cat``/``.lc3`` format.

    Args:
        path: Lexicon file path.

    Returns:
        dict[str, list[str]]: Lowercased terms for the four LSD2015 categories.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a required category is missing or empty.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Sentiment lexicon not found: {path}")

    if path.suffix.lower() in (".cat", ".lc3"):
        raw = _parse_cat_file(path)
    else:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        raw = {str(k).lower(): v for k, v in raw.items()}

    missing = [category for category in LSD_CATEGORIES if category not in raw]
    if missing:
        raise ValueError(f"Sentiment lexicon {path.name} is missing categories: {', '.join(missing)}")

    lexicon = validate_dictionary(
        {category: [str(term).lower() for term in raw[category]] for category in LSD_CATEGORIES},
        source=f"sentiment lexicon {path.name}",
    )
    sizes = ", ".join(f"{category}={len(terms)}" for category, terms in lexicon.items())
    logger.info(f"Loaded sentiment lexicon from {path.name} ({sizes})")
    return lexicon


def clean_lexicon(lexicon: dict[str, list[str]], exclude_terms: Iterable[str]) -> dict[str, list[str]]:
    """Drop non-sentiment entries from every lexicon category.

    An entry is dropped if it equals an excluded term or matches it as a glob
    (so excluding 'support*' also drops 'supportive').

    Args:
        lexicon: Category -> terms mapping; left unchanged.
        exclude_terms: Terms or glob patterns to remove.

    Returns:
        dict[str, list[str]]: New lexicon without the excluded entries.
    """
    patterns = [term.strip().lower() for term in exclude_terms if term and term.strip()]

    def excluded(term: str) -> bool:
        return any(term == pattern or fnmatchcase(term, pattern) for pattern in patterns)

    cleaned = {category: [term for term in terms if not excluded(term)] for category, terms in lexicon.items()}

    removed = sum(len(terms) for terms in lexicon.values()) - sum(len(terms) for terms in cleaned.values())
    logger.info(f"Removed {removed} non-sentiment entries from lexicon ({len(patterns)} exclusion patterns)")
    return cleaned


def sentiment_score(positive, negative, neg_positive, neg_negative, smoothing: float = SENTIMENT_SMOOTHING):
    """Compute the smoothed log-ratio sentiment score.

    Works element-wise on scalars, numpy arrays and pandas Series.

    Args:
        positive: Count of positive matches.
        negative: Count of negative matches.
        neg_positive: Count of negated positive matches.
        neg_negative: Count of negated negative matches.
        smoothing: Additive constant in numerator and denominator.

    Returns:
        Score(s) with the same shape as the inputs.
    """
    if smoothing <= 0:
        raise ValueError("smoothing must be positive")
    return np.log((positive + neg_negative + smoothing) / (negative + neg_positive + smoothing))


def score_sentences(
    corpus: pd.DataFrame,
    lexicon: dict[str, list[str]],
    tokenizer: Optional[Tokenizer] = None,
    smoothing: float = SENTIMENT_SMOOTHING,
) -> pd.DataFrame:
    """Match the lexicon against every sentence and compute sentiment.

    Negated phrases consume their tokens, so "not good" counts as
    neg_positive only and not also as positive.

    Args:
        corpus: Corpus with doc_id and text columns.
        lexicon: LSD2015-style lexicon.
        tokenizer: Tokenizer shared with the dictionary stage.
        smoothing: Additive smoothing constant.

    Returns:
        pd.DataFrame: Indexed by doc_id with the four category counts,
            n_tokens and sentiment.
    """
    matcher = DictionaryMatcher(lexicon, nested_scope="dictionary")
    df_scores = matcher.lookup(corpus["text"], corpus["doc_id"], tokenizer or build_tokenizer())

    df_scores["sentiment"] = sentiment_score(
        df_scores[LSD_POSITIVE],
        df_scores[LSD_NEGATIVE],
        df_scores[LSD_NEG_POSITIVE],
        df_scores[LSD_NEG_NEGATIVE],
        smoothing=smoothing,
    ).astype(float)

    if not df_scores.empty:
        neutral = int((df_scores["sentiment"] == 0).sum())
        logger.info(
            f"Scored {len(df_scores)} sentences (mean={df_scores['sentiment'].mean():.3f}, "
            f"neutral={neutral})"
        )
    return df_scores
