"""Run the housing manifesto analysis: corpus, dictionaries, sentiment, regression, keyness."""

import sys
from dataclasses import dataclass
from typing import Optional

import pandas as pd
import plotly.graph_objects as go

from config import LOG_LEVEL
from manifesto.dictionaries import HOUSING_DICTIONARY
from manifesto.logger import setup_logger
from manifesto.pipeline_config import PipelineConfig
from manifesto.stages.aggregation import add_topic_indicator, aggregate_by_party, housing_totals, join_features
from manifesto.stages.corpus import filter_time_slice, load_corpus, summarize_corpus
from manifesto.stages.dictionary import DictionaryMatcher, build_tokenizer, load_dictionary
from manifesto.stages.keyness import assign_cohorts, cohort_frequencies, keyness, plot_keyness, top_terms
from manifesto.stages.regression import RegressionResult, fit_sentiment_model
from manifesto.stages.sentiment import clean_lexicon, load_lexicon, score_sentences
from manifesto.utils import log_banner, log_table, write_figure

logger = setup_logger("run_analysis", LOG_LEVEL)


@dataclass
class AnalysisResults:
    """Everything derived in one run; nothing is persisted beyond the figure."""

    corpus: pd.DataFrame
    sentences: pd.DataFrame
    party_summary: pd.DataFrame
    housing_totals: dict[str, int]
    regression: Optional[RegressionResult]
    keyness: pd.DataFrame
    keyness_figure: go.Figure


def run_pipeline(config: PipelineConfig, corpus: Optional[pd.DataFrame] = None) -> AnalysisResults:
    """Execute every analysis stage in order.

    Args:
        config: Pipeline configuration.
        corpus: Already-loaded corpus; read from ``config.corpus.path`` when None.

    Returns:
        AnalysisResults: Derived tables, regression and keyness figure.
    """
    # ========================================================================
    # CORPUS
    # ========================================================================
    log_banner(logger, "CORPUS")
    if corpus is None:
        corpus = load_corpus(
            config.corpus.path,
            party_column=config.corpus.party_column,
            date_column=config.corpus.date_column,
            text_column=config.corpus.text_column,
            id_column=config.corpus.id_column,
            date_format=config.corpus.date_format,
        )
    corpus = filter_time_slice(
        corpus,
        year=config.corpus.year,
        date_from=config.corpus.date_from,
        date_to=config.corpus.date_to,
    )
    if corpus.empty:
        raise ValueError("Corpus is empty after applying the time slice")
    log_table(logger, "Sentences per party", summarize_corpus(corpus))

    # ========================================================================
    # DICTIONARY
    # ========================================================================
    log_banner(logger, "DICTIONARY")
    tokenizer = build_tokenizer(remove_numbers=config.dictionary.remove_numbers)
    if config.dictionary.dictionary_path:
        dictionary = load_dictionary(config.dictionary.dictionary_path)
    else:
        dictionary = HOUSING_DICTIONARY
    topic = config.dictionary.topic_category
    if topic not in dictionary:
        raise ValueError(f"Topic category '{topic}' not in dictionary ({', '.join(dictionary)})")

    matcher = DictionaryMatcher(dictionary, nested_scope=config.dictionary.nested_scope)
    df_topics = matcher.lookup(corpus["text"], corpus["doc_id"], tokenizer)

    # ========================================================================
    # SENTIMENT
    # ========================================================================
    log_banner(logger, "SENTIMENT")
    lexicon = load_lexicon(config.sentiment.lexicon_path)
    lexicon = clean_lexicon(lexicon, config.sentiment.excluded_terms)
    df_sentiment = score_sentences(corpus, lexicon, tokenizer, smoothing=config.sentiment.smoothing)

    # ========================================================================
    # AGGREGATION
    # ========================================================================
    log_banner(logger, "AGGREGATION")
    sentences = join_features(corpus, df_topics, df_sentiment)
    sentences = add_topic_indicator(sentences, category=topic, column=config.regression.topic)
    party_summary = aggregate_by_party(sentences, indicator=config.regression.topic)
    totals = housing_totals(sentences, indicator=config.regression.topic)
    log_table(logger, f"{topic.capitalize()} mentions and sentiment by party", party_summary)

    # ========================================================================
    # REGRESSION
    # ========================================================================
    log_banner(logger, "REGRESSION")
    regression: Optional[RegressionResult] = None
    try:
        regression = fit_sentiment_model(
            sentences,
            outcome=config.regression.outcome,
            topic=config.regression.topic,
            group=config.regression.group,
            min_per_level=config.regression.min_per_level,
        )
    except ValueError as e:
        logger.error(f"Sentiment model could not be fitted: {e}")
    if regression is not None:
        log_table(logger, f"OLS {regression.formula}", regression.summary_table())
        logger.info(
            f"n={regression.n_obs}, R²={regression.r_squared:.4f}, "
            f"adjusted R²={regression.adj_r_squared:.4f}"
        )

    # ========================================================================
    # KEYNESS
    # ========================================================================
    log_banner(logger, "KEYNESS")
    kc = config.keyness
    df_cohorts = assign_cohorts(
        corpus,
        kc.target_parties,
        target_label=kc.target_label,
        reference_label=kc.reference_label,
    )
    target, reference = cohort_frequencies(
        df_cohorts,
        tokenizer,
        target_label=kc.target_label,
        remove_stopwords=kc.remove_stopwords,
        min_count=kc.min_count,
    )
    df_keyness = keyness(target, reference, measure=kc.measure, correction=kc.correction)
    target_terms, reference_terms = top_terms(df_keyness, n=kc.n_top)
    log_table(logger, f"Top {kc.target_label} terms ({kc.measure})", target_terms)
    log_table(logger, f"Top {kc.reference_label} terms ({kc.measure})", reference_terms)
    figure = plot_keyness(df_keyness, n=kc.n_top, target_label=kc.target_label, reference_label=kc.reference_label)

    return AnalysisResults(
        corpus=corpus,
        sentences=sentences,
        party_summary=party_summary,
        housing_totals=totals,
        regression=regression,
        keyness=df_keyness,
        keyness_figure=figure,
    )


def main():
    """Execute the full analysis.

    Returns:
        int: Exit code (0 for success, 1 for failure).
    """
    config = PipelineConfig()

    logger.info("=" * 60)
    logger.info(f"Housing manifesto analysis - corpus: {config.corpus.path}")
    logger.info("=" * 60)
    logger.debug(f"Configuration: {config.to_dict()}")

    try:
        results = run_pipeline(config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Analysis aborted: {e}")
        return 1

    figure_path = write_figure(results.keyness_figure, config.keyness.output_dir, "keyness")

    logger.info("=" * 60)
    logger.info("Analysis complete!")
    logger.info(f"Sentences: {len(results.sentences)}, parties: {len(results.party_summary)}")
    logger.info(f"Housing sentences by party: {results.housing_totals}")
    logger.info(f"Keyness plot: {figure_path}")
    logger.info("=" * 60)

    return 0


if __name__ == '__main__':
    sys.exit(main())
