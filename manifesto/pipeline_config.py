"""Pipeline configuration with all arguments organized by stage."""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from config import HOUSING_DICTIONARY_PATH, LEXICON_PATH, MANIFESTO_CORPUS_PATH, OUTPUT_DIR
from manifesto.constants import GOVERNMENT_PARTIES, REFERENCE_COHORT, SENTIMENT_SMOOTHING, TARGET_COHORT
from manifesto.dictionaries import SENTIMENT_EXCLUDED_TERMS
from manifesto.logger import get_logger

logger = get_logger("pipeline_config")


@dataclass
class CorpusConfig:
    """Configuration for corpus loading stage."""
    path: Path = MANIFESTO_CORPUS_PATH
    party_column: str = "party"
    date_column: str = "date"
    text_column: str = "text"
    id_column: Optional[str] = None  # Generated as text1, text2, ... when None
    date_format: Optional[str] = None  # e.g. "%Y%m" for Manifesto Project dates
    year: Optional[int] = 2020
    date_from: Optional[str] = None
    date_to: Optional[str] = None


@dataclass
class DictionaryConfig:
    """Configuration for dictionary matching stage."""
    dictionary_path: Optional[Path] = HOUSING_DICTIONARY_PATH  # None uses HOUSING_DICTIONARY
    topic_category: str = "housing"
    nested_scope: str = "key"
    remove_numbers: bool = True


@dataclass
class SentimentConfig:
    """Configuration for sentiment scoring stage."""
    lexicon_path: Path = LEXICON_PATH
    excluded_terms: list[str] = field(default_factory=lambda: list(SENTIMENT_EXCLUDED_TERMS))
    smoothing: float = SENTIMENT_SMOOTHING


@dataclass
class RegressionConfig:
    """Configuration for sentiment regression stage."""
    outcome: str = "sentiment"
    topic: str = "housing"
    group: str = "party"
    min_per_level: int = 2  # Fixed effects need at least two sentences per party


@dataclass
class KeynessConfig:
    """Configuration for cohort keyness stage."""
    target_parties: list[str] = field(default_factory=lambda: list(GOVERNMENT_PARTIES))
    target_label: str = TARGET_COHORT
    reference_label: str = REFERENCE_COHORT
    measure: str = "chi2"  # "chi2" or "lr"
    correction: str = "default"
    remove_stopwords: bool = True
    min_count: int = 1
    n_top: int = 20
    output_dir: Path = OUTPUT_DIR


@dataclass
class PipelineConfig:
    """Main pipeline configuration containing all stage configs."""

    corpus: CorpusConfig = field(default_factory=CorpusConfig)
    dictionary: DictionaryConfig = field(default_factory=DictionaryConfig)
    sentiment: SentimentConfig = field(default_factory=SentimentConfig)
    regression: RegressionConfig = field(default_factory=RegressionConfig)
    keyness: KeynessConfig = field(default_factory=KeynessConfig)

    def __post_init__(self) -> None:
        """Parse command-line overrides after initialization."""
        corpus_path = _argv_value('--corpus')
        if corpus_path:
            self.corpus.path = Path(corpus_path)

        lexicon_path = _argv_value('--lexicon')
        if lexicon_path:
            self.sentiment.lexicon_path = Path(lexicon_path)

        year = _argv_value('--year')
        if year:
            try:
                self.corpus.year = int(year)
            except ValueError:
                logger.warning(f"Ignoring --year '{year}': not an integer, keeping {self.corpus.year}")

    def to_dict(self) -> dict:
        """Convert config to a nested dictionary for logging.

        Returns:
            dict: Configuration as nested dictionary.
        """
        return {
            'corpus': {
                'path': str(self.corpus.path),
                'party_column': self.corpus.party_column,
                'date_column': self.corpus.date_column,
                'text_column': self.corpus.text_column,
                'id_column': self.corpus.id_column,
                'year': self.corpus.year,
                'date_from': self.corpus.date_from,
                'date_to': self.corpus.date_to,
            },
            'dictionary': {
                'dictionary_path': str(self.dictionary.dictionary_path) if self.dictionary.dictionary_path else None,
                'topic_category': self.dictionary.topic_category,
                'nested_scope': self.dictionary.nested_scope,
            },
            'sentiment': {
                'lexicon_path': str(self.sentiment.lexicon_path),
                'excluded_terms': len(self.sentiment.excluded_terms),
                'smoothing': self.sentiment.smoothing,
            },
            'regression': {
                'outcome': self.regression.outcome,
                'topic': self.regression.topic,
                'group': self.regression.group,
                'min_per_level': self.regression.min_per_level,
            },
            'keyness': {
                'target_parties': list(self.keyness.target_parties),
                'measure': self.keyness.measure,
                'correction': self.keyness.correction,
                'n_top': self.keyness.n_top,
            },
        }


def _argv_value(flag: str) -> Optional[str]:
    """Return the value following ``flag`` in sys.argv, if any."""
    if flag not in sys.argv:
        return None
    idx = sys.argv.index(flag)
    if idx + 1 < len(sys.argv):
        return sys.argv[idx + 1]
    return None
