"""End-to-end tests for the analysis job."""

from unittest.mock import patch

import pytest

from manifesto.jobs.run_analysis import main, run_pipeline
from manifesto.pipeline_config import PipelineConfig


@pytest.fixture
def config(tmp_path, corpus_csv, lexicon_json):
    """Pipeline configuration pointing at the temporary sample files."""
    cfg = PipelineConfig()
    cfg.corpus.path = corpus_csv
    cfg.corpus.party_column = "partyname"
    cfg.corpus.date_column = "election_date"
    cfg.corpus.text_column = "sentence"
    cfg.corpus.year = 2020
    cfg.dictionary.dictionary_path = None
    cfg.sentiment.lexicon_path = lexicon_json
    cfg.sentiment.excluded_terms = []
    cfg.keyness.target_parties = ["Alpha"]
    cfg.keyness.output_dir = tmp_path / "output"
    return cfg


class TestRunPipeline:
    """Test the full pipeline on the sample corpus."""

    def test_housing_totals(self, config):
        """Test two parties with 3 and 5 sentences report exact housing totals."""
        results = run_pipeline(config)
        assert results.housing_totals == {"Alpha": 1, "Beta": 2}
        assert len(results.sentences) == 8

    def test_regression_and_keyness(self, config):
        """Test the regression is fitted and keyness ranks terms."""
        results = run_pipeline(config)
        assert results.regression is not None
        assert 0.0 <= results.regression.r_squared <= 1.0
        assert len(results.regression.coefficients) == 3
        assert not results.keyness.empty
        assert len(results.keyness_figure.data) == 2

    def test_empty_slice_fails(self, config):
        """Test a time slice without sentences aborts the run."""
        config.corpus.year = 1990
        with pytest.raises(ValueError, match="empty"):
            run_pipeline(config)

    def test_unknown_topic_category(self, config, tmp_path):
        """Test a dictionary without the topic category is rejected."""
        path = tmp_path / "dict.json"
        path.write_text('{"transport": ["bus*"]}', encoding="utf-8")
        config.dictionary.dictionary_path = path
        with pytest.raises(ValueError, match="housing"):
            run_pipeline(config)


class TestMain:
    """Test the job entry point."""

    def test_main_success(self, config):
        """Test a successful run writes the keyness plot and exits 0."""
        with patch("manifesto.jobs.run_analysis.PipelineConfig", return_value=config):
            assert main() == 0
        assert (config.keyness.output_dir / "keyness.html").exists()

    def test_main_missing_corpus(self, config, tmp_path):
        """Test a missing corpus exits 1."""
        config.corpus.path = tmp_path / "missing.csv"
        with patch("manifesto.jobs.run_analysis.PipelineConfig", return_value=config):
            assert main() == 1
