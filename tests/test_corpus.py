"""Tests for corpus loading stage."""

import pandas as pd
import pytest

from manifesto.stages.corpus import filter_time_slice, load_corpus, prepare_corpus, summarize_corpus


class TestLoadCorpus:
    """Test loading sentence records from CSV."""

    def test_load_renames_columns(self, corpus_csv):
        """Test source columns are mapped to canonical names."""
        df = load_corpus(corpus_csv, party_column="partyname", date_column="election_date", text_column="sentence")
        assert list(df.columns[:4]) == ["doc_id", "party", "date", "text"]
        assert len(df) == 9
        assert pd.api.types.is_datetime64_any_dtype(df["date"])

    def test_generated_doc_ids(self, corpus_csv):
        """Test document ids follow file order."""
        df = load_corpus(corpus_csv, party_column="partyname", date_column="election_date", text_column="sentence")
        assert df["doc_id"].tolist()[:3] == ["text1", "text2", "text3"]
        assert df["doc_id"].is_unique

    def test_missing_columns_fail_fast(self, corpus_csv):
        """Test a missing required column aborts loading."""
        with pytest.raises(ValueError, match="missing required columns: party"):
            load_corpus(corpus_csv, date_column="election_date", text_column="sentence")

    def test_missing_file(self, tmp_path):
        """Test a missing corpus file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_corpus(tmp_path / "nope.csv")


class TestPrepareCorpus:
    """Test in-memory normalization."""

    def test_empty_text_dropped(self):
        """Test rows without text are removed."""
        df_raw = pd.DataFrame({
            "party": ["A", "A", "B"],
            "date": ["2020-01-01"] * 3,
            "text": ["Homes.", "  ", None],
        })
        df = prepare_corpus(df_raw)
        assert df["text"].tolist() == ["Homes."]

    def test_date_format(self):
        """Test Manifesto Project style YYYYMM dates."""
        df_raw = pd.DataFrame({"party": ["A"], "date": [202002], "text": ["Homes."]})
        df = prepare_corpus(df_raw, date_format="%Y%m")
        assert df.loc[0, "date"] == pd.Timestamp("2020-02-01")

    def test_integer_dates_without_format(self):
        """Test integer YYYYMM dates are not read as epoch nanoseconds."""
        df_raw = pd.DataFrame({"party": ["A", "B"], "date": [202002, 201602], "text": ["Homes.", "Rents."]})
        df = prepare_corpus(df_raw)
        assert df["date"].tolist() == [pd.Timestamp("2020-02-01"), pd.Timestamp("2016-02-01")]
        assert len(filter_time_slice(df, year=2020)) == 1

    def test_integer_dates_with_days(self):
        """Test integer YYYYMMDD dates are parsed without a format."""
        df_raw = pd.DataFrame({"party": ["A"], "date": [20200208], "text": ["Homes."]})
        df = prepare_corpus(df_raw)
        assert df.loc[0, "date"] == pd.Timestamp("2020-02-08")

    def test_ambiguous_integer_dates(self):
        """Test integer dates of another width name the column."""
        df_raw = pd.DataFrame({"party": ["A"], "date": [2020], "text": ["Homes."]})
        with pytest.raises(ValueError, match="election_date"):
            prepare_corpus(df_raw.rename(columns={"date": "election_date"}), date_column="election_date")

    def test_missing_date(self):
        """Test an empty date fails instead of being dropped later."""
        df_raw = pd.DataFrame({"party": ["A", "B"], "date": ["2020-01-01", None], "text": ["Homes.", "Rents."]})
        with pytest.raises(ValueError, match="'date' is empty for 1 rows"):
            prepare_corpus(df_raw)

    def test_missing_party(self):
        """Test an empty party fails instead of joining a cohort."""
        df_raw = pd.DataFrame({"party": ["A", None, " "], "date": ["2020-01-01"] * 3, "text": ["a", "b", "c"]})
        with pytest.raises(ValueError, match="'party' is empty for 2 rows"):
            prepare_corpus(df_raw)

    def test_bad_dates(self):
        """Test unparseable dates raise ValueError."""
        df_raw = pd.DataFrame({"party": ["A"], "date": ["not a date"], "text": ["Homes."]})
        with pytest.raises(ValueError, match="dates"):
            prepare_corpus(df_raw)

    def test_duplicate_ids(self):
        """Test duplicate ids in an id column are rejected."""
        df_raw = pd.DataFrame({
            "id": ["x", "x"], "party": ["A", "B"], "date": ["2020-01-01"] * 2, "text": ["a", "b"],
        })
        with pytest.raises(ValueError, match="Duplicate"):
            prepare_corpus(df_raw, id_column="id")


class TestTimeSlice:
    """Test time slice filtering."""

    def test_filter_year(self, corpus_csv):
        """Test only the selected election year is kept."""
        df = load_corpus(corpus_csv, party_column="partyname", date_column="election_date", text_column="sentence")
        df_2020 = filter_time_slice(df, year=2020)
        assert len(df_2020) == 8
        assert (df_2020["date"].dt.year == 2020).all()

    def test_filter_range_inclusive(self, sample_corpus):
        """Test date bounds are inclusive."""
        df = filter_time_slice(sample_corpus, date_from="2020-01-20", date_to="2020-01-20")
        assert set(df["party"]) == {"Beta"}

    def test_no_bounds(self, sample_corpus):
        """Test no bounds keeps everything."""
        assert len(filter_time_slice(sample_corpus)) == len(sample_corpus)

    def test_empty_slice(self, sample_corpus):
        """Test an empty slice returns an empty frame."""
        assert filter_time_slice(sample_corpus, year=1990).empty


class TestSummarizeCorpus:
    """Test corpus summary."""

    def test_counts(self, sample_corpus):
        """Test sentence counts per party."""
        summary = summarize_corpus(sample_corpus)
        assert dict(zip(summary["party"], summary["n_sentences"])) == {"Alpha": 3, "Beta": 5}
