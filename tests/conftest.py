"""Pytest configuration and shared fixtures for manifesto analysis tests.

This module provides a small two-party corpus, a miniature LSD2015-style
lexicon and helpers that write them to temporary files.
"""

import json

import pandas as pd
import pytest


@pytest.fixture
def sample_records():
    """Sentence records: Alpha has 3 sentences (1 on housing), Beta has 5 (2 on housing)."""
    return [
        {"party": "Alpha", "date": "2020-02-01", "text": "We will build good homes for every family."},
        {"party": "Alpha", "date": "2020-02-01", "text": "Our economy is strong."},
        {"party": "Alpha", "date": "2020-02-01", "text": "Public transport will improve."},
        {"party": "Beta", "date": "2020-01-20", "text": "The housing crisis is bad."},
        {"party": "Beta", "date": "2020-01-20", "text": "Rents are not good enough."},
        {"party": "Beta", "date": "2020-01-20", "text": "Schools will get better."},
        {"party": "Beta", "date": "2020-01-20", "text": "Health care is failing."},
        {"party": "Beta", "date": "2020-01-20", "text": "We will not fail farmers."},
    ]


@pytest.fixture
def sample_corpus(sample_records):
    """Sample corpus DataFrame in canonical form."""
    df = pd.DataFrame(sample_records)
    df.insert(0, "doc_id", [f"text{i}" for i in range(1, len(df) + 1)])
    df["date"] = pd.to_datetime(df["date"])
    return df


@pytest.fixture
def sample_lexicon():
    """Miniature lexicon with the four LSD2015 categories."""
    return {
        "negative": ["bad", "crisis*", "fail*", "worse"],
        "positive": ["good", "improv*", "better", "strong"],
        "neg_positive": ["not good", "not better", "no improv*"],
        "neg_negative": ["not bad", "not fail*"],
    }


@pytest.fixture
def corpus_csv(tmp_path, sample_records):
    """Corpus written to CSV with source column names and one 2016 sentence."""
    rows = [
        {"partyname": r["party"], "election_date": r["date"], "sentence": r["text"]}
        for r in sample_records
    ]
    rows.append({"partyname": "Alpha", "election_date": "2016-02-01", "sentence": "Housing was a priority."})
    path = tmp_path / "manifestos.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


@pytest.fixture
def lexicon_json(tmp_path, sample_lexicon):
    """Sample lexicon written to JSON."""
    path = tmp_path / "lexicon.json"
    path.write_text(json.dumps(sample_lexicon), encoding="utf-8")
    return path


@pytest.fixture
def lexicon_cat(tmp_path):
    """Sample lexicon in Lexicoder/WordStat .cat format."""
    path = tmp_path / "lexicon.cat"
    path.write_text(
        "NEGATIVE\n"
        "\tBAD (1)\n"
        "\tCRISIS* (1)\n"
        "POSITIVE\n"
        "\tGOOD (1)\n"
        "\tIMPROV* (1)\n"
        "NEG_POSITIVE\n"
        "\tNOT GOOD (1)\n"
        "\n"
        "NEG_NEGATIVE\n"
        "\tNOT BAD (1)\n",
        encoding="utf-8",
    )
    return path
