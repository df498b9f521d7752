"""Tests for tokenization and dictionary matching."""

import json

import pytest

from manifesto.dictionaries import HOUSING_DICTIONARY
from manifesto.stages.dictionary import DictionaryMatcher, build_tokenizer, load_dictionary


class TestTokenizer:
    """Test the shared tokenizer."""

    def test_lowercase_and_punctuation(self):
        """Test tokens are lowercased and punctuation removed."""
        tokenize = build_tokenizer()
        assert tokenize("Homes, FOR all!") == ["homes", "for", "all"]

    def test_hyphens_and_apostrophes(self):
        """Test intra-word hyphens and apostrophes are kept."""
        tokenize = build_tokenizer()
        assert tokenize("First-time buyers’ needs") == ["first-time", "buyers", "needs"]

    def test_numbers(self):
        """Test numeric tokens are dropped unless requested."""
        assert build_tokenizer()("Build 50,000 homes by 2025") == ["build", "homes", "by"]
        assert "2025" in build_tokenizer(remove_numbers=False)("Build 50,000 homes by 2025")

    def test_single_letters(self):
        """Test one-character words are tokens."""
        assert build_tokenizer()("a plan") == ["a", "plan"]


class TestDictionaryMatcher:
    """Test dictionary lookup semantics."""

    def test_glob_suffix(self):
        """Test trailing wildcard matches any suffix."""
        matcher = DictionaryMatcher({"housing": ["hous*"]})
        assert matcher.count(["house", "housing", "hose"]) == {"housing": 2}

    def test_single_char_glob(self):
        """Test '?' matches exactly one character."""
        matcher = DictionaryMatcher({"x": ["colo?r"]})
        assert matcher.count(["colour", "color"]) == {"x": 1}

    def test_phrase_longest_match(self):
        """Test a phrase consumes its tokens so nested terms count once."""
        matcher = DictionaryMatcher({"housing": ["social housing", "hous*"]})
        tokens = ["social", "housing", "and", "housing"]
        assert matcher.count(tokens) == {"housing": 2}

    def test_phrase_requires_contiguous_tokens(self):
        """Test phrases do not match across other tokens."""
        matcher = DictionaryMatcher({"housing": ["social housing"]})
        assert matcher.count(["social", "and", "housing"]) == {"housing": 0}

    def test_phrase_at_end_of_sentence(self):
        """Test a phrase longer than the remaining tokens does not match."""
        matcher = DictionaryMatcher({"housing": ["social housing"]})
        assert matcher.count(["more", "social"]) == {"housing": 0}

    def test_case_normalized_terms(self):
        """Test dictionary terms are lowercased."""
        matcher = DictionaryMatcher({"housing": ["Social HOUSING"]})
        assert matcher.count(["social", "housing"]) == {"housing": 1}

    def test_key_scope_counts_each_category(self):
        """Test a token matching several categories counts in each."""
        matcher = DictionaryMatcher({"a": ["rent*"], "b": ["rents"]}, nested_scope="key")
        assert matcher.count(["rents"]) == {"a": 1, "b": 1}

    def test_dictionary_scope_negation(self, sample_lexicon):
        """Test negated phrases are not double counted as plain polarity."""
        matcher = DictionaryMatcher(sample_lexicon, nested_scope="dictionary")
        counts = matcher.count(["not", "good"])
        assert counts["neg_positive"] == 1
        assert counts["positive"] == 0

    def test_dictionary_scope_tie_goes_to_first_category(self):
        """Test equal-length matches go to the first listed category."""
        matcher = DictionaryMatcher({"a": ["rent*"], "b": ["rents"]}, nested_scope="dictionary")
        assert matcher.count(["rents"]) == {"a": 1, "b": 0}

    def test_counts_bounded_by_tokens(self, sample_lexicon):
        """Test counts are non-negative ints summing to at most the token count."""
        tokenize = build_tokenizer()
        matcher = DictionaryMatcher(sample_lexicon, nested_scope="dictionary")
        texts = [
            "Not good, not bad, but better than a worse crisis.",
            "Improvement improves improving things.",
            "",
            "No improvement and no good failures.",
        ]
        for text in texts:
            tokens = tokenize(text)
            counts = matcher.count(tokens)
            assert all(isinstance(v, int) and v >= 0 for v in counts.values())
            assert sum(counts.values()) <= len(tokens)

    def test_empty_tokens(self):
        """Test an empty sentence yields zero counts."""
        matcher = DictionaryMatcher(HOUSING_DICTIONARY)
        assert matcher.count([]) == {"housing": 0}

    def test_invalid_scope(self):
        """Test unknown nested scopes are rejected."""
        with pytest.raises(ValueError):
            DictionaryMatcher({"a": ["x"]}, nested_scope="global")

    def test_lookup_feature_table(self, sample_corpus):
        """Test lookup builds a doc_id indexed feature table."""
        matcher = DictionaryMatcher(HOUSING_DICTIONARY)
        features = matcher.lookup(sample_corpus["text"], sample_corpus["doc_id"])
        assert features.index.name == "doc_id"
        assert list(features.columns) == ["housing", "n_tokens"]
        assert features["housing"].tolist() == [1, 0, 0, 1, 1, 0, 0, 0]
        assert (features["n_tokens"] > 0).all()


class TestHousingDictionary:
    """Test the curated housing dictionary."""

    @pytest.mark.parametrize("text", [
        "More social housing now",
        "Help first-time buyers",
        "Protect tenants from eviction",
        "Reform the Residential Tenancies Board",
        "Tackle homelessness",
        "Cap mortgage rates",
    ])
    def test_housing_sentences(self, text):
        """Test typical housing policy sentences are flagged."""
        matcher = DictionaryMatcher(HOUSING_DICTIONARY)
        assert matcher.count(build_tokenizer()(text))["housing"] >= 1

    def test_non_housing_sentence(self):
        """Test an unrelated sentence is not flagged."""
        matcher = DictionaryMatcher(HOUSING_DICTIONARY)
        assert matcher.count(build_tokenizer()("Invest in public transport"))["housing"] == 0


class TestLoadDictionary:
    """Test dictionary file loading."""

    def test_load_plain_mapping(self, tmp_path):
        """Test a plain category mapping is loaded."""
        path = tmp_path / "dict.json"
        path.write_text(json.dumps({"housing": ["hous*", " rent "]}))
        assert load_dictionary(path) == {"housing": ["hous*", "rent"]}

    def test_load_wrapped_mapping(self, tmp_path):
        """Test a mapping nested under 'categories' is loaded."""
        path = tmp_path / "dict.json"
        path.write_text(json.dumps({"categories": {"housing": ["hous*"]}}))
        assert load_dictionary(path) == {"housing": ["hous*"]}

    def test_empty_category_rejected(self, tmp_path):
        """Test an empty term list is rejected."""
        path = tmp_path / "dict.json"
        path.write_text(json.dumps({"housing": []}))
        with pytest.raises(ValueError, match="Invalid dictionary file"):
            load_dictionary(path)

    def test_missing_file(self, tmp_path):
        """Test a missing dictionary file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_dictionary(tmp_path / "missing.json")
