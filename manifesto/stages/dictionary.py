"""Dictionary matching stage: tokenization and category lookup.

Tokenization is delegated to scikit-learn's ``CountVectorizer`` analyzer so
that the dictionary lookup and the keyness document-feature matrix see the
same token stream. The matcher then walks each token sequence and counts
category hits:

1. Terms are glob patterns (``*`` any suffix, ``?`` one character).
2. Multi-word terms match contiguous tokens.
3. At each position the longest matching phrase wins and consumes its tokens.
4. ``nested_scope="key"`` scans every category independently, so a token may
   count once in each category it matches. ``nested_scope="dictionary"``
   scans once across all categories, so a token counts at most once overall.
"""

import json
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Iterable, Optional

import pandas as pd
from pydantic import BaseModel, Field, ValidationError, field_validator
from sklearn.feature_extraction.text import CountVectorizer

from manifesto.logger import get_logger

logger = get_logger("stages.dictionary")

# Words start and end with a letter or digit; hyphens and apostrophes are kept inside
TOKEN_PATTERN = r"(?u)[^\W_](?:[\w'-]*[^\W_])?"
GLOB_CHARS = set("*?[")
NESTED_SCOPES = ("key", "dictionary")

Tokenizer = Callable[[str], list[str]]


def _preprocess(text: str) -> str:
    return text.lower().replace("’", "'").replace("‘", "'")


def build_tokenizer(remove_numbers: bool = True) -> Tokenizer:
    """Build a case-normalizing word tokenizer.

    Args:
        remove_numbers: Drop tokens without any letter (e.g. '2020', '3.5').

    Returns:
        Tokenizer: Callable mapping a text to its ordered list of tokens.
    """
    analyzer = CountVectorizer(
        preprocessor=_preprocess,
        token_pattern=TOKEN_PATTERN,
        ngram_range=(1, 1),
    ).build_analyzer()

    if not remove_numbers:
        return analyzer

    def tokenize(text: str) -> list[str]:
        return [tok for tok in analyzer(text) if any(ch.isalpha() for ch in tok)]

    return tokenize


class DictionaryDefinition(BaseModel):
    """Validated category -> term list mapping."""

    categories: dict[str, list[str]] = Field(...)

    @field_validator("categories")
    @classmethod
    def check_terms(cls, value: dict[str, list[str]]) -> dict[str, list[str]]:
        if not value:
            raise ValueError("dictionary has no categories")
        cleaned = {}
        for category, terms in value.items():
            if not str(category).strip():
                raise ValueError("category labels must be non-empty")
            stripped = [str(term).strip() for term in terms]
            if not stripped or any(not term for term in stripped):
                raise ValueError(f"category '{category}' must have non-empty terms")
            cleaned[str(category)] = stripped
        return cleaned


def validate_dictionary(dictionary: dict, source: str = "dictionary") -> dict[str, list[str]]:
    """Validate a category -> terms mapping.

    Args:
        dictionary: Mapping to validate.
        source: Label used in error messages.

    Returns:
        dict[str, list[str]]: Validated mapping with stripped terms.

    Raises:
        ValueError: If the mapping is empty or has empty categories/terms.
    """
    try:
        return DictionaryDefinition(categories=dictionary).categories
    except ValidationError as e:
        raise ValueError(f"Invalid {source}: {e.errors()[0]['msg']}") from e


def load_dictionary(path: Path) -> dict[str, list[str]]:
    """Load a category -> terms dictionary from a JSON file.

    Args:
        path: JSON file holding either the mapping itself or
            ``{"categories": {...}}``.

    Returns:
        dict[str, list[str]]: Validated dictionary.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dictionary file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict) and set(data) == {"categories"}:
        data = data["categories"]

    dictionary = validate_dictionary(data, source=f"dictionary file {path.name}")
    logger.info(f"Loaded dictionary with {len(dictionary)} categories from {path.name}")
    return dictionary


def _word_matches(pattern: str, token: str) -> bool:
    if not GLOB_CHARS & set(pattern):
        return pattern == token
    if pattern.endswith("*") and not GLOB_CHARS & set(pattern[:-1]):
        return token.startswith(pattern[:-1])
    return fnmatchcase(token, pattern)


class DictionaryMatcher:
    """Count dictionary category matches in token sequences."""

    def __init__(self, dictionary: dict[str, Iterable[str]], nested_scope: str = "key") -> None:
        """Compile dictionary patterns.

        Args:
            dictionary: Mapping of category label to glob terms/phrases.
            nested_scope: "key" to count per category, "dictionary" to let one
                match consume tokens across all categories.
        """
        if nested_scope not in NESTED_SCOPES:
            raise ValueError(f"nested_scope must be one of {NESTED_SCOPES}, got '{nested_scope}'")

        self.nested_scope = nested_scope
        self.categories: list[str] = list(dictionary)
        self.patterns: list[tuple[str, tuple[str, ...]]] = []
        self._exact: dict[str, list[int]] = {}
        self._prefix: dict[str, list[int]] = {}
        self._glob: list[int] = []
        self._cache: dict[str, list[int]] = {}

        for category in self.categories:
            seen = set()
            for term in dictionary[category]:
                words = tuple(_preprocess(str(term)).split())
                if not words or words in seen:
                    continue
                seen.add(words)
                self._index_pattern(category, words)

        logger.debug(f"Compiled {len(self.patterns)} patterns in {len(self.categories)} categories")

    def _index_pattern(self, category: str, words: tuple[str, ...]) -> None:
        idx = len(self.patterns)
        self.patterns.append((category, words))
        first = words[0]
        if not GLOB_CHARS & set(first):
            self._exact.setdefault(first, []).append(idx)
        elif first.endswith("*") and not GLOB_CHARS & set(first[:-1]):
            self._prefix.setdefault(first[:-1], []).append(idx)
        else:
            self._glob.append(idx)

    def _candidates(self, token: str) -> list[int]:
        """Patterns whose first word matches ``token``, longest phrase first."""
        cached = self._cache.get(token)
        if cached is not None:
            return cached

        found = list(self._exact.get(token, []))
        for end in range(len(token) + 1):
            found.extend(self._prefix.get(token[:end], []))
        found.extend(i for i in self._glob if fnmatchcase(token, self.patterns[i][1][0]))

        order = {category: rank for rank, category in enumerate(self.categories)}
        found.sort(key=lambda i: (-len(self.patterns[i][1]), order[self.patterns[i][0]], i))
        self._cache[token] = found
        return found

    def _match_at(self, tokens: list[str], pos: int, category: Optional[str] = None) -> Optional[int]:
        for idx in self._candidates(tokens[pos]):
            pattern_category, words = self.patterns[idx]
            if category is not None and pattern_category != category:
                continue
            end = pos + len(words)
            if end > len(tokens):
                continue
            if all(_word_matches(words[j], tokens[pos + j]) for j in range(1, len(words))):
                return idx
        return None

    def count(self, tokens: list[str]) -> dict[str, int]:
        """Count category matches in one token sequence.

        Args:
            tokens: Lowercased tokens of a sentence.

        Returns:
            dict[str, int]: Match count per category (zero when absent).
        """
        counts = {category: 0 for category in self.categories}

        if self.nested_scope == "dictionary":
            self._scan(tokens, counts, category=None)
        else:
            for category in self.categories:
                self._scan(tokens, counts, category=category)

        return counts

    def _scan(self, tokens: list[str], counts: dict[str, int], category: Optional[str]) -> None:
        pos = 0
        while pos < len(tokens):
            idx = self._match_at(tokens, pos, category)
            if idx is None:
                pos += 1
                continue
            matched_category, words = self.patterns[idx]
            counts[matched_category] += 1
            pos += len(words)

    def lookup(
        self,
        texts: Iterable[str],
        doc_ids: Iterable[str],
        tokenizer: Optional[Tokenizer] = None,
    ) -> pd.DataFrame:
        """Build a per-document feature table of category counts.

        Args:
            texts: Sentence texts.
            doc_ids: Document ids aligned with ``texts``.
            tokenizer: Tokenizer to apply; defaults to ``build_tokenizer()``.

        Returns:
            pd.DataFrame: Indexed by doc_id with one int column per category
                plus ``n_tokens``.
        """
        tokenizer = tokenizer or build_tokenizer()
        rows = []
        index = []
        for doc_id, text in zip(doc_ids, texts):
            tokens = tokenizer(text)
            row = self.count(tokens)
            row["n_tokens"] = len(tokens)
            rows.append(row)
            index.append(doc_id)

        df_features = pd.DataFrame(rows, index=pd.Index(index, name="doc_id"),
                                   columns=self.categories + ["n_tokens"])
        df_features = df_features.fillna(0).astype(int)

        matched = int((df_features[self.categories].sum(axis=1) > 0).sum()) if rows else 0
        logger.info(f"Dictionary lookup: {matched}/{len(df_features)} documents with at least one match")
        return df_features
