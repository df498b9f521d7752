"""Environment configuration loader for the manifesto analysis.

This module handles:
- Loading environment variables from .env file
- Locating the manifesto corpus, sentiment lexicon and optional dictionary file
- Choosing where plots are written and how verbose logging is
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Load .env file from project root (same directory as this file)
project_root = Path(__file__).parent
env_path = project_root / ".env"

if env_path.exists():
    load_dotenv(env_path)


def _optional_path(name: str) -> Optional[Path]:
    """Read an optional path from the environment.

    Args:
        name: Environment variable name.

    Returns:
        Optional[Path]: Resolved path, or None if the variable is unset or empty.
    """
    value = os.getenv(name, "").strip()
    if not value:
        return None
    path = Path(value).expanduser()
    return path if path.is_absolute() else project_root / path


# Input data
DATA_DIR: Path = project_root / "data"
MANIFESTO_CORPUS_PATH: Path = _optional_path("MANIFESTO_CORPUS_PATH") or DATA_DIR / "irish_manifestos_sentences.csv"
LEXICON_PATH: Path = _optional_path("LEXICON_PATH") or DATA_DIR / "LSD2015.json"
HOUSING_DICTIONARY_PATH: Optional[Path] = _optional_path("HOUSING_DICTIONARY_PATH")

# Output
OUTPUT_DIR: Path = _optional_path("OUTPUT_DIR") or project_root / "output"

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
