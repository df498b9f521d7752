"""Configuration constants for the manifesto analysis."""

# Party names as they appear in the sentence-level manifesto files
PARTIES: dict[str, dict] = {
    "Fianna Fáil": {"abbreviation": "FF"},
    "Fine Gael": {"abbreviation": "FG"},
    "Sinn Féin": {"abbreviation": "SF"},
    "Labour Party": {"abbreviation": "LAB"},
    "Green Party": {"abbreviation": "GP"},
    "Social Democrats": {"abbreviation": "SD"},
    "Solidarity–People Before Profit": {"abbreviation": "PBP"},
    "Aontú": {"abbreviation": "AON"},
}

# Parties forming the government after the 2020 general election
GOVERNMENT_PARTIES: list[str] = ["Fianna Fáil", "Fine Gael", "Green Party"]

# Cohort labels used by the keyness comparison
TARGET_COHORT = "Government"
REFERENCE_COHORT = "Opposition"

# Lexicoder Sentiment Dictionary (LSD2015) category names
LSD_POSITIVE = "positive"
LSD_NEGATIVE = "negative"
LSD_NEG_POSITIVE = "neg_positive"
LSD_NEG_NEGATIVE = "neg_negative"
LSD_CATEGORIES: tuple[str, ...] = (LSD_NEGATIVE, LSD_POSITIVE, LSD_NEG_POSITIVE, LSD_NEG_NEGATIVE)

# Additive smoothing in the log-ratio sentiment score
SENTIMENT_SMOOTHING = 0.5
